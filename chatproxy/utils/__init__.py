from .ansi import (
    Ansi,
    USER_LABEL,
    ASSISTANT_LABEL,
    SYSTEM_LABEL,
    error_line,
    warning_line,
    console,
    error_console,
    make_console,
)
from .spinner import Spinner

__all__ = [
    "Ansi",
    "USER_LABEL",
    "ASSISTANT_LABEL",
    "SYSTEM_LABEL",
    "error_line",
    "warning_line",
    "console",
    "error_console",
    "make_console",
    "Spinner",
]
