"""Colour and styling helpers built on :mod:`rich`."""

import os
from typing import IO, Optional

from rich.console import Console
from rich.markup import escape


def make_console(file: Optional[IO[str]] = None, stderr: bool = False) -> Console:
    """Return a console writing to *file* that never reflows or rewrites text.

    Model output and file contents pass through these consoles verbatim, so
    wrapping, highlighting and ``:emoji:`` substitution are all switched off.
    """
    return Console(
        file=file,
        stderr=stderr,
        soft_wrap=True,
        highlight=False,
        emoji=False,
    )


console = make_console()
error_console = make_console(stderr=True)


class Ansi:
    """Lightweight collection of style names used throughout the app."""

    BOLD = "bold"

    FG_GREEN = "green"
    FG_CYAN = "cyan"
    FG_MAGENTA = "magenta"
    FG_YELLOW = "yellow"
    FG_RED = "red"

    @staticmethod
    def style(text: str, *codes: str) -> str:
        """Return *text* wrapped in rich markup unless ``NO_COLOR`` is set."""
        if os.getenv("NO_COLOR") is not None:
            return text
        style = " ".join(codes)
        return f"[{style}]{text}[/]"


# Role markers as they appear on screen; they match the transcript prefixes.
USER_LABEL = Ansi.style("USER)", Ansi.FG_CYAN, Ansi.BOLD)
ASSISTANT_LABEL = Ansi.style("ASSISTANT)", Ansi.FG_GREEN)
SYSTEM_LABEL = Ansi.style("SYSTEM)", Ansi.FG_YELLOW)


def _tagged(tag: str, message: str, *codes: str) -> str:
    # The opening bracket is escaped so a bare (NO_COLOR) tag is not read as markup.
    return rf"\[{Ansi.style(tag, *codes)}] {escape(message)}"


def error_line(message: str) -> str:
    """Markup for ``[error] <message>``; *message* is printed literally."""
    return _tagged("error", message, Ansi.FG_RED, Ansi.BOLD)


def warning_line(message: str) -> str:
    return _tagged("warning", message, Ansi.FG_YELLOW, Ansi.BOLD)
