"""Terminal helpers for chatting with OpenAI models.

Commands
--------
ask QUESTION            answer a one-off question
card PATH|URL           generate flashcards from a file, directory or web page
tldr PATH|URL           summarise a file, directory or web page
commit                  write (and apply) a commit message for the staged diff
checklist [PATH]        review a project directory against a checklist
relevant PATH QUESTION  show the passages of PATH closest to QUESTION
chat                    interactive conversation

Inside ``chat`` the first line sets the assistant's purpose. After that:

    >PATH|URL           load a file, directory or web page into the conversation
    <PATH PROMPT        answer PROMPT and write the reply to PATH
    ?                   ask for reading comprehension questions on the material so far
    exit                end the conversation

Every event is appended to a transcript under
``$XDG_STATE_HOME/chatproxy/audit_logs``. ``OPENAI_API_KEY`` is required.

Run ``python -m chatproxy`` or the ``chatproxy`` console script.
"""
# Re-export useful symbols for convenience
from .core import (
    SUPPORTED_MODELS,
    AuthorizationError,
    ChatProxyError,
    ChatSession,
    ConfigurationError,
    OpenAIClientWrapper,
    SessionConfig,
    StrategyError,
    new_session,
)
from .cli import ChatCLI, main, run_cli

__all__ = [
    "SUPPORTED_MODELS",
    "AuthorizationError",
    "ChatProxyError",
    "ChatSession",
    "ConfigurationError",
    "OpenAIClientWrapper",
    "SessionConfig",
    "StrategyError",
    "new_session",
    "ChatCLI",
    "main",
    "run_cli",
]
