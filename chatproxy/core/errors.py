"""Exceptions raised by the chat session engine."""


class ChatProxyError(Exception):
    """Base class for every error raised by chatproxy itself."""


class ConfigurationError(ChatProxyError):
    """Missing credential or otherwise unusable configuration.

    Raised before any session state exists.
    """


class AuthorizationError(ChatProxyError):
    """The API rejected the credential. The session cannot continue."""


class StrategyError(ChatProxyError):
    """Malformed user input for a strategy; only the current turn is abandoned."""
