from .client import OpenAIClientWrapper, ValidateOnly
from .config import SUPPORTED_MODELS, SessionConfig, new_session
from .errors import AuthorizationError, ChatProxyError, ConfigurationError, StrategyError
from .messages import Message, MessageLog, ROLE_ASSISTANT, ROLE_SYSTEM, ROLE_USER
from .session import ChatSession
from .transcript import Transcript

__all__ = [
    "AuthorizationError",
    "ChatProxyError",
    "ChatSession",
    "ConfigurationError",
    "Message",
    "MessageLog",
    "OpenAIClientWrapper",
    "ROLE_ASSISTANT",
    "ROLE_SYSTEM",
    "ROLE_USER",
    "SUPPORTED_MODELS",
    "SessionConfig",
    "StrategyError",
    "Transcript",
    "ValidateOnly",
    "new_session",
]
