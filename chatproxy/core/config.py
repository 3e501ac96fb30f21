"""Session configuration and the default session factory."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, replace
from pathlib import Path
from typing import IO, Any, Optional

from openai import OpenAI  # type: ignore
from rich.console import Console

from ..utils import console, error_console, make_console, warning_line
from .client import DEFAULT_EMBEDDING_MODEL, DEFAULT_MODEL, OpenAIClientWrapper
from .errors import ConfigurationError
from .session import ChatSession
from .transcript import Transcript, create_audit_log

API_KEY_ENV = "OPENAI_API_KEY"
BASE_URL_ENV = "OPENAI_BASE_URL"
MODEL_ENV = "OPENAI_DEFAULT_MODEL"

# Supported models
SUPPORTED_MODELS = [
    "gpt-4.1",
    "gpt-4.1-mini",
    "gpt-4o",  # default
    "gpt-4o-mini",
    "o1",
    "o3",
    "o4-mini",
]

_ZSHRC_KEY = re.compile(r"(?:export\s+)?OPENAI_API_KEY\s*=\s*['\"]?([^'\"\n]+)['\"]?")


@dataclass
class SessionConfig:
    """Every option a session recognises, applied once at construction.

    ``None`` streams mean the process's stdin/stdout/stderr; a ``None``
    transcript means a fresh timestamped audit log.
    """

    credential: Optional[str] = None
    input: Optional[IO[str]] = None
    output: Optional[IO[str]] = None
    error_output: Optional[IO[str]] = None
    transcript: Optional[IO[str]] = None
    streaming: bool = False
    fixed_response: Optional[str] = None
    model: Optional[str] = None
    base_url: Optional[str] = None
    embedding_model: str = DEFAULT_EMBEDDING_MODEL


def resolve_api_key(explicit: Optional[str] = None) -> str:
    """Return the API key from *explicit*, the environment or ``~/.zshrc``."""
    if explicit:
        return explicit
    api_key = os.getenv(API_KEY_ENV)
    if api_key:
        return api_key

    # Fallback: attempt to read from ~/.zshrc (convenience for macOS users)
    zshrc_path = Path.home() / ".zshrc"
    if zshrc_path.exists():
        match = _ZSHRC_KEY.search(zshrc_path.read_text(errors="replace"))
        if match:
            return match.group(1).strip()

    raise ConfigurationError(
        f"must have {API_KEY_ENV} env var set or pass a token explicitly "
        "(tried the environment and ~/.zshrc)"
    )


def resolve_model(requested: Optional[str] = None, errors: Console = error_console) -> str:
    """Return *requested* (or the environment default) if supported, else the default model.

    The fallback is announced on *errors*.
    """
    model = requested or os.getenv(MODEL_ENV) or DEFAULT_MODEL
    if model not in SUPPORTED_MODELS:
        errors.print(
            warning_line(
                f"model '{model}' is not in the supported list. "
                f"Falling back to default '{DEFAULT_MODEL}'."
            )
        )
        return DEFAULT_MODEL
    return model


def new_session(config: Optional[SessionConfig] = None, *, client: Optional[OpenAI] = None, **options: Any) -> ChatSession:
    """Build a :class:`ChatSession` from *config* plus keyword overrides.

    *client* replaces the OpenAI SDK client, which lets tests drive the
    completion engine with a mock. The credential is still required.
    """
    config = replace(config or SessionConfig(), **options)
    api_key = resolve_api_key(config.credential)

    if client is None:
        client_kwargs = {"api_key": api_key}
        base_url = config.base_url or os.getenv(BASE_URL_ENV)
        if base_url:
            client_kwargs["base_url"] = base_url
        client = OpenAI(**client_kwargs)  # type: ignore[arg-type]

    output = make_console(config.output) if config.output is not None else console
    errors = make_console(config.error_output) if config.error_output is not None else error_console
    transcript = Transcript(config.transcript) if config.transcript is not None else create_audit_log()

    wrapper = OpenAIClientWrapper(
        client,
        output=output,
        errors=errors,
        model=resolve_model(config.model, errors),
        embedding_model=config.embedding_model,
        streaming=config.streaming,
        fixed_response=config.fixed_response,
    )
    return ChatSession(wrapper, transcript, input=config.input)
