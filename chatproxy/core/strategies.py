"""Classifying one line of user input and acting on it.

Every line maps to exactly one strategy variant; executing it against a
session yields an outcome telling the driver whether to keep going.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

import openai
import requests

from .client import ValidateOnly
from .content import load_content, message_to_file
from .errors import StrategyError
from .messages import ROLE_ASSISTANT, ROLE_USER
from .prompts import FILES_RECEIVED, QUESTION_PROMPT

LOAD_PREFIX = ">"
WRITE_PREFIX = "<"
QUESTION_PREFIX = "?"
EXIT_COMMAND = "exit"
EXIT_MARKER = "*exit*"


# ---------------------------------------------------------------------------
# Strategies
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class FileLoad:
    path: str


@dataclass(frozen=True)
class FileWrite:
    path: str
    # None when the line had no space separating the path from the prompt
    prompt: Optional[str]


@dataclass(frozen=True)
class Default:
    text: str


@dataclass(frozen=True)
class Exit:
    pass


Strategy = Union[FileLoad, FileWrite, Default, Exit]


# ---------------------------------------------------------------------------
# Outcomes
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Continue:
    pass


@dataclass(frozen=True)
class Terminate:
    pass


@dataclass(frozen=True)
class Failure:
    error: Exception


Outcome = Union[Continue, Terminate, Failure]

# Errors that abandon the current turn without ending the conversation.
RECOVERABLE_ERRORS = (StrategyError, OSError, requests.RequestException, openai.OpenAIError)


def classify(line: str) -> Strategy:
    if line.startswith(LOAD_PREFIX):
        return FileLoad(line[len(LOAD_PREFIX):])
    if line.startswith(WRITE_PREFIX):
        path, sep, prompt = line[len(WRITE_PREFIX):].partition(" ")
        return FileWrite(path, prompt if sep else None)
    if line == EXIT_COMMAND:
        return Exit()
    if line.startswith(QUESTION_PREFIX):
        return Default(QUESTION_PROMPT)
    return Default(line)


def _load(strategy: FileLoad, session) -> None:
    if not strategy.path:
        raise StrategyError("need a file, directory or URL to load")
    content = load_content(strategy.path, session.output)
    session.record_message(ROLE_USER, content.text)
    reply = session.get_completion(ValidateOnly(FILES_RECEIVED))
    session.record_message(ROLE_ASSISTANT, reply)


def _write(strategy: FileWrite, session) -> None:
    if strategy.prompt is None or not strategy.path:
        raise StrategyError("need a file and a prompt to write a file")
    session.record_message(ROLE_USER, strategy.prompt)
    reply = session.get_completion()
    message_to_file(reply, strategy.path)


def _default(strategy: Default, session) -> None:
    session.record_message(ROLE_USER, strategy.text)
    reply = session.get_completion()
    session.record_message(ROLE_ASSISTANT, reply)


def execute(strategy: Strategy, session) -> Outcome:
    """Run *strategy* against *session*.

    Input, file, fetch and transport errors come back as :class:`Failure`.
    :class:`~chatproxy.core.errors.AuthorizationError` is raised: the
    conversation cannot go on without a valid credential.
    """
    if isinstance(strategy, Exit):
        session.transcript.log(ROLE_USER, EXIT_MARKER)
        return Terminate()
    try:
        if isinstance(strategy, FileLoad):
            _load(strategy, session)
        elif isinstance(strategy, FileWrite):
            _write(strategy, session)
        elif isinstance(strategy, Default):
            _default(strategy, session)
        else:
            raise TypeError(f"unknown strategy {strategy!r}")
    except RECOVERABLE_ERRORS as exc:
        return Failure(exc)
    return Continue()
