"""Conversation state for a single in-process chat."""

from __future__ import annotations

import sys
from typing import IO, List, Optional

from rich.console import Console
from rich.markup import escape

from ..utils import SYSTEM_LABEL, USER_LABEL
from .client import OpenAIClientWrapper, ValidateOnly
from .messages import Message, MessageLog
from .transcript import Transcript


class ChatSession:
    """Owns the message log and the streams a conversation talks through.

    Exactly one session drives one conversation; nothing here is shared
    between threads.
    """

    def __init__(
        self,
        client: OpenAIClientWrapper,
        transcript: Transcript,
        input: Optional[IO[str]] = None,
    ) -> None:
        self.client = client
        self.transcript = transcript
        self.input: IO[str] = input if input is not None else sys.stdin
        self.messages = MessageLog(transcript)

    @property
    def output(self) -> Console:
        return self.client.output

    @property
    def errors(self) -> Console:
        return self.client.errors

    @property
    def streaming(self) -> bool:
        return self.client.streaming

    @property
    def transcript_path(self):
        return self.transcript.path

    # ---------------- History ----------------

    def set_purpose(self, text: str) -> Message:
        return self.messages.set_purpose(text)

    def record_message(self, role: str, text: str) -> Message:
        return self.messages.record(role, text)

    def rollback_last_message(self) -> List[Message]:
        return self.messages.rollback_last()

    def get_completion(self, option: Optional[ValidateOnly] = None) -> str:
        return self.client.chat_completion(self.messages, option)

    # ---------------- Terminal I/O ----------------

    def log_error(self, exc: BaseException) -> None:
        self.client.report(exc)

    def prompt(self, *prompts: str) -> None:
        """Print system prompts, then the marker for the user's next line."""
        for text in prompts:
            self.output.print(f"{SYSTEM_LABEL} {escape(text)}")
        self.output.print(f"{USER_LABEL} ", end="")
        self.output.file.flush()

    def interactive(self) -> bool:
        isatty = getattr(self.input, "isatty", None)
        return self.input is sys.stdin and isatty is not None and isatty()

    def read_line(self) -> Optional[str]:
        """Return the next input line without its newline, or ``None`` at EOF."""
        if self.interactive():
            try:
                return input()
            except EOFError:
                return None
        line = self.input.readline()
        if not line:
            return None
        return line.rstrip("\r\n")
