"""Append-only transcript of every conversational event."""
from __future__ import annotations

import os
from datetime import datetime
from pathlib import Path
from typing import IO, Optional

APP_NAME = "chatproxy"


class Transcript:
    """Line-oriented writer recording events as ``<ROLE>) <content>``.

    The transcript never changes when the in-memory history is rolled back;
    a rollback is itself recorded as an event.
    """

    def __init__(self, stream: IO[str], owns_stream: bool = False):
        self.stream = stream
        self.owns_stream = owns_stream

    @property
    def path(self) -> Optional[Path]:
        name = getattr(self.stream, "name", None)
        if isinstance(name, str):
            return Path(name)
        return None

    def log(self, role: str, content: str) -> None:
        self.stream.write(f"{role.upper()}) {content}\n")
        self.stream.flush()

    def close(self) -> None:
        """Close the underlying file if this transcript opened it."""
        if self.owns_stream:
            self.stream.close()
        else:
            self.stream.flush()


def audit_log_dir() -> Path:
    """Return (and create) the directory holding timestamped audit logs."""
    state_home = os.getenv("XDG_STATE_HOME")
    base = Path(state_home) if state_home else Path.home() / ".local" / "state"
    directory = base / APP_NAME / "audit_logs"
    directory.mkdir(mode=0o700, parents=True, exist_ok=True)
    return directory


def create_audit_log() -> Transcript:
    stamp = datetime.now().strftime("%Y-%m-%d_%H-%M-%S")
    path = audit_log_dir() / f"{stamp}.log"
    return Transcript(path.open("w", encoding="utf-8"), owns_stream=True)
