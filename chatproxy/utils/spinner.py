"""Spinner shown while waiting for the first streamed token."""
from __future__ import annotations

from rich.console import Console
from yaspin import yaspin


class Spinner:
    """Display a small spinner next to a prefix while work is done.

    Nothing is drawn unless *console* is attached to a terminal, so captured
    output (files, pipes, test buffers) only ever receives the prefix.
    """

    def __init__(self, console: Console, prefix: str = ""):
        self._console = console
        self._prefix = prefix
        self._started = False
        self._enabled = console.is_terminal
        # spinner after the text so prefix stays at the start
        self._spinner = yaspin(text="", side="right") if self._enabled else None

    def start(self) -> None:
        if self._started:
            return
        self._console.print(self._prefix, end="")
        self._console.file.flush()
        if self._spinner is not None:
            self._spinner.start()
        self._started = True

    def stop(self) -> None:
        if not self._started:
            return
        if self._spinner is not None:
            self._spinner.stop()
            self._console.print(f"\r{self._prefix}", end="")
            self._console.file.flush()
        self._started = False
