"""Command line entry point and the interactive chat driver."""
from __future__ import annotations

import argparse
import enum
import readline  # noqa: F401 – side-effect: history & line editing
import sys
from typing import Callable, List, Optional

import openai
import requests
from rich.markup import escape
from rich.panel import Panel

from .core import ChatProxyError, ChatSession, new_session
from .core.prompts import CHAT_INTRO
from .core.strategies import Failure, Terminate, classify, execute
from . import tasks
from .utils import Ansi, error_console, error_line

SessionFactory = Callable[..., ChatSession]

# ---------------------------------------------------------------------------
# Interactive driver
# ---------------------------------------------------------------------------


class DriverState(enum.Enum):
    AWAITING_PURPOSE = "awaiting purpose"
    CONVERSING = "conversing"


class ChatCLI:
    """Read–eval–print loop over a single conversation.

    The first line sets the purpose; every later line is classified into a
    strategy and executed until ``exit`` or end of input.
    """

    def __init__(self, session: ChatSession):
        self.session = session
        self.state = DriverState.AWAITING_PURPOSE

    def handle_line(self, line: str) -> bool:
        """Process one input line. Return False to end the conversation."""
        if self.state is DriverState.AWAITING_PURPOSE:
            self.session.set_purpose(line)
            self.state = DriverState.CONVERSING
            return True

        outcome = execute(classify(line), self.session)
        if isinstance(outcome, Terminate):
            return False
        if isinstance(outcome, Failure):
            self.session.log_error(outcome.error)
        return True

    def repl(self) -> None:
        """Run the interactive read–eval–print-loop."""
        if self.session.interactive():
            self.session.output.print(Panel.fit("chatproxy", style=f"{Ansi.BOLD} {Ansi.FG_MAGENTA}"))
        self.session.prompt(CHAT_INTRO)

        while True:
            try:
                line = self.session.read_line()
            except KeyboardInterrupt:
                self.session.output.print("\n\\[signal caught – exiting]")
                break
            if line is None:
                break

            if not line.strip():
                self.session.prompt()
                continue

            if not self.handle_line(line):
                break
            self.session.prompt()


# ---------------------------------------------------------------------------
# Entrypoint helpers
# ---------------------------------------------------------------------------


class _ArgumentParser(argparse.ArgumentParser):
    """Argument errors exit with status 1 like every other reported error."""

    def error(self, message):
        self.print_usage(sys.stderr)
        self.exit(1, f"{self.prog}: error: {message}\n")


def _parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(
        prog="chatproxy",
        description="Ask, summarise, quiz and chat with OpenAI models from the terminal.",
    )
    parser.add_argument("--model", "-m", help="Model name to use (default: $OPENAI_DEFAULT_MODEL or gpt-4o)")
    parser.add_argument("--token", help="API key (default: $OPENAI_API_KEY)")
    sub = parser.add_subparsers(dest="command", metavar="COMMAND")
    sub.required = True

    p = sub.add_parser("ask", help="answer a one-off question")
    p.add_argument("question", nargs="*")
    p = sub.add_parser("card", help="generate flashcards from a file, directory or URL")
    p.add_argument("path", nargs="?")
    p = sub.add_parser("tldr", help="summarise a file, directory or URL")
    p.add_argument("path", nargs="?")
    sub.add_parser("commit", help="write a commit message for the staged changes")
    sub.add_parser("chat", help="interactive conversation")
    p = sub.add_parser("checklist", help="review a project directory against a checklist")
    p.add_argument("path", nargs="?", default=".")
    p = sub.add_parser("relevant", help="find the passages of a document closest to a question")
    p.add_argument("path")
    p.add_argument("question", nargs="+")
    p.add_argument("--top", "-n", type=int, default=3)
    return parser


def _check_args(args: argparse.Namespace) -> None:
    """Reject bad arguments before any session (and audit log) is created."""
    command = args.command
    if command == "ask" and not args.question:
        raise ChatProxyError("must ask a question")
    if command in ("card", "tldr") and not args.path:
        raise ChatProxyError("must provide a file, directory or URL")
    if command == "relevant" and args.top < 1:
        raise ChatProxyError("--top must be at least 1")


def _run(args: argparse.Namespace, session_factory: SessionFactory) -> int:
    _check_args(args)
    command = args.command
    options = {"credential": args.token, "model": args.model}
    if command == "chat":
        options["streaming"] = True

    session = session_factory(**options)
    try:
        _dispatch(command, args, session)
    finally:
        session.transcript.close()
    return 0


def _dispatch(command: str, args: argparse.Namespace, session: ChatSession) -> None:
    if command == "ask":
        session.output.print(escape(tasks.ask(session, " ".join(args.question))))

    elif command in ("card", "tldr"):
        if command == "card":
            cards = tasks.card(session, args.path)
            session.output.print(escape(f"\n{tasks.CARD_SEPARATOR}\n".join(cards)))
        else:
            session.output.print(escape(tasks.tldr(session, args.path)))

    elif command == "commit":
        tasks.commit(session)

    elif command == "chat":
        ChatCLI(session).repl()
        if session.transcript_path is not None:
            session.output.print(escape(f"Transcript saved to {session.transcript_path}"))

    elif command == "checklist":
        session.output.print(escape(tasks.checklist(session, args.path)))

    elif command == "relevant":
        for passage in tasks.relevant(session, args.path, " ".join(args.question), args.top):
            session.output.print(escape(passage))


def main(argv: Optional[List[str]] = None, session_factory: SessionFactory = new_session) -> int:
    """Run one CLI command; return the process exit code."""
    args = _parser().parse_args(argv)
    try:
        return _run(args, session_factory)
    except (ChatProxyError, OSError, requests.RequestException, openai.OpenAIError) as exc:
        error_console.print(error_line(str(exc)))
        return 1
    except KeyboardInterrupt:
        error_console.print("\n\\[interrupted]")
        return 1


def run_cli() -> None:  # pragma: no cover
    sys.exit(main())


if __name__ == "__main__":  # pragma: no cover
    run_cli()
