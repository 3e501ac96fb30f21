"""One-shot flows built on a chat session: ask, card, tldr, commit, checklist, relevant."""

from __future__ import annotations

import subprocess
from typing import List, Sequence

import questionary
from rich.markup import escape

from .core import ChatProxyError, ChatSession, ROLE_USER
from .core.content import load_content
from .core.embeddings import EmbeddingIndex
from .core.prompts import (
    ASK_PURPOSE,
    CARD_PURPOSE,
    CHECKLIST_PURPOSE,
    COMMIT_PURPOSE,
    TLDR_PURPOSE,
)

CARD_SEPARATOR = "---"


def ask(session: ChatSession, question: str) -> str:
    session.set_purpose(ASK_PURPOSE)
    session.record_message(ROLE_USER, question)
    return session.get_completion()


def card(session: ChatSession, path: str) -> List[str]:
    """Return flashcards generated from the file tree or URL at *path*."""
    session.set_purpose(CARD_PURPOSE)
    content = load_content(path, session.output)
    session.record_message(ROLE_USER, content.text)
    reply = session.get_completion()
    return [c.strip() for c in reply.split(CARD_SEPARATOR) if c.strip()]


def tldr(session: ChatSession, path: str) -> str:
    session.set_purpose(TLDR_PURPOSE)
    content = load_content(path, session.output)
    session.record_message(ROLE_USER, content.text)
    return session.get_completion()


def checklist(session: ChatSession, path: str = ".") -> str:
    """Review the project at *path* against a fixed packaging checklist."""
    session.set_purpose(CHECKLIST_PURPOSE)
    content = load_content(path, session.output)
    session.record_message(ROLE_USER, content.text)
    return session.get_completion()


# ---------------------------------------------------------------------------
# git
# ---------------------------------------------------------------------------


def _git(*args: str) -> subprocess.CompletedProcess:
    return subprocess.run(["git", *args], capture_output=True, text=True)


def commit_message(session: ChatSession) -> str:
    """Generate a commit message for the staged changes."""
    session.set_purpose(COMMIT_PURPOSE)
    diff = _git("diff", "--cached")
    if diff.returncode != 0:
        raise ChatProxyError(diff.stderr.strip() or "git diff failed")
    if not diff.stdout:
        raise ChatProxyError("no files staged for commit")
    session.record_message(ROLE_USER, diff.stdout)
    return session.get_completion()


def confirm(session: ChatSession, question: str) -> bool:
    if session.interactive():
        return bool(questionary.confirm(question, default=False).ask())
    session.output.print(escape(question))
    line = session.read_line()
    return bool(line) and line.strip()[:1].upper() == "Y"


def commit(session: ChatSession) -> str:
    """Commit the staged changes with a generated, user-approved message."""
    if _git("rev-parse", "--is-inside-work-tree").returncode != 0:
        raise ChatProxyError("must be in a git repository")
    message = commit_message(session)
    session.output.print(escape(message))
    if not confirm(session, "Accept Generated Message? (Y)es/(N)o"):
        raise ChatProxyError("generated commit message not accepted")
    result = _git("commit", "-m", message)
    if result.returncode != 0:
        raise ChatProxyError(result.stderr.strip() or "git commit failed")
    return message


# ---------------------------------------------------------------------------
# Similarity search
# ---------------------------------------------------------------------------


def relevant(session: ChatSession, path: str, question: str, top: int = 3) -> Sequence[str]:
    """Return the *top* passages of *path* closest in meaning to *question*."""
    index = EmbeddingIndex(session.client)
    content = load_content(path, session.output)
    index.create_embeddings(path, content.text)
    return index.relevant(question).top(top)
