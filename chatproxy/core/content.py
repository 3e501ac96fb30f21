"""Loading local files, directory trees and web pages as message text."""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Tuple
from urllib.parse import urlparse

import requests
from lxml import html as lxml_html
from readability import Document
from readability.readability import Unparseable
from rich.console import Console
from rich.markup import escape

from .errors import StrategyError

USER_AGENT = "chatproxy/0.1"
FETCH_TIMEOUT = 30

_WHITESPACE = re.compile(r"\s+")


@dataclass
class LoadedContent:
    text: str
    token_estimate: int


def guess_tokens(text: str) -> int:
    return len(text) // 2


def message_from_file(path) -> Tuple[str, int]:
    """Return the file wrapped as ``--<path>--`` plus a rough token count."""
    with open(path, encoding="utf-8", errors="replace") as fh:
        content = "".join(line.rstrip("\r\n") + "\n" for line in fh)
    message = f"--{path}--\n{content}\n"
    return message, guess_tokens(message)


def _is_hidden(path: Path) -> bool:
    return path.name.startswith(".")


def _walk(root: Path) -> List[Path]:
    """Regular files below *root* in lexical depth-first order, minus hidden entries."""
    if not root.is_dir():
        return [root]
    files: List[Path] = []
    for entry in sorted(root.iterdir(), key=lambda p: p.name):
        if _is_hidden(entry):
            continue
        if entry.is_dir():
            files.extend(_walk(entry))
        elif entry.is_file():
            files.append(entry)
    return files


def message_from_files(path, output: Optional[Console] = None) -> LoadedContent:
    parts: List[str] = []
    total = 0
    for file in _walk(Path(path)):
        message, tokens = message_from_file(file)
        if output is not None:
            output.print(escape(f"Tokens: {tokens} -> {file}"))
        parts.append(message)
        total += tokens
    if output is not None:
        output.print(f"Estimated Total Tokens: {total}")
    return LoadedContent("".join(parts), total)


# Elements that end a line of extracted text.
BLOCK_TAGS = {
    "p", "div", "br", "li", "tr", "section", "article", "nav", "header", "footer",
    "h1", "h2", "h3", "h4", "h5", "h6", "pre", "blockquote", "dt", "dd",
}


def readable_text(html: str) -> str:
    """Main text of an HTML page, one block per line.

    Readability picks the article body and drops scripts, styles and page
    chrome; whitespace inside each block is collapsed.
    """
    if not html.strip():
        return ""
    root = lxml_html.fromstring(Document(html).summary(html_partial=True))
    for el in root.iter():
        el.text = _WHITESPACE.sub(" ", el.text) if el.text else el.text
        el.tail = _WHITESPACE.sub(" ", el.tail) if el.tail else el.tail
        if el.tag in BLOCK_TAGS:
            el.tail = "\n" + (el.tail or "")
    lines = (" ".join(line.split()) for line in root.text_content().splitlines())
    return "\n".join(line for line in lines if line)


def normalise_url(target: str) -> str:
    if not urlparse(target).scheme:
        return "https://" + target
    return target


def fetch_url(target: str) -> str:
    url = normalise_url(target)
    resp = requests.get(url, headers={"User-Agent": USER_AGENT}, timeout=FETCH_TIMEOUT)
    resp.raise_for_status()
    if "html" not in resp.headers.get("Content-Type", "text/html"):
        return resp.text
    try:
        return readable_text(resp.text)
    except Unparseable as exc:
        raise StrategyError(f"could not extract readable text from {url}: {exc}") from exc


def load_content(target: str, output: Optional[Console] = None) -> LoadedContent:
    """Load *target* as a local file tree when it exists, otherwise as a URL."""
    if Path(target).exists():
        return message_from_files(target, output)
    text = fetch_url(target)
    return LoadedContent(text, guess_tokens(text))


def message_to_file(content: str, path) -> None:
    with open(path, "w", encoding="utf-8") as fh:
        fh.write(content + "\n")
