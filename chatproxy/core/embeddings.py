"""Embeddings-based similarity search over loaded text."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import List, Sequence

import openai

from .client import OpenAIClientWrapper

CHUNK_WORDS = 500
BATCH_SIZE = 500


@dataclass
class Embedding:
    origin: str
    sequence: int
    plain_text: str
    vector: List[float]


@dataclass
class Similarity:
    plain_text: str
    score: float


@dataclass
class Similarities:
    query: str
    relevant: List[Similarity] = field(default_factory=list)

    def ranked(self) -> List[Similarity]:
        return sorted(self.relevant, key=lambda s: s.score, reverse=True)

    def top(self, n: int) -> List[str]:
        """Plain texts of the *n* best matches; fewer when fewer are available."""
        if n < 0:
            raise ValueError("n must not be negative")
        return [s.plain_text for s in self.ranked()[:n]]


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    if len(a) != len(b):
        raise ValueError(f"vector dimensions differ: {len(a)} != {len(b)}")
    dot = sum(x * y for x, y in zip(a, b))
    norm = math.sqrt(sum(x * x for x in a)) * math.sqrt(sum(y * y for y in b))
    if not norm:
        return 0.0
    return dot / norm


def chunk(contents: str, chunk_size: int = CHUNK_WORDS) -> List[str]:
    """Split *contents* into chunks of at most *chunk_size* words.

    Each non-blank line is its own chunk, with whitespace collapsed; longer
    lines are cut into consecutive *chunk_size*-word pieces.
    """
    chunks: List[str] = []
    for line in contents.splitlines():
        words = line.split()
        for i in range(0, len(words), chunk_size):
            chunks.append(" ".join(words[i:i + chunk_size]))
    return chunks


class EmbeddingIndex:
    """Process-local list of embeddings; rebuilt on every run."""

    def __init__(self, client: OpenAIClientWrapper):
        self.client = client
        self.embeddings: List[Embedding] = []

    def __len__(self) -> int:
        return len(self.embeddings)

    def vectorize(self, origin: str, texts: List[str]) -> List[Embedding]:
        vectors = self.client.embed(texts)
        return [
            Embedding(origin=origin, sequence=i, plain_text=text, vector=vector)
            for i, (text, vector) in enumerate(zip(texts, vectors), start=1)
        ]

    def create_embeddings(self, origin: str, contents: str, chunk_size: int = CHUNK_WORDS) -> int:
        """Embed *contents* in batches; a failed batch is reported and skipped.

        Returns the number of embeddings added.
        """
        chunks = chunk(contents, chunk_size)
        added = 0
        for start in range(0, len(chunks), BATCH_SIZE):
            batch = chunks[start:start + BATCH_SIZE]
            try:
                embeddings = self.vectorize(origin, batch)
            except openai.OpenAIError as exc:
                self.client.report(exc)
                continue
            self.embeddings.extend(embeddings)
            added += len(embeddings)
        return added

    def relevant(self, query: str) -> Similarities:
        similarities = Similarities(query=query)
        if not self.embeddings:
            return similarities
        q = self.vectorize("query", [query])[0]
        for e in self.embeddings:
            similarities.relevant.append(
                Similarity(plain_text=e.plain_text, score=cosine_similarity(q.vector, e.vector))
            )
        return similarities
