"""Vector index contract and the in-memory cosine implementation."""

from __future__ import annotations

from math import sqrt
from typing import Protocol

from grounded_chat.errors import IndexSealedError
from grounded_chat.types import IndexEntry, ScoredSegment


class VectorIndex(Protocol):
    """Minimal vector index contract for ingestion and retrieval."""

    def add(self, entries: list[IndexEntry]) -> None:
        """Append entries to the index."""

    def query(self, vector: list[float], k: int) -> list[ScoredSegment]:
        """Return up to `k` segments by descending similarity."""


class InMemoryVectorIndex:
    """Append-only in-process index searched by full linear scan.

    Ingestion writes through `add` and calls `seal` once every source has been
    processed; the retriever only reads afterwards, so no locking is needed.
    """

    def __init__(self) -> None:
        self._entries: list[IndexEntry] = []
        self._sealed = False

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def sealed(self) -> bool:
        return self._sealed

    def add(self, entries: list[IndexEntry]) -> None:
        if self._sealed:
            raise IndexSealedError("Vector index is read-only once ingestion has finished")
        self._entries.extend(entries)

    def seal(self) -> None:
        self._sealed = True

    def query(self, vector: list[float], k: int) -> list[ScoredSegment]:
        if k <= 0:
            return []
        # sorted() is stable, so equal scores keep insertion order.
        ranked = sorted(
            (
                (entry.segment, _cosine_similarity(vector, entry.vector))
                for entry in self._entries
            ),
            key=lambda item: item[1],
            reverse=True,
        )
        return [
            ScoredSegment(segment=segment, score=score, rank=i + 1)
            for i, (segment, score) in enumerate(ranked[:k])
        ]


def _cosine_similarity(a: list[float], b: list[float]) -> float:
    if not a or not b or len(a) != len(b):
        return 0.0
    numerator = sum(x * y for x, y in zip(a, b, strict=True))
    norm_a = sqrt(sum(x * x for x in a))
    norm_b = sqrt(sum(y * y for y in b))
    if norm_a == 0 or norm_b == 0:
        return 0.0
    return numerator / (norm_a * norm_b)
