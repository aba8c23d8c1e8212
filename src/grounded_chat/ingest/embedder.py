"""Embedding abstractions, the OpenAI adapter and a deterministic baseline."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from hashlib import blake2b
from math import sqrt
from typing import Any

from grounded_chat.errors import EmbeddingServiceError

logger = logging.getLogger(__name__)


class Embedder(ABC):
    """Embedder interface used by ingest and retrieval components."""

    @abstractmethod
    def embed_documents(self, texts: list[str]) -> list[list[float]]:
        """Embed many documents."""

    @abstractmethod
    def embed_query(self, text: str) -> list[float]:
        """Embed one query."""


class LangChainEmbedder(Embedder):
    """Adapts a LangChain `Embeddings` object (e.g. `OpenAIEmbeddings`).

    Provider failures are surfaced as `EmbeddingServiceError` and never retried.
    """

    def __init__(self, embeddings: Any) -> None:
        self._embeddings = embeddings

    def embed_documents(self, texts: list[str]) -> list[list[float]]:
        if not texts:
            return []
        try:
            vectors = self._embeddings.embed_documents(texts)
        except Exception as exc:
            raise EmbeddingServiceError(f"Embedding request failed: {exc}") from exc
        if len(vectors) != len(texts):
            raise EmbeddingServiceError(
                f"Embedding provider returned {len(vectors)} vectors for {len(texts)} texts"
            )
        logger.debug("Embedded %d texts", len(texts))
        return [list(vector) for vector in vectors]

    def embed_query(self, text: str) -> list[float]:
        try:
            return list(self._embeddings.embed_query(text))
        except Exception as exc:
            raise EmbeddingServiceError(f"Embedding request failed: {exc}") from exc


class HashingEmbedder(Embedder):
    """Deterministic sparse-like embedding without external model calls.

    Used for offline runs (`EMBEDDING_PROVIDER=hashing`) and tests.
    """

    def __init__(self, dimension: int = 256) -> None:
        self.dimension = dimension

    def embed_documents(self, texts: list[str]) -> list[list[float]]:
        return [self._embed(text) for text in texts]

    def embed_query(self, text: str) -> list[float]:
        return self._embed(text)

    def _embed(self, text: str) -> list[float]:
        vector = [0.0 for _ in range(self.dimension)]
        tokens = text.lower().split()
        if not tokens:
            return vector

        for token in tokens:
            digest = blake2b(token.encode("utf-8"), digest_size=8).digest()
            idx = int.from_bytes(digest[:4], "little") % self.dimension
            sign = -1.0 if digest[4] % 2 else 1.0
            vector[idx] += sign

        norm = sqrt(sum(value * value for value in vector))
        if norm == 0:
            return vector
        return [value / norm for value in vector]
