"""Fixed top-k retriever over the vector index."""

from __future__ import annotations

import logging

from grounded_chat.config import RetrievalConfig
from grounded_chat.ingest.embedder import Embedder
from grounded_chat.retrieval.vector_store import VectorIndex
from grounded_chat.types import ScoredSegment, Segment

logger = logging.getLogger(__name__)


class Retriever:
    """Embeds the question and returns the `top_k` most similar segments.

    The embedder must be the one used at ingestion; mixing embedding models is
    not detected here.
    """

    def __init__(
        self,
        vector_index: VectorIndex,
        embedder: Embedder,
        config: RetrievalConfig | None = None,
    ) -> None:
        self.vector_index = vector_index
        self.embedder = embedder
        self.config = config or RetrievalConfig()

    def retrieve(self, question: str) -> list[Segment]:
        return [hit.segment for hit in self.retrieve_scored(question)]

    def retrieve_scored(self, question: str) -> list[ScoredSegment]:
        query_vector = self.embedder.embed_query(question)
        hits = self.vector_index.query(query_vector, self.config.top_k)
        logger.debug(
            "Retrieved %s",
            ", ".join(f"{hit.segment.segment_id}={hit.score:.4f}" for hit in hits) or "nothing",
        )
        return hits
