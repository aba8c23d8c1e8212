"""End-to-end ingest pipeline: load -> chunk -> embed -> add."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path

from grounded_chat.errors import EmbeddingServiceError, SourceLoadError
from grounded_chat.ingest.chunker import RecursiveCharacterChunker
from grounded_chat.ingest.embedder import Embedder
from grounded_chat.ingest.sources import LoaderRegistry, SourceSpec, parse_source
from grounded_chat.obs.tracing import Timer
from grounded_chat.retrieval.vector_store import InMemoryVectorIndex
from grounded_chat.types import IndexEntry, Segment

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class SourceOutcome:
    source: SourceSpec
    document_count: int
    segment_count: int


@dataclass(slots=True)
class SourceFailure:
    source: SourceSpec
    error: str


@dataclass(slots=True)
class IngestReport:
    """Per-source results of one ingestion run."""

    indexed: list[SourceOutcome] = field(default_factory=list)
    failed: list[SourceFailure] = field(default_factory=list)

    @property
    def segment_count(self) -> int:
        return sum(outcome.segment_count for outcome in self.indexed)

    @property
    def ok(self) -> bool:
        """True when at least one segment reached the index."""
        return self.segment_count > 0


class IngestPipeline:
    """Coordinates loader/chunker/embedder/vector index stages.

    Sources are processed independently: a load or embedding failure is
    recorded in the report and the remaining sources are still indexed. When
    every source has been handled the index is sealed, so all writes complete
    before the first query.
    """

    def __init__(
        self,
        loader_registry: LoaderRegistry,
        chunker: RecursiveCharacterChunker,
        embedder: Embedder,
        vector_index: InMemoryVectorIndex,
    ) -> None:
        self._loader_registry = loader_registry
        self._chunker = chunker
        self._embedder = embedder
        self._vector_index = vector_index

    def ingest(self, sources: Iterable[str | Path | SourceSpec]) -> IngestReport:
        """Ingest every source, then seal the index."""

        report = IngestReport()
        for raw in sources:
            source = parse_source(raw)
            try:
                with Timer() as timer:
                    outcome = self.ingest_source(source)
            except (SourceLoadError, EmbeddingServiceError) as exc:
                logger.warning("Skipping source %s: %s", source, exc)
                report.failed.append(SourceFailure(source=source, error=str(exc)))
                continue
            logger.info(
                "Indexed %s: %d documents, %d segments in %.0f ms",
                source,
                outcome.document_count,
                outcome.segment_count,
                timer.elapsed_ms,
            )
            report.indexed.append(outcome)

        self._vector_index.seal()
        logger.info(
            "Ingestion finished: %d sources indexed, %d failed, %d segments",
            len(report.indexed),
            len(report.failed),
            report.segment_count,
        )
        return report

    def ingest_source(self, source: SourceSpec) -> SourceOutcome:
        """Load, chunk, embed and index a single source."""

        documents = self._loader_registry.load(source)
        segments: list[Segment] = []
        for document in documents:
            segments.extend(self._chunker.chunk_document(document))

        vectors = self._embedder.embed_documents([segment.text for segment in segments])
        self._vector_index.add(
            [
                IndexEntry(segment=segment, vector=vector)
                for segment, vector in zip(segments, vectors, strict=True)
            ]
        )
        return SourceOutcome(
            source=source,
            document_count=len(documents),
            segment_count=len(segments),
        )
