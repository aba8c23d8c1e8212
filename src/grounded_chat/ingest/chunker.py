"""Recursive-separator character chunking with exact overlap."""

from __future__ import annotations

from grounded_chat.config import ChunkingConfig
from grounded_chat.errors import ConfigurationError
from grounded_chat.types import Document, Segment


class RecursiveCharacterChunker:
    """Splits document text into overlapping windows of at most `chunk_size` chars.

    Design notes:
    1. Greedy windows.
       Each window starts at the current offset and may extend `chunk_size`
       characters. The window is cut at the latest separator of the
       highest-priority tier found inside it (paragraph, line, sentence, word).
       The separator stays with the segment it terminates. Only when no tier
       matches is the window cut hard at `chunk_size`.

    2. Exact overlap.
       Segments are contiguous slices of the source text. The next window
       starts `chunk_overlap` characters before the previous one ended, so
       consecutive segments share exactly `chunk_overlap` characters and
       dropping that prefix from every later segment rebuilds the text.

    3. Termination.
       A cut is admissible only past `start + chunk_overlap`, so every window
       advances the offset by at least one character.
    """

    def __init__(self, config: ChunkingConfig | None = None) -> None:
        self.config = config or ChunkingConfig()
        if self.config.chunk_overlap < 0:
            raise ConfigurationError("chunk_overlap must be greater than or equal to 0")
        if self.config.chunk_size <= self.config.chunk_overlap:
            raise ConfigurationError("chunk_size must be greater than chunk_overlap")

    def chunk_document(self, document: Document) -> list[Segment]:
        """Chunk a loaded document into ordered, overlapping segments."""

        segments: list[Segment] = []
        for index, (start, end) in enumerate(self._spans(document.text)):
            segments.append(
                Segment(
                    segment_id=f"{document.doc_id}-chunk-{index:04d}",
                    doc_id=document.doc_id,
                    text=document.text[start:end],
                    start_index=start,
                    metadata={
                        **document.metadata,
                        "chunk_index": index,
                        "start_index": start,
                    },
                )
            )
        return segments

    def _spans(self, text: str) -> list[tuple[int, int]]:
        size = self.config.chunk_size
        overlap = self.config.chunk_overlap
        spans: list[tuple[int, int]] = []
        start = 0

        while start < len(text):
            limit = start + size
            if limit >= len(text):
                spans.append((start, len(text)))
                break
            end = self._break_point(text, start, limit)
            spans.append((start, end))
            start = end - overlap

        return spans

    def _break_point(self, text: str, start: int, limit: int) -> int:
        floor = start + self.config.chunk_overlap
        for tier in self.config.separators:
            best = -1
            for separator in tier:
                if not separator:
                    continue
                position = text.rfind(separator, floor, limit)
                if position != -1:
                    best = max(best, position + len(separator))
            if best > floor:
                return best
        return limit


def split_document(document: Document, chunk_size: int, chunk_overlap: int) -> list[Segment]:
    """Split one document with explicit parameters and the default separators."""

    config = ChunkingConfig(chunk_size=chunk_size, chunk_overlap=chunk_overlap)
    return RecursiveCharacterChunker(config).chunk_document(document)
