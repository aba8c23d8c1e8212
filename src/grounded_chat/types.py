"""Shared domain models."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


@dataclass(frozen=True, slots=True)
class Document:
    """A loaded source unit (PDF page, web page, text file) before chunking."""

    doc_id: str
    text: str
    metadata: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class Segment:
    """A chunked section of a source document."""

    segment_id: str
    doc_id: str
    text: str
    start_index: int
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class IndexEntry:
    segment: Segment
    vector: list[float]


@dataclass(frozen=True, slots=True)
class ScoredSegment:
    """A retrieval result with similarity score and 1-based rank."""

    segment: Segment
    score: float
    rank: int = 0


class Role(str, Enum):
    HUMAN = "human"
    AGENT = "agent"


@dataclass(frozen=True, slots=True)
class Turn:
    role: Role
    content: str


@dataclass(frozen=True, slots=True)
class ToolCall:
    """A tool invocation requested by the model."""

    tool_name: str
    arguments: dict[str, Any]
    call_id: str


@dataclass(frozen=True, slots=True)
class ToolResult:
    tool_name: str
    output: str
    call_id: str
    failed: bool = False


@dataclass(frozen=True, slots=True)
class FinalAnswer:
    """Model reply variant: a natural-language answer."""

    text: str


@dataclass(frozen=True, slots=True)
class ToolCallRequest:
    """Model reply variant: one or more tool calls to run before answering."""

    calls: tuple[ToolCall, ...]


ModelReply = FinalAnswer | ToolCallRequest


@dataclass(frozen=True, slots=True)
class AgentStep:
    """One scratchpad entry: the model's tool request and the tool results."""

    request: ToolCallRequest
    results: tuple[ToolResult, ...]


@dataclass(frozen=True, slots=True)
class AnswerResult:
    text: str
    provenance: tuple[Segment, ...] | None = None


@dataclass(slots=True)
class ToolTrace:
    """Trace record for an executed tool call."""

    name: str
    input_payload: dict[str, Any]
    output_preview: str
    latency_ms: float
