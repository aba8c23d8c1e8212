"""Timing helpers and tool-trace logging."""

from __future__ import annotations

import logging
import time

from grounded_chat.types import ToolTrace

logger = logging.getLogger(__name__)


class Timer:
    """Simple context timer used around external calls."""

    def __init__(self) -> None:
        self._start = 0.0
        self.elapsed_ms = 0.0

    def __enter__(self) -> "Timer":
        self._start = time.perf_counter()
        return self

    def __exit__(self, exc_type: object, exc: object, tb: object) -> None:
        self.elapsed_ms = (time.perf_counter() - self._start) * 1000.0


def log_tool_trace(trace: ToolTrace) -> None:
    """Tool registry observer that writes each execution to the debug log."""
    logger.debug(
        "Tool %s(%s) took %.1f ms -> %s",
        trace.name,
        trace.input_payload,
        trace.latency_ms,
        trace.output_preview,
    )
