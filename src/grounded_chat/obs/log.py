"""Process-wide logging setup."""

from __future__ import annotations

import logging
import sys

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: str | int = logging.WARNING) -> None:
    """Send log records to stderr so stdout carries only the conversation.

    Safe to call more than once; existing root handlers are replaced.
    """

    root = logging.getLogger()
    if root.hasHandlers():
        root.handlers.clear()

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(handler)
    root.setLevel(level.upper() if isinstance(level, str) else level)

    # httpx logs every OpenAI request at INFO.
    logging.getLogger("httpx").setLevel(max(root.level, logging.WARNING))
