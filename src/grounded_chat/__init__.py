"""Conversational question answering over web search or a private corpus."""

from .config import AgentConfig, ChunkingConfig, RetrievalConfig, Settings

__all__ = ["AgentConfig", "ChunkingConfig", "RetrievalConfig", "Settings"]
