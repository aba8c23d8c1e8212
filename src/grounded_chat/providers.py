"""Factories for the external services configured through `Settings`."""

from __future__ import annotations

import logging
from typing import Any

from grounded_chat.agent.registry import ToolRegistry
from grounded_chat.agent.tools import create_tavily_backend, register_web_search_tool
from grounded_chat.config import Settings
from grounded_chat.errors import ConfigurationError
from grounded_chat.ingest.embedder import Embedder, HashingEmbedder, LangChainEmbedder
from grounded_chat.obs.tracing import log_tool_trace

logger = logging.getLogger(__name__)


def _require_openai_key(settings: Settings) -> Any:
    if settings.openai_api_key is None:
        raise ConfigurationError("OPENAI_API_KEY is not set")
    return settings.openai_api_key


def create_llm(settings: Settings) -> Any:
    api_key = _require_openai_key(settings)

    from langchain_openai import ChatOpenAI

    return ChatOpenAI(
        model=settings.openai_model,
        temperature=settings.openai_temperature,
        api_key=api_key,
    )


def create_embedder(settings: Settings) -> Embedder:
    if settings.embedding_provider == "hashing":
        logger.info("Using deterministic hashing embeddings")
        return HashingEmbedder()

    api_key = _require_openai_key(settings)

    from langchain_openai import OpenAIEmbeddings

    return LangChainEmbedder(OpenAIEmbeddings(model=settings.embedding_model, api_key=api_key))


def create_tool_registry(settings: Settings) -> ToolRegistry:
    """Registry with `web_search` when a Tavily key is configured, else empty."""

    registry = ToolRegistry()
    registry.set_observer(log_tool_trace)
    if settings.tavily_api_key is None:
        logger.warning("TAVILY_API_KEY is not set; the agent will answer without web search")
        return registry

    backend = create_tavily_backend(
        settings.tavily_api_key, max_results=settings.search_max_results
    )
    register_web_search_tool(registry, backend, max_results=settings.search_max_results)
    return registry
