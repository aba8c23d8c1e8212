"""Configuration models for the question-answering engine."""

from __future__ import annotations

import json
from typing import Annotated, Any, Literal

from pydantic import BaseModel, Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

DEFAULT_SEPARATORS: tuple[tuple[str, ...], ...] = (
    ("\n\n",),
    ("\n",),
    (". ", "! ", "? "),
    (" ",),
)


class ChunkingConfig(BaseModel):
    """Configures character-window chunking.

    `chunk_size > chunk_overlap >= 0` is checked by the chunker itself so that
    violations surface as `ConfigurationError`.
    """

    chunk_size: int = 200
    chunk_overlap: int = 20
    separators: tuple[tuple[str, ...], ...] = DEFAULT_SEPARATORS


class RetrievalConfig(BaseModel):
    """Configures the fixed top-k retrieval policy."""

    top_k: int = Field(default=4, ge=1)


class AgentConfig(BaseModel):
    """Configures agent execution."""

    max_iterations: int = Field(default=15, ge=1)


class Settings(BaseSettings):
    """Runtime settings loaded from the environment and an optional `.env` file."""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    openai_api_key: SecretStr | None = None
    openai_model: str = "gpt-3.5-turbo"
    openai_temperature: float = Field(default=0.7, ge=0.0, le=2.0)

    embedding_provider: Literal["openai", "hashing"] = "openai"
    embedding_model: str = "text-embedding-3-small"

    tavily_api_key: SecretStr | None = None
    search_max_results: int = Field(default=5, ge=1, le=20)

    chunk_size: int = Field(default=200, ge=1)
    chunk_overlap: int = Field(default=20, ge=0)
    retrieval_top_k: int = Field(default=4, ge=1)
    agent_max_iterations: int = Field(default=15, ge=1)

    sources: Annotated[list[str], NoDecode] = Field(default_factory=list)
    log_level: str = "WARNING"

    @field_validator("sources", mode="before")
    @classmethod
    def _split_sources(cls, value: Any) -> Any:
        """Accept a JSON list or a comma-separated string for `SOURCES`."""
        if not isinstance(value, str):
            return value
        text = value.strip()
        if text.startswith("["):
            return json.loads(text)
        return [part.strip() for part in text.split(",") if part.strip()]

    def chunking_config(self) -> ChunkingConfig:
        return ChunkingConfig(chunk_size=self.chunk_size, chunk_overlap=self.chunk_overlap)

    def retrieval_config(self) -> RetrievalConfig:
        return RetrievalConfig(top_k=self.retrieval_top_k)

    def agent_config(self) -> AgentConfig:
        return AgentConfig(max_iterations=self.agent_max_iterations)
