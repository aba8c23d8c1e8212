"""Error taxonomy shared by ingestion, retrieval, generation and the agent."""

from __future__ import annotations


class GroundedChatError(Exception):
    """Base class for every failure the session reports to the user."""


class ConfigurationError(GroundedChatError, ValueError):
    """Invalid or missing configuration (chunk parameters, credentials)."""


class SourceLoadError(GroundedChatError):
    """A document source could not be read, fetched or parsed."""

    def __init__(self, source: str, reason: str) -> None:
        super().__init__(f"Failed to load {source}: {reason}")
        self.source = source
        self.reason = reason


class EmbeddingServiceError(GroundedChatError):
    """The embedding provider failed."""


class ModelInvocationError(GroundedChatError):
    """The language model provider failed."""


class AgentIterationLimitError(GroundedChatError):
    """The agent kept requesting tools past its iteration budget."""

    def __init__(self, max_iterations: int) -> None:
        super().__init__(
            f"Agent stopped after {max_iterations} iterations without a final answer."
        )
        self.max_iterations = max_iterations


class ToolInvocationError(GroundedChatError):
    """A tool call failed; captured into the agent scratchpad, never raised."""

    def __init__(self, tool_name: str, cause: BaseException) -> None:
        super().__init__(f"Tool '{tool_name}' failed: {cause}")
        self.tool_name = tool_name
        self.cause = cause


class IndexSealedError(GroundedChatError):
    """Raised when writing to a vector index after ingestion has finished."""
