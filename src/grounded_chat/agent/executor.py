"""Tool-calling agent with a bounded think/act loop."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from grounded_chat.agent.registry import ToolRegistry
from grounded_chat.config import AgentConfig
from grounded_chat.errors import AgentIterationLimitError, ToolInvocationError
from grounded_chat.generation.chat_model import ChatModelClient
from grounded_chat.generation.prompts import agent_system_prompt
from grounded_chat.types import (
    AgentStep,
    AnswerResult,
    FinalAnswer,
    ToolCall,
    ToolCallRequest,
    ToolResult,
    Turn,
)

logger = logging.getLogger(__name__)


class ToolCallingAgent:
    """Answers questions on one subject, calling registered tools as needed.

    Each question runs a loop of model calls. A `FinalAnswer` ends the loop; a
    `ToolCallRequest` runs every requested tool and feeds the results back
    through the scratchpad on the next call. Tool failures are reported to the
    model as tool output instead of aborting the question. The scratchpad lives
    only for one question and is never written to the conversation history.
    """

    def __init__(
        self,
        *,
        chat_model: ChatModelClient,
        tool_registry: ToolRegistry,
        subject: str,
        config: AgentConfig | None = None,
    ) -> None:
        self.chat_model = chat_model
        self.tool_registry = tool_registry
        self.subject = subject
        self.config = config or AgentConfig()
        self.system_prompt = agent_system_prompt(subject)
        self.tools = self.tool_registry.as_langchain_tools()

    def answer(self, question: str, history: Sequence[Turn]) -> AnswerResult:
        """Run one question cycle.

        Raises:
            ModelInvocationError: the model provider failed.
            AgentIterationLimitError: the last allowed model call still asked
                for tools.
        """

        scratchpad: list[AgentStep] = []
        for iteration in range(1, self.config.max_iterations + 1):
            reply = self.chat_model.complete(
                self.system_prompt,
                history,
                question,
                tools=self.tools or None,
                scratchpad=scratchpad,
            )
            if isinstance(reply, FinalAnswer):
                logger.info("Agent answered after %d model calls", iteration)
                return AnswerResult(text=reply.text, provenance=None)

            if iteration == self.config.max_iterations:
                break
            scratchpad.append(self._run_tools(reply))

        raise AgentIterationLimitError(self.config.max_iterations)

    def _run_tools(self, request: ToolCallRequest) -> AgentStep:
        results = tuple(self._invoke(call) for call in request.calls)
        return AgentStep(request=request, results=results)

    def _invoke(self, call: ToolCall) -> ToolResult:
        try:
            output = self.tool_registry.execute(call.tool_name, call.arguments)
        except Exception as exc:
            error = ToolInvocationError(call.tool_name, exc)
            logger.warning("%s", error)
            return ToolResult(
                tool_name=call.tool_name,
                output=str(error),
                call_id=call.call_id,
                failed=True,
            )
        return ToolResult(tool_name=call.tool_name, output=output, call_id=call.call_id)
