"""Language-model boundary: LangChain chat model in, `ModelReply` out."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from grounded_chat.errors import ModelInvocationError
from grounded_chat.generation.prompts import build_messages
from grounded_chat.obs.tracing import Timer
from grounded_chat.types import (
    AgentStep,
    FinalAnswer,
    ModelReply,
    ToolCall,
    ToolCallRequest,
    Turn,
)

logger = logging.getLogger(__name__)


class ChatModelClient:
    """Wraps any LangChain chat model (`invoke`, optional `bind_tools`).

    Each `complete` call performs exactly one provider request. Failures,
    including a model that cannot bind tools, become `ModelInvocationError`.
    """

    def __init__(self, llm: Any) -> None:
        self.llm = llm

    def complete(
        self,
        system_prompt: str,
        history: Sequence[Turn],
        user_input: str,
        *,
        context: str | None = None,
        tools: Sequence[Any] | None = None,
        scratchpad: Sequence[AgentStep] = (),
    ) -> ModelReply:
        messages = build_messages(
            system=system_prompt,
            history=history,
            question=user_input,
            context=context,
            scratchpad=scratchpad,
        )
        try:
            runnable = self.llm.bind_tools(list(tools)) if tools else self.llm
            with Timer() as timer:
                response = runnable.invoke(messages)
        except Exception as exc:
            raise ModelInvocationError(f"Language model request failed: {exc}") from exc

        logger.debug("Model call with %d messages took %.0f ms", len(messages), timer.elapsed_ms)
        return _to_reply(response)


def _to_reply(response: Any) -> ModelReply:
    raw_calls = getattr(response, "tool_calls", None) or []
    invalid_calls = getattr(response, "invalid_tool_calls", None) or []
    if invalid_calls and not raw_calls:
        details = "; ".join(
            f"{call.get('name') or '<unnamed>'}: {call.get('error') or 'unparseable arguments'}"
            for call in invalid_calls
        )
        raise ModelInvocationError(f"Language model returned malformed tool calls: {details}")
    if raw_calls:
        return ToolCallRequest(
            calls=tuple(
                ToolCall(
                    tool_name=str(call.get("name", "")),
                    arguments=dict(call.get("args") or {}),
                    call_id=str(call.get("id") or f"call-{index}"),
                )
                for index, call in enumerate(raw_calls)
            )
        )
    return FinalAnswer(text=_message_text(response))


def _message_text(message: Any) -> str:
    content = getattr(message, "content", message)
    if isinstance(content, list):
        parts: list[str] = []
        for item in content:
            if isinstance(item, dict):
                if "text" in item:
                    parts.append(str(item["text"]))
            else:
                parts.append(str(item))
        return " ".join(parts).strip()
    return str(content).strip()
