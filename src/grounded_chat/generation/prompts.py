"""System prompts and the typed message builder."""

from __future__ import annotations

from collections.abc import Sequence

from langchain_core.messages import (
    AIMessage,
    BaseMessage,
    HumanMessage,
    SystemMessage,
    ToolMessage,
)

from grounded_chat.types import AgentStep, Role, Segment, Turn

REFUSAL = "I do not have information about it."

GROUNDED_SYSTEM_PROMPT = (
    "Answer the user's question based only on the context provided. "
    f"If the context is insufficient or the question is not related to it, respond with '{REFUSAL}'"
)

AGENT_SYSTEM_PROMPT = (
    "You are an AI specialized in answering questions about {subject}. "
    "Use the available tools when you need up-to-date information. "
    f"If the question is not related to the specified subject, respond with '{REFUSAL}'"
)


def agent_system_prompt(subject: str) -> str:
    return AGENT_SYSTEM_PROMPT.format(subject=subject.strip() or "the configured subject")


def format_context(segments: Sequence[Segment]) -> str:
    """Join segment texts in retrieval order."""
    return "\n\n".join(segment.text for segment in segments)


def build_messages(
    *,
    system: str,
    history: Sequence[Turn],
    question: str,
    context: str | None = None,
    scratchpad: Sequence[AgentStep] = (),
) -> list[BaseMessage]:
    """Build the chat transcript for one model call.

    Order: system instruction (with the context appended when given), the
    conversation history oldest first, the question, then the agent
    scratchpad as assistant tool-call / tool-result message pairs.
    """

    system_text = system if context is None else f"{system}\n\nContext:\n{context}"
    messages: list[BaseMessage] = [SystemMessage(content=system_text)]

    for turn in history:
        if turn.role is Role.HUMAN:
            messages.append(HumanMessage(content=turn.content))
        else:
            messages.append(AIMessage(content=turn.content))

    messages.append(HumanMessage(content=question))

    for step in scratchpad:
        messages.append(
            AIMessage(
                content="",
                tool_calls=[
                    {"name": call.tool_name, "args": call.arguments, "id": call.call_id}
                    for call in step.request.calls
                ],
            )
        )
        for result in step.results:
            messages.append(
                ToolMessage(
                    content=result.output,
                    tool_call_id=result.call_id,
                    name=result.tool_name,
                )
            )
    return messages
