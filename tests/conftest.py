from __future__ import annotations

import pytest
from langchain_core.messages import AIMessage


class ScriptedLLM:
    """Chat model double that replays canned replies and records every call."""

    def __init__(self, replies: list[object]) -> None:
        self.replies = list(replies)
        self.calls: list[list[object]] = []
        self.bound_tools: list[object] | None = None

    def bind_tools(self, tools: list[object]) -> "ScriptedLLM":
        self.bound_tools = list(tools)
        return self

    def invoke(self, messages: list[object]) -> AIMessage:
        self.calls.append(list(messages))
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        if isinstance(reply, str):
            return AIMessage(content=reply)
        return reply


def tool_call(name: str, args: dict[str, object], call_id: str = "call-1") -> AIMessage:
    return AIMessage(content="", tool_calls=[{"name": name, "args": args, "id": call_id}])


class ScriptedInput:
    """`input()` replacement; raises EOFError once the script is exhausted."""

    def __init__(self, lines: list[str]) -> None:
        self.lines = list(lines)
        self.prompts: list[str] = []

    def __call__(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if not self.lines:
            raise EOFError
        return self.lines.pop(0)


@pytest.fixture
def scripted_llm() -> type[ScriptedLLM]:
    return ScriptedLLM


@pytest.fixture
def make_tool_call():
    return tool_call


@pytest.fixture
def scripted_input() -> type[ScriptedInput]:
    return ScriptedInput
