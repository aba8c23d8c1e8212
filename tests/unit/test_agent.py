import pytest
from langchain_core.messages import SystemMessage, ToolMessage
from pydantic import BaseModel

from grounded_chat.agent.executor import ToolCallingAgent
from grounded_chat.agent.registry import ToolRegistry, ToolSpec
from grounded_chat.config import AgentConfig
from grounded_chat.errors import AgentIterationLimitError, ModelInvocationError
from grounded_chat.generation.chat_model import ChatModelClient
from grounded_chat.generation.prompts import REFUSAL


class EchoInput(BaseModel):
    text: str


def _registry(calls: list[str] | None = None) -> ToolRegistry:
    registry = ToolRegistry()

    def _echo(data: EchoInput) -> str:
        if calls is not None:
            calls.append(data.text)
        return data.text.upper()

    def _boom(data: EchoInput) -> str:
        raise RuntimeError("search backend unavailable")

    registry.register(ToolSpec(name="echo", description="uppercase", args_schema=EchoInput, handler=_echo))
    registry.register(ToolSpec(name="boom", description="always fails", args_schema=EchoInput, handler=_boom))
    return registry


def _agent(llm, registry: ToolRegistry | None = None, max_iterations: int = 5) -> ToolCallingAgent:
    return ToolCallingAgent(
        chat_model=ChatModelClient(llm),
        tool_registry=registry if registry is not None else ToolRegistry(),
        subject="Formula 1",
        config=AgentConfig(max_iterations=max_iterations),
    )


def test_unrelated_question_without_tools_returns_refusal(scripted_llm) -> None:
    llm = scripted_llm([REFUSAL])

    result = _agent(llm).answer("How do I bake sourdough?", [])

    assert result.text == REFUSAL
    assert result.provenance is None
    assert llm.bound_tools is None
    system = llm.calls[0][0]
    assert isinstance(system, SystemMessage)
    assert "Formula 1" in system.content
    assert REFUSAL in system.content


def test_tool_result_is_fed_back_through_scratchpad(scripted_llm, make_tool_call) -> None:
    seen: list[str] = []
    llm = scripted_llm([make_tool_call("echo", {"text": "monaco"}), "Monaco is on the calendar."])

    result = _agent(llm, _registry(seen)).answer("Is Monaco on the calendar?", [])

    assert result.text == "Monaco is on the calendar."
    assert seen == ["monaco"]
    assert [tool.name for tool in llm.bound_tools] == ["echo", "boom"]
    assert len(llm.calls) == 2
    tool_messages = [m for m in llm.calls[1] if isinstance(m, ToolMessage)]
    assert [(m.content, m.tool_call_id) for m in tool_messages] == [("MONACO", "call-1")]
    assert not any(isinstance(m, ToolMessage) for m in llm.calls[0])


def test_tool_failures_are_reported_to_the_model(scripted_llm, make_tool_call) -> None:
    llm = scripted_llm(
        [
            make_tool_call("boom", {"text": "x"}, "call-1"),
            make_tool_call("nonexistent", {}, "call-2"),
            "I could not search right now.",
        ]
    )

    result = _agent(llm, _registry()).answer("Latest standings?", [])

    assert result.text == "I could not search right now."
    outputs = [m.content for m in llm.calls[2] if isinstance(m, ToolMessage)]
    assert outputs[0] == "Tool 'boom' failed: search backend unavailable"
    assert outputs[1].startswith("Tool 'nonexistent' failed:")


def test_iteration_cap_raises(scripted_llm, make_tool_call) -> None:
    seen: list[str] = []
    llm = scripted_llm([make_tool_call("echo", {"text": f"loop {i}"}) for i in range(3)])

    with pytest.raises(AgentIterationLimitError):
        _agent(llm, _registry(seen), max_iterations=3).answer("Loop forever", [])

    assert len(llm.calls) == 3
    assert seen == ["loop 0", "loop 1"]


def test_model_failure_propagates(scripted_llm) -> None:
    llm = scripted_llm([TimeoutError("upstream timeout")])

    with pytest.raises(ModelInvocationError):
        _agent(llm).answer("Anything", [])
