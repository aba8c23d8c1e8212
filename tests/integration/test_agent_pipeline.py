from langchain_core.messages import SystemMessage, ToolMessage

from grounded_chat.agent.registry import ToolRegistry
from grounded_chat.agent.tools import WEB_SEARCH_TOOL, register_web_search_tool
from grounded_chat.cli import SUBJECT_PROMPT, run_agent
from grounded_chat.config import Settings
from grounded_chat.generation.prompts import REFUSAL


class _FakeTavily:
    def __init__(self) -> None:
        self.queries: list[str] = []

    def invoke(self, payload: dict[str, str]) -> list[dict[str, str]]:
        self.queries.append(payload["query"])
        return [
            {
                "url": "https://f1.example/standings",
                "content": "After round 8 the championship leader is Driver A.",
            }
        ]


def test_agent_searches_then_answers_and_keeps_history(scripted_llm, make_tool_call, scripted_input) -> None:
    backend = _FakeTavily()
    registry = ToolRegistry()
    register_web_search_tool(registry, backend)
    llm = scripted_llm(
        [
            make_tool_call(WEB_SEARCH_TOOL, {"query": "F1 championship leader"}, "call-1"),
            "Driver A leads the championship.",
            REFUSAL,
        ]
    )
    read_line = scripted_input(["Formula 1", "Who leads the championship?", "How do I bake bread?", "exit"])
    output: list[str] = []

    code = run_agent(
        Settings(_env_file=None, agent_max_iterations=4),
        llm=llm,
        tool_registry=registry,
        read_line=read_line,
        write=output.append,
    )

    assert code == 0
    assert read_line.prompts[0] == SUBJECT_PROMPT
    assert backend.queries == ["F1 championship leader"]
    assert output == ["Agent: Driver A leads the championship.", f"Agent: {REFUSAL}"]
    assert [tool.name for tool in llm.bound_tools] == [WEB_SEARCH_TOOL]

    first_system = llm.calls[0][0]
    assert isinstance(first_system, SystemMessage)
    assert "Formula 1" in first_system.content

    tool_outputs = [m.content for m in llm.calls[1] if isinstance(m, ToolMessage)]
    assert tool_outputs == ["https://f1.example/standings: After round 8 the championship leader is Driver A."]

    # The scratchpad of question one is gone; only the turn pair remains.
    third_call = llm.calls[2]
    assert not any(isinstance(m, ToolMessage) for m in third_call)
    assert [m.content for m in third_call[1:]] == [
        "Who leads the championship?",
        "Driver A leads the championship.",
        "How do I bake bread?",
    ]
