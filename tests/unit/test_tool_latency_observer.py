import logging

from pydantic import BaseModel

from grounded_chat.agent.registry import ToolRegistry, ToolSpec
from grounded_chat.obs.tracing import log_tool_trace


class LookupInput(BaseModel):
    query: str


def _registry() -> ToolRegistry:
    registry = ToolRegistry()
    registry.register(
        ToolSpec(
            name="lookup",
            description="Looks up a fact.",
            args_schema=LookupInput,
            handler=lambda data: f"fact about {data.query}" + "." * 400,
        )
    )
    return registry


def test_observer_receives_a_trimmed_trace() -> None:
    registry = _registry()
    traces = []
    registry.set_observer(traces.append)

    output = registry.execute("lookup", {"query": "solar"})

    assert output.startswith("fact about solar")
    assert [trace.name for trace in traces] == ["lookup"]
    assert traces[0].input_payload == {"query": "solar"}
    assert len(traces[0].output_preview) == 320
    assert traces[0].latency_ms >= 0.0


def test_log_tool_trace_writes_a_debug_record(caplog) -> None:
    registry = _registry()
    registry.set_observer(log_tool_trace)

    with caplog.at_level(logging.DEBUG, logger="grounded_chat.obs.tracing"):
        registry.execute("lookup", {"query": "wind"})

    records = [r for r in caplog.records if r.name == "grounded_chat.obs.tracing"]
    assert len(records) == 1
    assert records[0].levelno == logging.DEBUG
    assert "Tool lookup({'query': 'wind'})" in records[0].getMessage()
    assert "fact about wind" in records[0].getMessage()


def test_clearing_the_observer_stops_traces() -> None:
    registry = _registry()
    traces = []
    registry.set_observer(traces.append)
    registry.set_observer(None)

    registry.execute("lookup", {"query": "tides"})

    assert traces == []
