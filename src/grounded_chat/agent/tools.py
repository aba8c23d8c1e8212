"""Built-in tool implementations for the agent."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, SecretStr

from grounded_chat.agent.registry import ToolRegistry, ToolSpec

WEB_SEARCH_TOOL = "web_search"


class WebSearchInput(BaseModel):
    query: str = Field(min_length=1, description="What to search the web for.")


def create_tavily_backend(api_key: SecretStr | str, *, max_results: int = 5) -> Any:
    """Build the Tavily search runnable used by `register_web_search_tool`."""

    from langchain_community.tools.tavily_search import TavilySearchResults
    from langchain_community.utilities.tavily_search import TavilySearchAPIWrapper

    key = api_key if isinstance(api_key, SecretStr) else SecretStr(api_key)
    return TavilySearchResults(
        max_results=max_results,
        api_wrapper=TavilySearchAPIWrapper(tavily_api_key=key),
    )


def register_web_search_tool(
    registry: ToolRegistry,
    search_backend: Any,
    *,
    max_results: int = 5,
) -> None:
    """Register `web_search` backed by any runnable taking `{"query": ...}`.

    The backend returns a list of result dicts (`title`, `url`, `content`) or,
    on provider errors, a plain string which is passed through to the model.
    """

    def _search(input_data: WebSearchInput) -> str:
        results = search_backend.invoke({"query": input_data.query})
        if isinstance(results, str):
            return results
        lines = []
        for item in list(results)[:max_results]:
            lines.append(_format_result(item))
        if not lines:
            return "NO_RESULTS"
        return "\n".join(lines)

    registry.register(
        ToolSpec(
            name=WEB_SEARCH_TOOL,
            description=(
                "Search the web for current information. "
                "Input should be a concise search query."
            ),
            args_schema=WebSearchInput,
            handler=_search,
        )
    )


def _format_result(item: Any) -> str:
    if not isinstance(item, dict):
        return _truncate(str(item).replace("\n", " "), 500)
    url = str(item.get("url", "")).strip()
    title = str(item.get("title", "")).strip()
    content = _truncate(str(item.get("content", "")).replace("\n", " "), 500)
    label = f"{title} ({url})" if title else url
    return f"{label}: {content}" if label else content


def _truncate(text: str, max_length: int) -> str:
    if len(text) <= max_length:
        return text
    return text[: max_length - 3] + "..."
