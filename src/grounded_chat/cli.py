"""Command-line entry point: `grounded-chat agent` and `grounded-chat rag`."""

from __future__ import annotations

import argparse
import sys
from collections.abc import Callable, Sequence
from typing import Any

from pydantic import ValidationError
from pydantic_settings import SettingsError

from grounded_chat.agent.executor import ToolCallingAgent
from grounded_chat.agent.registry import ToolRegistry
from grounded_chat.config import Settings
from grounded_chat.errors import ConfigurationError
from grounded_chat.generation.chat_model import ChatModelClient
from grounded_chat.generation.composer import GroundedAnswerComposer, RetrievalAnswerer
from grounded_chat.ingest.chunker import RecursiveCharacterChunker
from grounded_chat.ingest.embedder import Embedder
from grounded_chat.ingest.pipeline import IngestPipeline
from grounded_chat.ingest.sources import LoaderRegistry
from grounded_chat.obs.log import configure_logging
from grounded_chat.providers import create_embedder, create_llm, create_tool_registry
from grounded_chat.retrieval.retriever import Retriever
from grounded_chat.retrieval.vector_store import InMemoryVectorIndex
from grounded_chat.session.loop import ConversationSession

SUBJECT_PROMPT = "Please enter the subject you want to discuss: "


def _report_error(message: str) -> None:
    print(message, file=sys.stderr)


def run_agent(
    settings: Settings,
    *,
    llm: Any | None = None,
    tool_registry: ToolRegistry | None = None,
    read_line: Callable[[str], str] = input,
    write: Callable[[str], None] = print,
) -> int:
    """Ask for the subject once, then chat with the tool-calling agent."""

    llm = llm if llm is not None else create_llm(settings)
    registry = tool_registry if tool_registry is not None else create_tool_registry(settings)
    try:
        subject = read_line(SUBJECT_PROMPT)
    except EOFError:
        return 0

    agent = ToolCallingAgent(
        chat_model=ChatModelClient(llm),
        tool_registry=registry,
        subject=subject,
        config=settings.agent_config(),
    )
    return ConversationSession(agent, read_line=read_line, write=write).run()


def run_rag(
    settings: Settings,
    sources: Sequence[str],
    *,
    llm: Any | None = None,
    embedder: Embedder | None = None,
    loader_registry: LoaderRegistry | None = None,
    read_line: Callable[[str], str] = input,
    write: Callable[[str], None] = print,
) -> int:
    """Ingest the sources, then chat grounded in them.

    Returns 1 without starting the session when no source could be indexed.
    """

    sources = list(sources) or list(settings.sources)
    if not sources:
        raise ConfigurationError("No sources given; pass paths/URLs or set SOURCES")

    llm = llm if llm is not None else create_llm(settings)
    embedder = embedder if embedder is not None else create_embedder(settings)
    vector_index = InMemoryVectorIndex()
    pipeline = IngestPipeline(
        loader_registry or LoaderRegistry(),
        RecursiveCharacterChunker(settings.chunking_config()),
        embedder,
        vector_index,
    )

    report = pipeline.ingest(sources)
    for failure in report.failed:
        _report_error(f"Could not ingest {failure.source}: {failure.error}")
    if not report.ok:
        _report_error("No sources were indexed.")
        return 1

    answerer = RetrievalAnswerer(
        Retriever(vector_index, embedder, settings.retrieval_config()),
        GroundedAnswerComposer(ChatModelClient(llm)),
    )
    return ConversationSession(answerer, read_line=read_line, write=write).run()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="grounded-chat",
        description="Conversational question answering over web search or your own documents.",
    )
    parser.add_argument("--log-level", default=None, help="Override LOG_LEVEL.")
    subparsers = parser.add_subparsers(dest="mode", required=True)

    subparsers.add_parser("agent", help="Answer questions on a subject using web search.")

    rag = subparsers.add_parser("rag", help="Answer questions from PDF files, text files and web pages.")
    rag.add_argument("sources", nargs="*", help="File paths or http(s) URLs (default: SOURCES).")
    rag.add_argument("--chunk-size", type=int, default=None)
    rag.add_argument("--chunk-overlap", type=int, default=None)
    rag.add_argument("--top-k", type=int, default=None)
    return parser


def _describe_validation_error(exc: ValidationError) -> str:
    problems = []
    for error in exc.errors():
        field = ".".join(str(part) for part in error["loc"]) or "settings"
        problems.append(f"{field}: {error['msg']}")
    return "; ".join(problems)


def _apply_overrides(settings: Settings, args: argparse.Namespace) -> Settings:
    overrides = {
        "chunk_size": args.chunk_size,
        "chunk_overlap": args.chunk_overlap,
        "retrieval_top_k": args.top_k,
    }
    values = settings.model_dump()
    values.update({key: value for key, value in overrides.items() if value is not None})
    return Settings(**values)


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        settings = Settings()
        configure_logging(args.log_level or settings.log_level)
        if args.mode == "agent":
            return run_agent(settings)
        return run_rag(_apply_overrides(settings, args), args.sources)
    except SettingsError as exc:
        _report_error(f"Configuration error: {exc}")
    except ValidationError as exc:
        _report_error(f"Configuration error: {_describe_validation_error(exc)}")
    except ConfigurationError as exc:
        _report_error(f"Configuration error: {exc}")
    return 1


if __name__ == "__main__":
    sys.exit(main())
