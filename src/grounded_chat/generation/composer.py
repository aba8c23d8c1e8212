"""Grounded answer composition over retrieved segments."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from grounded_chat.errors import ModelInvocationError
from grounded_chat.generation.chat_model import ChatModelClient
from grounded_chat.generation.prompts import GROUNDED_SYSTEM_PROMPT, format_context
from grounded_chat.retrieval.retriever import Retriever
from grounded_chat.types import AnswerResult, FinalAnswer, Segment, Turn

logger = logging.getLogger(__name__)


class GroundedAnswerComposer:
    """Answers a question from retrieved context and the conversation so far."""

    def __init__(
        self,
        chat_model: ChatModelClient,
        *,
        system_prompt: str = GROUNDED_SYSTEM_PROMPT,
    ) -> None:
        self.chat_model = chat_model
        self.system_prompt = system_prompt

    def answer(
        self,
        question: str,
        segments: Sequence[Segment],
        history: Sequence[Turn],
    ) -> AnswerResult:
        """Call the model once and attach the segments as provenance.

        Raises:
            ModelInvocationError: the provider failed or replied with tool calls.
        """

        reply = self.chat_model.complete(
            self.system_prompt,
            history,
            question,
            context=format_context(segments),
        )
        if not isinstance(reply, FinalAnswer):
            raise ModelInvocationError("Language model requested tools while composing an answer")
        return AnswerResult(text=reply.text, provenance=tuple(segments))


class RetrievalAnswerer:
    """RAG answering strategy: retrieve top-k segments, then compose."""

    def __init__(self, retriever: Retriever, composer: GroundedAnswerComposer) -> None:
        self.retriever = retriever
        self.composer = composer

    def answer(self, question: str, history: Sequence[Turn]) -> AnswerResult:
        segments = self.retriever.retrieve(question)
        logger.info("Answering with %d retrieved segments", len(segments))
        return self.composer.answer(question, segments, history)
