"""Interactive question/answer loop."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from typing import Protocol

from grounded_chat.errors import GroundedChatError
from grounded_chat.session.history import ConversationHistory
from grounded_chat.types import AnswerResult, Turn

logger = logging.getLogger(__name__)

EXIT_SENTINEL = "exit"
USER_PROMPT = "User: "


class Answerer(Protocol):
    """Answering strategy used by the session (retrieval or agent)."""

    def answer(self, question: str, history: Sequence[Turn]) -> AnswerResult:
        """Answer one question given the turns so far."""


class ConversationSession:
    """Owns the history and drives one question at a time to completion."""

    def __init__(
        self,
        answerer: Answerer,
        *,
        history: ConversationHistory | None = None,
        read_line: Callable[[str], str] = input,
        write: Callable[[str], None] = print,
    ) -> None:
        self.answerer = answerer
        self.history = history if history is not None else ConversationHistory()
        self._read_line = read_line
        self._write = write

    def ask(self, question: str) -> AnswerResult:
        """Answer one question and record the turn pair on success only."""

        result = self.answerer.answer(question, self.history.snapshot())
        self.history.record(question, result.text)
        return result

    def run(self) -> int:
        """Read questions until the exit sentinel or end of input; returns 0."""

        while True:
            try:
                line = self._read_line(USER_PROMPT)
            except EOFError:
                break

            question = line.strip()
            if question.lower() == EXIT_SENTINEL:
                break
            if not question:
                continue

            try:
                result = self.ask(question)
            except GroundedChatError as exc:
                logger.warning("Question failed: %s", exc)
                self._write(f"Error: {exc}")
                continue
            self._write(f"Agent: {result.text}")

        logger.info("Session ended after %d turns", len(self.history))
        return 0
