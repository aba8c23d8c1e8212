"""Append-only conversation history."""

from __future__ import annotations

from collections.abc import Iterator

from grounded_chat.types import Role, Turn


class ConversationHistory:
    """Ordered Human/Agent turns for the lifetime of one session.

    Turns are only ever added as complete question/answer pairs, so the
    history always alternates Human, Agent starting with Human. It is never
    truncated.
    """

    def __init__(self) -> None:
        self._turns: list[Turn] = []

    def __len__(self) -> int:
        return len(self._turns)

    def __iter__(self) -> Iterator[Turn]:
        return iter(self._turns)

    def __getitem__(self, index: int) -> Turn:
        return self._turns[index]

    def record(self, question: str, answer: str) -> None:
        self._turns.append(Turn(role=Role.HUMAN, content=question))
        self._turns.append(Turn(role=Role.AGENT, content=answer))

    def snapshot(self) -> tuple[Turn, ...]:
        return tuple(self._turns)
