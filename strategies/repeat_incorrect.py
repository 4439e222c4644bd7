"""Repeat-incorrect strategy: one full pass, then a second look at the misses."""

from collections import deque
from collections.abc import Mapping
from typing import Any

from loguru import logger

from errors import InvalidArgumentError
from models import Answer, Question
from strategies.base import LearningStrategy, StrategyState, require_int


class RepeatIncorrectStrategy(LearningStrategy):
    """Asks every question once in order, then re-asks the ones answered wrong.

    A question is queued for repetition the first time it is answered
    incorrectly and never again, so the repetition phase is bounded by N.
    """

    name = "repeat_incorrect"

    def __init__(self, questions):
        super().__init__(questions)
        self._cursor = 0
        self._repeating = False
        self._queue: deque[str] = deque()
        self._missed: list[str] = []

    @property
    def repeating(self) -> bool:
        return self._repeating

    @property
    def pending_repeats(self) -> int:
        return len(self._queue)

    def next(self) -> Question | None:
        if self._cursor < len(self._questions):
            question = self._questions[self._cursor]
            self._cursor += 1
            return question

        if not self._repeating:
            self._repeating = True
            logger.debug(f"Starting repetition phase with {len(self._queue)} questions")

        while self._queue:
            index = self._index_of(self._queue.popleft())
            if index is not None:
                return self._questions[index]

        self._exhaust()
        return None

    def register_answer(self, question: Question, answer: Answer) -> None:
        if answer.correct or question.id in self._missed:
            return
        if self._index_of(question.id) is None:
            return
        self._missed.append(question.id)
        self._queue.append(question.id)

    def has_next(self) -> bool:
        return self._cursor < len(self._questions) or bool(self._queue)

    def reset(self) -> None:
        self._cursor = 0
        self._repeating = False
        self._queue.clear()
        self._missed.clear()
        self._state = StrategyState.READY

    def progress(self) -> float:
        total = len(self._questions) + len(self._missed)
        if total == 0:
            return 0.0
        done = self._cursor + len(self._missed) - len(self._queue)
        return done / total

    def save_state(self) -> dict[str, Any]:
        return {
            "cursor": self._cursor,
            "repeating": self._repeating,
            "queue": list(self._queue),
            "missed": list(self._missed),
        }

    def restore_state(self, state: Mapping[str, Any]) -> None:
        cursor = require_int(state, "cursor")
        if cursor > len(self._questions):
            raise InvalidArgumentError(
                f"Cursor {cursor} is past the end of {len(self._questions)} questions"
            )
        queue = state.get("queue", [])
        missed = state.get("missed", [])
        if not isinstance(queue, list) or not isinstance(missed, list):
            raise InvalidArgumentError("Saved strategy state has invalid 'queue' or 'missed'")
        self._cursor = cursor
        self._repeating = bool(state.get("repeating", False))
        self._queue = deque(str(qid) for qid in queue)
        self._missed = [str(qid) for qid in missed]
        self._state = StrategyState.READY
