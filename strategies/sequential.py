"""Sequential strategy: one pass in the original order."""

from collections.abc import Mapping
from typing import Any

from errors import InvalidArgumentError
from models import Question
from strategies.base import LearningStrategy, StrategyState, require_int


class SequentialStrategy(LearningStrategy):
    name = "sequential"

    def __init__(self, questions):
        super().__init__(questions)
        self._cursor = 0

    @property
    def cursor(self) -> int:
        return self._cursor

    def next(self) -> Question | None:
        if self._cursor >= len(self._questions):
            self._exhaust()
            return None
        question = self._questions[self._cursor]
        self._cursor += 1
        return question

    def reset(self) -> None:
        self._cursor = 0
        self._state = StrategyState.READY

    def has_next(self) -> bool:
        return self._cursor < len(self._questions)

    def progress(self) -> float:
        if not self._questions:
            return 0.0
        return self._cursor / len(self._questions)

    def remaining(self) -> int:
        return len(self._questions) - self._cursor

    def save_state(self) -> dict[str, Any]:
        return {"cursor": self._cursor}

    def restore_state(self, state: Mapping[str, Any]) -> None:
        cursor = require_int(state, "cursor")
        if cursor > len(self._questions):
            raise InvalidArgumentError(
                f"Cursor {cursor} is past the end of {len(self._questions)} questions"
            )
        self._cursor = cursor
        # Exhaustion is only observed by a call to next() past the end.
        self._state = StrategyState.READY
