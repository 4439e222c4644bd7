"""Spaced repetition strategy: walks the questions with a fixed stride."""

from collections.abc import Mapping
from math import gcd
from typing import Any

from errors import InvalidArgumentError
from models import Question
from strategies.base import LearningStrategy, StrategyState, require_int

DEFAULT_STRIDE = 3


def _check_stride(stride: Any) -> int:
    if isinstance(stride, bool) or not isinstance(stride, int) or stride <= 0:
        raise InvalidArgumentError(f"Stride must be a positive integer, got {stride!r}")
    return stride


class SpacedRepetitionStrategy(LearningStrategy):
    """Visits questions ``stride`` positions apart, cycling forever.

    The cursor advances as ``cursor = (cursor + stride) mod N`` and
    ``progress()`` reports ``cursor / N``. When stride and N share a factor
    the cursor alone would only ever reach N / gcd(stride, N) positions, so
    each completed orbit shifts the visited position by one. With N = 6 and
    stride = 3 the order is 0, 3, 1, 4, 2, 5, 0, 3, ...
    """

    name = "spaced_repetition"

    def __init__(self, questions, stride: int = DEFAULT_STRIDE):
        super().__init__(questions)
        self._stride = _check_stride(stride)
        self._cursor = 0
        self._calls = 0

    @property
    def stride(self) -> int:
        return self._stride

    @property
    def cursor(self) -> int:
        return self._cursor

    def set_stride(self, stride: int) -> None:
        self._stride = _check_stride(stride)
        self._calls = 0

    def _orbit_offset(self) -> int:
        n = len(self._questions)
        shared = gcd(self._stride, n)
        orbit_length = n // shared
        return (self._calls // orbit_length) % shared

    def next(self) -> Question | None:
        n = len(self._questions)
        if n == 0:
            return None
        if self._cursor >= n:
            self._cursor = 0
        question = self._questions[(self._cursor + self._orbit_offset()) % n]
        self._calls += 1
        self._cursor = (self._cursor + self._stride) % n
        return question

    def reset(self) -> None:
        self._cursor = 0
        self._calls = 0
        self._state = StrategyState.READY

    def progress(self) -> float:
        """Position within the current cycle."""
        if not self._questions:
            return 0.0
        return self._cursor / len(self._questions)

    def save_state(self) -> dict[str, Any]:
        return {"cursor": self._cursor, "stride": self._stride, "calls": self._calls}

    def restore_state(self, state: Mapping[str, Any]) -> None:
        cursor = require_int(state, "cursor")
        calls = require_int(state, "calls")
        stride = _check_stride(state.get("stride", self._stride))
        if self._questions and cursor >= len(self._questions):
            raise InvalidArgumentError(
                f"Cursor {cursor} is out of range for {len(self._questions)} questions"
            )
        self._stride = stride
        self._cursor = cursor
        self._calls = calls
