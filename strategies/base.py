"""Abstract base class for next-question selection strategies."""

from abc import ABC, abstractmethod
from collections.abc import Iterable, Mapping
from enum import Enum
from typing import Any

from loguru import logger

from errors import InvalidArgumentError
from models import Answer, Question


class StrategyState(str, Enum):
    READY = "ready"
    EXHAUSTED = "exhausted"


class LearningStrategy(ABC):
    """Decides the order in which questions are presented.

    The question sequence is copied at construction, so later changes to the
    caller's list are never seen by the strategy. A strategy only ever returns
    questions from that snapshot.

    Subclasses implement ``next``, ``reset``, ``progress`` and the
    ``save_state``/``restore_state`` pair.
    """

    name: str = ""

    def __init__(self, questions: Iterable[Question] | None):
        if questions is None:
            raise InvalidArgumentError("questions must not be None")
        self._questions: tuple[Question, ...] = tuple(questions)
        self._state = StrategyState.READY

    @property
    def questions(self) -> tuple[Question, ...]:
        return self._questions

    @property
    def state(self) -> StrategyState:
        return self._state

    def is_exhausted(self) -> bool:
        return self._state == StrategyState.EXHAUSTED

    def _exhaust(self) -> None:
        if self._state != StrategyState.EXHAUSTED:
            logger.debug(f"Strategy '{self.name}' exhausted after {len(self)} questions")
        self._state = StrategyState.EXHAUSTED

    @abstractmethod
    def next(self) -> Question | None:
        """Return the next question, or None when there is nothing to ask."""
        ...

    @abstractmethod
    def reset(self) -> None:
        """Start over from the initial position."""
        ...

    @abstractmethod
    def progress(self) -> float:
        """Fraction in [0, 1] describing how far the strategy has got."""
        ...

    def has_next(self) -> bool:
        return len(self._questions) > 0 and not self.is_exhausted()

    def register_answer(self, question: Question, answer: Answer) -> None:
        """Called after each recorded answer. Most strategies ignore it."""

    @abstractmethod
    def save_state(self) -> dict[str, Any]:
        """Return a JSON-serialisable snapshot of the cursor state."""
        ...

    @abstractmethod
    def restore_state(self, state: Mapping[str, Any]) -> None:
        """Restore a snapshot produced by ``save_state``."""
        ...

    def _index_of(self, question_id: str) -> int | None:
        for i, question in enumerate(self._questions):
            if question.id == question_id:
                return i
        return None

    def __len__(self) -> int:
        return len(self._questions)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(questions={len(self)}, state={self._state.value})"


def require_int(state: Mapping[str, Any], key: str, minimum: int = 0) -> int:
    """Read a non-negative integer from a saved state mapping."""
    if state is None or key not in state:
        raise InvalidArgumentError(f"Saved strategy state is missing '{key}'")
    value = state[key]
    if isinstance(value, bool) or not isinstance(value, int) or value < minimum:
        raise InvalidArgumentError(f"Saved strategy state has invalid '{key}': {value!r}")
    return value
