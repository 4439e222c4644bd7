"""Random strategy: uniform draws with replacement."""

import random
from collections.abc import Mapping
from typing import Any

from errors import InvalidArgumentError
from models import Question
from strategies.base import LearningStrategy, StrategyState, require_int


class RandomStrategy(LearningStrategy):
    """Draws a uniformly random question on every call. Never exhausts.

    The random source is injectable. After ``set_seed`` the following
    sequence of ``next()`` results is fully reproducible.
    """

    name = "random"

    def __init__(self, questions, rng: random.Random | None = None, seed: int | None = None):
        super().__init__(questions)
        self._rng = rng if rng is not None else random.Random()
        self._seed: int | None = None
        self._draws = 0
        if seed is not None:
            self.set_seed(seed)

    @property
    def seed(self) -> int | None:
        return self._seed

    def set_seed(self, seed: int) -> None:
        if isinstance(seed, bool) or not isinstance(seed, int):
            raise InvalidArgumentError(f"Seed must be an integer, got {seed!r}")
        self._seed = seed
        self._rng.seed(seed)
        self._draws = 0

    def next(self) -> Question | None:
        if not self._questions:
            return None
        self._draws += 1
        return self._questions[self._rng.randrange(len(self._questions))]

    def reset(self) -> None:
        self._state = StrategyState.READY
        if self._seed is not None:
            self._rng.seed(self._seed)
        self._draws = 0

    def progress(self) -> float:
        if not self._questions:
            return 0.0
        # Fraction of one notional pass; saturates at 1.
        return min(1.0, self._draws / len(self._questions))

    def save_state(self) -> dict[str, Any]:
        return {"seed": self._seed, "draws": self._draws}

    def restore_state(self, state: Mapping[str, Any]) -> None:
        draws = require_int(state, "draws")
        seed = state.get("seed")
        if seed is None:
            # Unseeded runs cannot be replayed; continue with fresh randomness.
            self._seed = None
            self._draws = draws
            return
        self.set_seed(seed)
        for _ in range(draws):
            self.next()
