"""Strategy metadata and construct-by-name."""

from collections.abc import Callable, Iterable
from typing import Any, NamedTuple

from loguru import logger
from pydantic import BaseModel, ConfigDict, Field

from errors import ConstructionError, UnknownStrategyError
from models import Question
from registry import Registry
from strategies.base import LearningStrategy

StrategyConstructor = Callable[..., LearningStrategy]


class StrategyMetadata(BaseModel):
    """Descriptive information shown when choosing a strategy."""

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    name: str = Field(min_length=1)
    display_name: str = Field(min_length=1)
    description: str = Field(min_length=1)
    version: str = Field(min_length=1)
    icon: str = ""
    color: str = "#3498db"
    usage: str = ""


class _Entry(NamedTuple):
    metadata: StrategyMetadata
    constructor: StrategyConstructor


class StrategyRegistry:
    """Registry of strategies keyed by name.

    Mirrors the question-type registry: last registration wins and
    ``list_names()`` keeps registration order.
    """

    def __init__(self):
        self._entries: Registry[_Entry] = Registry(kind="strategy")

    def register(
        self,
        name: str,
        metadata: StrategyMetadata,
        constructor: StrategyConstructor,
    ) -> None:
        if not callable(constructor):
            raise TypeError(f"Constructor for strategy '{name}' is not callable")
        self._entries.register(name, _Entry(metadata, constructor))

    def lookup(self, name: str) -> StrategyMetadata | None:
        entry = self._entries.lookup(name)
        return entry.metadata if entry else None

    def list_names(self) -> list[str]:
        return self._entries.list_tags()

    def list_metadata(self) -> list[StrategyMetadata]:
        return [entry.metadata for _, entry in self._entries.items()]

    def create(
        self,
        name: str,
        questions: Iterable[Question] | None,
        **options: Any,
    ) -> LearningStrategy:
        """Build a strategy over ``questions``.

        Raises:
            UnknownStrategyError: Nothing is registered under ``name``.
            ConstructionError: The constructor rejected its arguments.
        """
        entry = self._entries.lookup(name)
        if entry is None:
            raise UnknownStrategyError(name)
        try:
            strategy = entry.constructor(questions, **options)
        except Exception as exc:
            logger.error(f"Could not create strategy '{name}': {exc}")
            raise ConstructionError(f"Could not create strategy '{name}': {exc}") from exc
        logger.debug(f"Created strategy '{name}' over {len(strategy)} questions")
        return strategy

    def describe(self, name: str) -> str:
        """Multi-line description shown by the CLI's ``strategies <name>`` command."""
        metadata = self.lookup(name)
        if metadata is None:
            raise UnknownStrategyError(name)
        lines = [
            f"{metadata.icon} {metadata.display_name} (v{metadata.version})".strip(),
            metadata.description,
        ]
        if metadata.usage:
            lines.append(metadata.usage)
        return "\n".join(lines)

    def __contains__(self, name: object) -> bool:
        return name in self._entries

    def __len__(self) -> int:
        return len(self._entries)
