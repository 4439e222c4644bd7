"""Builds Question objects from raw key/value records."""

from collections.abc import Iterable, Mapping
from typing import Any

from loguru import logger

from errors import ConstructionError, UnknownTypeError, ValidationError
from models import Question
from questions.base import QuestionProvider
from registry import Registry


class QuestionFactory:
    """Resolves a raw record's "type" through the registry and delegates to its provider.

    The factory holds no state of its own: the result of ``build`` depends
    only on the record and on what the registry contains at call time.
    """

    def __init__(self, registry: Registry[QuestionProvider]):
        self.registry = registry

    def build(self, raw: Mapping[str, Any]) -> Question:
        """Build one question.

        Raises:
            ValidationError: The record is not a mapping or has no usable "type".
            UnknownTypeError: No provider is registered for the type.
            ConstructionError: The provider raised or returned no question.
        """
        if raw is None or not isinstance(raw, Mapping):
            raise ValidationError("Question data must be a key/value mapping")

        type_tag = raw.get("type")
        if not isinstance(type_tag, str) or not type_tag.strip():
            raise ValidationError("Question data has no 'type'")
        type_tag = type_tag.strip()

        provider = self.registry.lookup(type_tag)
        if provider is None:
            logger.warning(f"No provider for question type '{type_tag}'")
            raise UnknownTypeError(type_tag)

        record = dict(raw)
        record["type"] = type_tag
        try:
            question = provider.parse(record)
        except Exception as exc:
            logger.error(
                f"Provider '{type_tag}' failed to build question {raw.get('id')!r}: {exc}"
            )
            raise ConstructionError(
                f"Provider '{type_tag}' could not build question {raw.get('id')!r}"
            ) from exc

        if not isinstance(question, Question):
            raise ConstructionError(
                f"Provider '{type_tag}' returned no question for {raw.get('id')!r}"
            )
        return question

    def build_many(self, raws: Iterable[Mapping[str, Any]]) -> list[Question]:
        return [self.build(raw) for raw in raws]

    def supports(self, type_tag: str) -> bool:
        return type_tag in self.registry

    def list_supported_types(self) -> list[str]:
        return self.registry.list_tags()
