"""Abstract base class and shared helpers for question-type providers."""

from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any, Generic, TypeVar

from models import Question

Q = TypeVar("Q", bound=Question)

TRUE_WORDS = frozenset({"true", "verdadero", "yes", "sí", "si", "1", "on"})
FALSE_WORDS = frozenset({"false", "falso", "no", "0", "off"})


def parse_bool_answer(value: Any) -> bool | None:
    """Interpret a free-form true/false response.

    Returns None when the value is neither a recognised true word nor a
    recognised false word.
    """
    if isinstance(value, bool):
        return value
    if value is None:
        return None
    text = str(value).strip().lower()
    if text in TRUE_WORDS:
        return True
    if text in FALSE_WORDS:
        return False
    return None


def parse_letter_input(user_input: str, num_options: int) -> int | None:
    """Parse a letter choice (A, B, C...) into a zero-based option index."""
    text = user_input.strip().upper()
    if len(text) != 1 or not text.isalpha():
        return None
    index = ord(text) - ord("A")
    if 0 <= index < num_options:
        return index
    return None


class QuestionProvider(ABC, Generic[Q]):
    """One question kind: parsing raw records plus presentation helpers.

    To add a question kind:
    1. Create a Question subclass for its fields and correctness rule
    2. Create a provider extending QuestionProvider[YourQuestion]
    3. Add the provider to DEFAULT_PROVIDERS in questions/__init__.py
    """

    type_tag: str = ""
    display_name: str = ""
    description: str = ""
    icon: str = ""

    @abstractmethod
    def parse(self, raw: Mapping[str, Any]) -> Q:
        """Build a question from a raw key/value record.

        Args:
            raw: The raw record. Always carries a "type" key equal to
                ``type_tag``.

        Returns:
            The constructed question.
        """
        ...

    @abstractmethod
    def format_prompt(self, question: Q) -> str:
        """Return the full prompt text, including any options."""
        ...

    @abstractmethod
    def get_input_prompt(self) -> str:
        """Return the input prompt to show the learner."""
        ...

    def validate_answer(self, question: Q, response: str | None) -> bool:
        """Check a response. Defaults to the question's own rule."""
        return question.is_correct(response)

    def describe(self) -> dict[str, str]:
        return {
            "type": self.type_tag,
            "name": self.display_name,
            "description": self.description,
            "icon": self.icon,
        }
