"""Self-graded flashcards."""

from collections.abc import Mapping
from typing import Any, Literal

from pydantic import AliasChoices, Field

from models import Question
from questions.base import QuestionProvider


class Flashcard(Question):
    """Front/back card. The learner grades themselves, so every response counts."""

    type: Literal["flashcard"] = "flashcard"
    front: str = Field(min_length=1, validation_alias=AliasChoices("front", "pregunta", "enunciado"))
    back: str | None = Field(default=None, validation_alias=AliasChoices("back", "respuesta"))

    def statement(self) -> str:
        return self.front

    def is_correct(self, response: str | None) -> bool:
        return True


class FlashcardProvider(QuestionProvider[Flashcard]):
    type_tag = "flashcard"
    display_name = "Flashcard"
    description = "Memory cards with a front and an optional back"
    icon = "🗂️"

    def parse(self, raw: Mapping[str, Any]) -> Flashcard:
        return Flashcard.model_validate(dict(raw))

    def format_prompt(self, question: Flashcard) -> str:
        return question.statement()

    def get_input_prompt(self) -> str:
        return "Press Enter to reveal the answer..."

    def reveal(self, question: Flashcard) -> str:
        return question.back or ""
