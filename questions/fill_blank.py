"""Fill-in-the-blank ("completar_huecos") questions."""

from collections.abc import Mapping
from typing import Any, Literal

from pydantic import AliasChoices, Field

from models import Question
from questions.base import QuestionProvider

BLANK_MARKER = "___"


class FillBlankQuestion(Question):
    type: Literal["completar_huecos"] = "completar_huecos"
    prompt: str = Field(min_length=1, validation_alias=AliasChoices("prompt", "statement", "enunciado"))
    answer: str = Field(
        min_length=1,
        validation_alias=AliasChoices("answer", "respuesta", "respuestaCorrecta"),
    )

    def statement(self) -> str:
        return self.prompt

    def is_correct(self, response: str | None) -> bool:
        """Case-sensitive match after trimming the response."""
        if response is None:
            return False
        return response.strip() == self.answer

    def filled(self) -> str:
        """The statement with the blank replaced by the answer."""
        if BLANK_MARKER in self.prompt:
            return self.prompt.replace(BLANK_MARKER, self.answer, 1)
        return f"{self.prompt} {self.answer}"


class FillBlankProvider(QuestionProvider[FillBlankQuestion]):
    type_tag = "completar_huecos"
    display_name = "Fill in the blank"
    description = "Sentences with a gap the learner completes"
    icon = "🔤"

    def parse(self, raw: Mapping[str, Any]) -> FillBlankQuestion:
        return FillBlankQuestion.model_validate(dict(raw))

    def format_prompt(self, question: FillBlankQuestion) -> str:
        return question.statement()

    def get_input_prompt(self) -> str:
        return "Fill in the blank: "
