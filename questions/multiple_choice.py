"""Multiple choice ("test") questions."""

from collections.abc import Mapping
from typing import Any, Literal

from pydantic import AliasChoices, Field, model_validator

from models import Question
from questions.base import QuestionProvider, parse_letter_input


class MultipleChoiceQuestion(Question):
    """A question with a fixed list of options and exactly one correct option."""

    type: Literal["test"] = "test"
    prompt: str = Field(min_length=1, validation_alias=AliasChoices("prompt", "statement", "enunciado"))
    options: tuple[str, ...] = Field(min_length=1, validation_alias=AliasChoices("options", "opciones"))
    correct_answer: str = Field(
        min_length=1,
        validation_alias=AliasChoices("correct_answer", "respuestaCorrecta", "answer"),
    )

    @model_validator(mode="after")
    def _check_answer_is_an_option(self) -> "MultipleChoiceQuestion":
        if self.correct_answer not in self.options:
            raise ValueError(
                f"Correct answer '{self.correct_answer}' is not one of the options"
            )
        return self

    def statement(self) -> str:
        return self.prompt

    def is_correct(self, response: str | None) -> bool:
        """Exact, case-sensitive match against the correct option.

        A single letter (A, B, ...) selects the option at that position.
        """
        if response is None:
            return False
        text = response.strip()
        if text in self.options:
            return text == self.correct_answer
        index = parse_letter_input(text, len(self.options))
        if index is not None:
            return self.options[index] == self.correct_answer
        return False


class MultipleChoiceProvider(QuestionProvider[MultipleChoiceQuestion]):
    type_tag = "test"
    display_name = "Multiple choice"
    description = "Questions with several options and one correct answer"
    icon = "📝"

    def parse(self, raw: Mapping[str, Any]) -> MultipleChoiceQuestion:
        return MultipleChoiceQuestion.model_validate(dict(raw))

    def format_prompt(self, question: MultipleChoiceQuestion) -> str:
        lines = [question.statement(), ""]
        for i, option in enumerate(question.options):
            lines.append(f"  {chr(ord('A') + i)}. {option}")
        return "\n".join(lines)

    def get_input_prompt(self) -> str:
        return "Your answer (letter or option text): "
