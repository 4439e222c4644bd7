"""True/false questions."""

from collections.abc import Mapping
from typing import Any, Literal

from pydantic import AliasChoices, Field, field_validator

from models import Question
from questions.base import QuestionProvider, parse_bool_answer


class TrueFalseQuestion(Question):
    type: Literal["truefalse"] = "truefalse"
    prompt: str = Field(min_length=1, validation_alias=AliasChoices("prompt", "statement", "enunciado"))
    answer: bool = Field(validation_alias=AliasChoices("answer", "respuesta"))

    @field_validator("answer", mode="before")
    @classmethod
    def _parse_answer(cls, value: Any) -> bool:
        parsed = parse_bool_answer(value)
        if parsed is None:
            raise ValueError(f"Cannot interpret '{value}' as true or false")
        return parsed

    def statement(self) -> str:
        return self.prompt

    def is_correct(self, response: str | None) -> bool:
        # Unrecognised responses count as "false".
        parsed = parse_bool_answer(response)
        return (parsed is True) == self.answer


class TrueFalseProvider(QuestionProvider[TrueFalseQuestion]):
    type_tag = "truefalse"
    display_name = "True or false"
    description = "Statements the learner marks as true or false"
    icon = "✅❌"

    def parse(self, raw: Mapping[str, Any]) -> TrueFalseQuestion:
        return TrueFalseQuestion.model_validate(dict(raw))

    def format_prompt(self, question: TrueFalseQuestion) -> str:
        return f"{question.statement()}\n\n  True / False"

    def get_input_prompt(self) -> str:
        return "True or false? "
