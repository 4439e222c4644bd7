from abc import ABC, abstractmethod
from collections.abc import Iterable
from datetime import datetime
from enum import Enum
from typing import Any

import pydantic
from pydantic import BaseModel, ConfigDict, Field, model_validator

from errors import InvalidArgumentError, ValidationError


class QuestionResult(str, Enum):
    UNANSWERED = "unanswered"
    CORRECT = "correct"
    INCORRECT = "incorrect"


# ============================================================================
# Questions
# ============================================================================


class Question(BaseModel, ABC):
    """A single assessable item.

    Concrete question kinds are supplied by the providers in the
    ``questions`` package. Instances are immutable once built.
    """

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    id: str = Field(min_length=1)
    type: str = Field(min_length=1)

    @abstractmethod
    def statement(self) -> str:
        """Return the text shown to the learner."""
        ...

    @abstractmethod
    def is_correct(self, response: str | None) -> bool:
        """Check a learner response against this question."""
        ...


class Answer(BaseModel):
    """A learner response and whether it was judged correct."""

    model_config = ConfigDict(frozen=True)

    content: str | None = None
    correct: bool
    timestamp: datetime = Field(default_factory=datetime.now)

    def has_content(self) -> bool:
        return self.content is not None and self.content.strip() != ""


class MutableModel(BaseModel):
    """Base for models changed in place after construction.

    A rejected assignment raises the engine's ``ValidationError`` and leaves
    the field at its previous value.
    """

    model_config = ConfigDict(validate_assignment=True)

    def __setattr__(self, name: str, value: Any) -> None:
        if name not in type(self).model_fields:
            super().__setattr__(name, value)
            return
        previous = self.__dict__.get(name)
        try:
            super().__setattr__(name, value)
        except pydantic.ValidationError as exc:
            self.__dict__[name] = previous
            reason = exc.errors()[0]["msg"] if exc.errors() else str(exc)
            raise ValidationError(f"Invalid {type(self).__name__}.{name}: {reason}") from exc


# ============================================================================
# Course structure
# ============================================================================


def _duplicate_ids(questions: Iterable[Question]) -> list[str]:
    seen: set[str] = set()
    duplicates: list[str] = []
    for question in questions:
        if question.id in seen and question.id not in duplicates:
            duplicates.append(question.id)
        seen.add(question.id)
    return duplicates


class Block(MutableModel):
    """A thematic group of questions inside a course.

    The question list is snapshotted into a tuple; use ``add_question`` or
    ``replace_questions`` to change it.
    """

    model_config = ConfigDict(validate_assignment=True, str_strip_whitespace=True)

    id: str = Field(min_length=1)
    title: str = Field(min_length=1)
    description: str | None = None
    type: str | None = None
    questions: tuple[Question, ...] = ()

    @model_validator(mode="after")
    def _check_unique_question_ids(self) -> "Block":
        duplicates = _duplicate_ids(self.questions)
        if duplicates:
            raise ValueError(
                f"Duplicate question ids in block '{self.id}': {', '.join(duplicates)}"
            )
        return self

    def add_question(self, question: Question) -> None:
        """Append a question to the block."""
        if question is None:
            raise InvalidArgumentError("question must not be None")
        self.questions = self.questions + (question,)

    def replace_questions(self, questions: Iterable[Question]) -> None:
        """Replace the whole question list."""
        self.questions = tuple(questions)

    def questions_of_type(self, type_tag: str) -> list[Question]:
        return [q for q in self.questions if q.type == type_tag]

    def find_question(self, question_id: str) -> Question | None:
        for question in self.questions:
            if question.id == question_id:
                return question
        return None

    def __len__(self) -> int:
        return len(self.questions)


class Course(MutableModel):
    """Top-level content container: an ordered sequence of blocks."""

    model_config = ConfigDict(validate_assignment=True, str_strip_whitespace=True)

    id: str = Field(min_length=1)
    title: str = Field(min_length=1)
    description: str | None = None
    blocks: tuple[Block, ...] = ()

    def add_block(self, block: Block) -> None:
        """Append a block to the course."""
        if block is None:
            raise InvalidArgumentError("block must not be None")
        self.blocks = self.blocks + (block,)

    def replace_blocks(self, blocks: Iterable[Block]) -> None:
        """Replace the whole block list."""
        self.blocks = tuple(blocks)

    def has_blocks(self) -> bool:
        return len(self.blocks) > 0

    def question_count(self) -> int:
        """Total number of questions across all blocks."""
        return sum(len(block.questions) for block in self.blocks)

    def questions(self) -> list[Question]:
        """All questions flattened in block order."""
        return [q for block in self.blocks for q in block.questions]

    def find_block(self, block_id: str) -> Block | None:
        for block in self.blocks:
            if block.id == block_id:
                return block
        return None

    def find_block_for(self, question: Question) -> Block | None:
        """Find the block that owns ``question``.

        Identity is checked first so that equal questions in different
        blocks resolve to the block actually holding the instance.
        """
        for block in self.blocks:
            if any(q is question for q in block.questions):
                return block
        for block in self.blocks:
            if block.find_question(question.id) is not None:
                return block
        return None


# ============================================================================
# Session history
# ============================================================================


class QuestionSessionRecord(MutableModel):
    """One question's entry in a session's answer history."""

    model_config = ConfigDict(validate_assignment=True)

    question: Question
    result: QuestionResult = QuestionResult.UNANSWERED
    time_spent_seconds: int = Field(default=0, ge=0)
    attempts: int = Field(default=0, ge=0)
    hints_used: int = Field(default=0, ge=0)
    answered_at: datetime | None = None
    response: str | None = None

    @property
    def is_answered(self) -> bool:
        return self.result != QuestionResult.UNANSWERED

    @property
    def is_correct(self) -> bool:
        return self.result == QuestionResult.CORRECT

    def to_summary(self) -> dict[str, Any]:
        """Plain dict view used for logging and CLI output."""
        return {
            "question_id": self.question.id,
            "type": self.question.type,
            "result": self.result.value,
            "attempts": self.attempts,
            "time_spent_seconds": self.time_spent_seconds,
            "hints_used": self.hints_used,
        }


class SessionSummary(BaseModel):
    """Lightweight listing row for a stored session."""

    id: str
    course_id: str
    strategy: str
    start_time: datetime
    end_time: datetime | None = None
    completion_pct: float = 0.0
    accuracy_pct: float = 0.0
    total_score: int = 0
    record_count: int = 0

    @property
    def is_active(self) -> bool:
        return self.end_time is None
