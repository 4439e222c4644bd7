"""The learning session aggregate."""

from collections.abc import Iterable
from datetime import datetime
from typing import Any

from loguru import logger
from pydantic import ConfigDict, Field, PrivateAttr

from errors import ValidationError
from models import (
    Answer,
    Block,
    Course,
    MutableModel,
    Question,
    QuestionResult,
    QuestionSessionRecord,
)
from session_stats import Scorer, SessionStatistics, compute_statistics
from strategies.base import LearningStrategy


class Session(MutableModel):
    """One learning activity: a course, a strategy and the answer history.

    The session is active until ``finish()`` sets ``end_time``; after that
    the end time can never be changed or cleared.

    Out-of-range assignments to the bounded fields raise ``ValidationError``.

    Aggregates (completion, accuracy, streak, score) are only recomputed by
    ``refresh_statistics()``. Recording an answer does not touch them.
    """

    model_config = ConfigDict(
        arbitrary_types_allowed=True,
        validate_assignment=True,
        str_strip_whitespace=True,
    )

    id: str = Field(min_length=1)
    course: Course
    strategy: LearningStrategy
    start_time: datetime = Field(default_factory=datetime.now)
    end_time: datetime | None = None
    time_spent_seconds: int = Field(default=0, ge=0)
    current_block: Block | None = None
    current_question: Question | None = None
    completion_pct: float = Field(default=0.0, ge=0.0, le=100.0)
    accuracy_pct: float = Field(default=0.0, ge=0.0, le=100.0)
    best_streak: int = Field(default=0, ge=0)
    total_score: int = Field(default=0, ge=0)

    _records: list[QuestionSessionRecord] = PrivateAttr(default_factory=list)

    def __setattr__(self, name: str, value: Any) -> None:
        if name == "end_time" and self.end_time is not None and value != self.end_time:
            raise ValidationError(f"Session '{self.id}' has already ended")
        super().__setattr__(name, value)

    @classmethod
    def create(cls, id: str, course: Course, strategy: LearningStrategy) -> "Session":
        """Start a new session.

        Raises:
            ValidationError: If id is blank or course/strategy is missing.
        """
        if id is None or not str(id).strip():
            raise ValidationError("Session id must not be blank")
        if course is None:
            raise ValidationError("Session requires a course")
        if strategy is None:
            raise ValidationError("Session requires a strategy")
        session = cls(id=str(id).strip(), course=course, strategy=strategy)
        logger.info(
            f"Session '{session.id}' started on course '{course.id}' "
            f"with strategy '{strategy.name}'"
        )
        return session

    @classmethod
    def rehydrate(
        cls,
        records: Iterable[QuestionSessionRecord] = (),
        **fields: Any,
    ) -> "Session":
        """Rebuild a stored session, history included."""
        session = cls(**fields)
        session._records = list(records)
        return session

    # ------------------------------------------------------------------
    # History
    # ------------------------------------------------------------------

    @property
    def records(self) -> tuple[QuestionSessionRecord, ...]:
        return tuple(self._records)

    def answered_records(self) -> list[QuestionSessionRecord]:
        return [r for r in self._records if r.is_answered]

    def current_record(self) -> QuestionSessionRecord | None:
        return self._records[-1] if self._records else None

    def _require_active(self) -> None:
        if not self.is_active():
            raise ValidationError(f"Session '{self.id}' has already ended")

    def next_question(self) -> Question | None:
        """Ask the strategy for the next question and open a record for it.

        Returns None, without adding a record, when the strategy has nothing left.
        """
        self._require_active()
        question = self.strategy.next()
        if question is None:
            self.current_question = None
            return None
        self.current_block = self.course.find_block_for(question)
        self.current_question = question
        self._records.append(QuestionSessionRecord(question=question))
        return question

    def record_answer(
        self,
        question: Question,
        answer: Answer | str | None,
        *,
        time_spent_seconds: int = 0,
        hints_used: int = 0,
    ) -> Answer:
        """Record a response to ``question``.

        The in-flight record is updated when it belongs to ``question``;
        otherwise a new record is appended. Correctness always comes from
        ``question.is_correct``.
        """
        self._require_active()
        if question is None:
            raise ValidationError("Cannot record an answer without a question")
        if time_spent_seconds < 0 or hints_used < 0:
            raise ValidationError("Time spent and hints used must not be negative")

        content = answer.content if isinstance(answer, Answer) else answer
        recorded = Answer(content=content, correct=question.is_correct(content))

        record = self.current_record()
        if record is None or record.question.id != question.id:
            record = QuestionSessionRecord(question=question)
            self._records.append(record)

        record.result = QuestionResult.CORRECT if recorded.correct else QuestionResult.INCORRECT
        record.attempts += 1
        record.time_spent_seconds += time_spent_seconds
        record.hints_used += hints_used
        record.answered_at = recorded.timestamp
        record.response = content

        self.strategy.register_answer(question, recorded)
        logger.debug(
            f"Session '{self.id}': question '{question.id}' answered "
            f"{record.result.value} (attempt {record.attempts})"
        )
        return recorded

    # ------------------------------------------------------------------
    # Aggregates and lifecycle
    # ------------------------------------------------------------------

    def refresh_statistics(self, scorer: Scorer | None = None) -> SessionStatistics:
        stats = compute_statistics(self._records, self.course.question_count(), scorer)
        self.completion_pct = stats.completion_pct
        self.accuracy_pct = stats.accuracy_pct
        self.best_streak = stats.best_streak
        self.total_score = stats.total_score
        return stats

    def statistics(self) -> SessionStatistics:
        """The aggregates as of the last refresh."""
        answered = self.answered_records()
        correct = sum(1 for r in answered if r.is_correct)
        return SessionStatistics(
            answered_count=len(answered),
            correct_count=correct,
            incorrect_count=len(answered) - correct,
            completion_pct=self.completion_pct,
            accuracy_pct=self.accuracy_pct,
            best_streak=self.best_streak,
            total_score=self.total_score,
        )

    def finish(self) -> None:
        """End the session. Calling it again does nothing."""
        if self.end_time is not None:
            return
        end = datetime.now()
        self.end_time = end
        self.time_spent_seconds = max(0, int((end - self.start_time).total_seconds()))
        logger.info(f"Session '{self.id}' finished after {self.time_spent_seconds}s")

    def is_active(self) -> bool:
        return self.end_time is None

    def duration_seconds(self) -> int:
        """Elapsed whole seconds, up to now for an active session."""
        end = self.end_time or datetime.now()
        return max(0, int((end - self.start_time).total_seconds()))
