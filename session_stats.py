"""Aggregate statistics over a session's answer history.

Everything here is a pure function of the records passed in.
"""

from collections.abc import Callable, Iterable, Mapping, Sequence

from pydantic import BaseModel, ConfigDict, Field

from config import ScoringConfig
from models import QuestionSessionRecord

Scorer = Callable[[QuestionSessionRecord], int]


class SessionStatistics(BaseModel):
    model_config = ConfigDict(frozen=True)

    answered_count: int = Field(default=0, ge=0)
    correct_count: int = Field(default=0, ge=0)
    incorrect_count: int = Field(default=0, ge=0)
    completion_pct: float = Field(default=0.0, ge=0.0, le=100.0)
    accuracy_pct: float = Field(default=0.0, ge=0.0, le=100.0)
    best_streak: int = Field(default=0, ge=0)
    total_score: int = Field(default=0, ge=0)


def make_scorer(config: ScoringConfig | None = None) -> Scorer:
    """Points for a correct answer, less a penalty per hint, never negative."""
    config = config or ScoringConfig()

    def score(record: QuestionSessionRecord) -> int:
        if not record.is_correct:
            return 0
        return max(0, config.points_per_correct - config.hint_penalty * record.hints_used)

    return score


default_scorer: Scorer = make_scorer()


def scorer_by_type(scorers: Mapping[str, Scorer], fallback: Scorer = default_scorer) -> Scorer:
    """Dispatch to a per-question-type scorer, falling back for unknown types."""

    def score(record: QuestionSessionRecord) -> int:
        return scorers.get(record.question.type, fallback)(record)

    return score


def answered(records: Iterable[QuestionSessionRecord]) -> list[QuestionSessionRecord]:
    return [r for r in records if r.is_answered]


def completion_pct(records: Iterable[QuestionSessionRecord], total_questions: int) -> float:
    """Distinct questions answered as a percentage of the course, capped at 100."""
    if total_questions <= 0:
        return 0.0
    distinct = {r.question.id for r in records if r.is_answered}
    return min(100.0, len(distinct) / total_questions * 100)


def accuracy_pct(records: Iterable[QuestionSessionRecord]) -> float:
    done = answered(records)
    if not done:
        return 0.0
    correct = sum(1 for r in done if r.is_correct)
    return 100 * correct / len(done)


def best_streak(records: Iterable[QuestionSessionRecord]) -> int:
    """Longest run of consecutive correct answers. Unanswered records are skipped."""
    best = run = 0
    for record in answered(records):
        run = run + 1 if record.is_correct else 0
        best = max(best, run)
    return best


def current_streak(records: Sequence[QuestionSessionRecord]) -> int:
    """Correct answers in a row at the end of the history."""
    run = 0
    for record in reversed(answered(records)):
        if not record.is_correct:
            break
        run += 1
    return run


def total_score(records: Iterable[QuestionSessionRecord], scorer: Scorer | None = None) -> int:
    scorer = scorer or default_scorer
    return sum(max(0, scorer(r)) for r in answered(records))


def compute_statistics(
    records: Sequence[QuestionSessionRecord],
    total_questions: int,
    scorer: Scorer | None = None,
) -> SessionStatistics:
    done = answered(records)
    correct = sum(1 for r in done if r.is_correct)
    return SessionStatistics(
        answered_count=len(done),
        correct_count=correct,
        incorrect_count=len(done) - correct,
        completion_pct=completion_pct(records, total_questions),
        accuracy_pct=accuracy_pct(records),
        best_streak=best_streak(records),
        total_score=total_score(records, scorer),
    )
