"""Tests for the learning activity controller, including the end-to-end flow."""

import pytest

from activity import LearningActivity
from errors import PersistenceError, UnknownStrategyError
from models import SessionSummary
from session import Session
from storage import SQLiteSessionRepository
from storage.base import SessionRepository


class FailingRepository(SessionRepository):
    """Repository whose writes always fail."""

    def __init__(self):
        self.attempts = 0

    def save(self, session: Session) -> Session:
        self.attempts += 1
        raise PersistenceError("disk full")

    def get_by_id(self, session_id: str) -> Session | None:
        return None

    def delete(self, session_id: str) -> bool:
        return False

    def list_summaries(self, course_id=None, active_only=False) -> list[SessionSummary]:
        return []

    def count(self) -> int:
        return 0


class TestEndToEnd:
    """A full pass over a four-question course."""

    def test_sequential_scenario(self, sample_course, strategy_registry):
        """A, B, C, D answered correct, correct, incorrect, correct."""
        activity = LearningActivity.start(sample_course, "sequential", strategy_registry)
        responses = {"A": "Paris", "B": "verdadero", "C": "green", "D": "Hello"}

        asked = []
        for _ in range(4):
            question = activity.next_question()
            asked.append(question.id)
            activity.answer(responses[question.id])
        assert asked == ["A", "B", "C", "D"]
        assert activity.next_question() is None

        stats = activity.session.refresh_statistics()
        assert stats.accuracy_pct == 75.0
        assert stats.completion_pct == 100.0
        assert stats.best_streak == 2

    def test_finish_returns_statistics(self, sample_course, strategy_registry):
        activity = LearningActivity.start(sample_course, "sequential", strategy_registry)
        activity.next_question()
        activity.answer("Paris", hints_used=1)
        stats = activity.finish()
        assert not activity.session.is_active()
        assert stats.total_score == 8
        assert activity.statistics() == stats


class TestPersistence:
    """Tests for saving through a repository."""

    def test_answers_are_saved(self, test_db_path, sample_course, strategy_registry):
        repo = SQLiteSessionRepository(
            test_db_path, courses=[sample_course], strategies=strategy_registry
        )
        activity = LearningActivity.start(
            sample_course, "sequential", strategy_registry, repository=repo, session_id="s1"
        )
        assert repo.count() == 1

        activity.next_question()
        activity.answer("Paris")
        resumed = LearningActivity.resume("s1", repo)
        assert resumed.session.accuracy_pct == 100.0
        assert resumed.next_question().id == "B"

    def test_resume_unknown_returns_none(self, test_db_path, sample_course, strategy_registry):
        repo = SQLiteSessionRepository(
            test_db_path, courses=[sample_course], strategies=strategy_registry
        )
        assert LearningActivity.resume("missing", repo) is None

    def test_failed_save_propagates_without_rollback(self, sample_course, strategy_registry):
        """The save error reaches the caller and the in-memory answer is kept."""
        strategy = strategy_registry.create("sequential", sample_course.questions())
        session = Session.create("s1", sample_course, strategy)
        repo = FailingRepository()
        activity = LearningActivity(session, repository=repo)

        activity.next_question()
        with pytest.raises(PersistenceError):
            activity.answer("Paris")
        assert repo.attempts == 1
        assert session.records[0].attempts == 1
        assert session.accuracy_pct == 100.0

    def test_unknown_strategy(self, sample_course, strategy_registry):
        with pytest.raises(UnknownStrategyError):
            LearningActivity.start(sample_course, "alphabetical", strategy_registry)
