"""Drives one learning activity: pick, answer, refresh, persist."""

import uuid
from typing import Any

from loguru import logger

from errors import PersistenceError
from models import Answer, Course, Question
from session import Session
from session_stats import Scorer, SessionStatistics
from storage.base import SessionRepository
from strategies.registry import StrategyRegistry


class LearningActivity:
    """Session controller between a front end and the engine.

    Each answer is recorded, the aggregates are refreshed and, when a
    repository is attached, the session is saved. A failed save is logged
    and re-raised; the in-memory session keeps the change.
    """

    def __init__(
        self,
        session: Session,
        repository: SessionRepository | None = None,
        scorer: Scorer | None = None,
    ):
        self.session = session
        self.repository = repository
        self.scorer = scorer

    @classmethod
    def start(
        cls,
        course: Course,
        strategy_name: str,
        strategies: StrategyRegistry,
        repository: SessionRepository | None = None,
        session_id: str | None = None,
        scorer: Scorer | None = None,
        **options: Any,
    ) -> "LearningActivity":
        """Create a strategy over the course's questions and open a session."""
        strategy = strategies.create(strategy_name, course.questions(), **options)
        session = Session.create(session_id or uuid.uuid4().hex, course, strategy)
        activity = cls(session, repository=repository, scorer=scorer)
        activity.persist()
        return activity

    @classmethod
    def resume(
        cls,
        session_id: str,
        repository: SessionRepository,
        scorer: Scorer | None = None,
    ) -> "LearningActivity | None":
        session = repository.get_by_id(session_id)
        if session is None:
            return None
        logger.info(f"Resumed session '{session_id}'")
        return cls(session, repository=repository, scorer=scorer)

    def next_question(self) -> Question | None:
        question = self.session.next_question()
        if question is None:
            logger.info(f"Session '{self.session.id}' has no more questions")
        return question

    def answer(
        self,
        response: Answer | str | None,
        question: Question | None = None,
        *,
        time_spent_seconds: int = 0,
        hints_used: int = 0,
    ) -> Answer:
        """Answer ``question``, or the current question when none is given."""
        question = question or self.session.current_question
        recorded = self.session.record_answer(
            question,
            response,
            time_spent_seconds=time_spent_seconds,
            hints_used=hints_used,
        )
        self.session.refresh_statistics(self.scorer)
        self.persist()
        return recorded

    def finish(self) -> SessionStatistics:
        self.session.finish()
        stats = self.session.refresh_statistics(self.scorer)
        self.persist()
        return stats

    def statistics(self) -> SessionStatistics:
        return self.session.statistics()

    def persist(self) -> None:
        if self.repository is None:
            return
        try:
            self.repository.save(self.session)
        except PersistenceError:
            logger.exception(f"Failed to save session '{self.session.id}'")
            raise
