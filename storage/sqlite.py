"""SQLite implementation of the session repository."""

import json
import sqlite3
from collections.abc import Iterable, Mapping
from datetime import datetime
from pathlib import Path

from loguru import logger

from errors import PersistenceError
from models import Course, Question, QuestionResult, QuestionSessionRecord, SessionSummary
from session import Session
from strategies.registry import StrategyRegistry

from .base import SessionRepository
from .connection import DEFAULT_DB_PATH, get_connection


def _to_text(value: datetime | None) -> str | None:
    return value.isoformat() if value else None


def _from_text(value: str | None) -> datetime | None:
    return datetime.fromisoformat(value) if value else None


class SQLiteSessionRepository(SessionRepository):
    """SQLite implementation of SessionRepository.

    Questions and courses are not stored here. Loading a session looks the
    course up in ``courses`` and rebuilds the strategy through
    ``strategies``, restoring its saved cursor state.
    """

    def __init__(
        self,
        db_path: Path = DEFAULT_DB_PATH,
        courses: Mapping[str, Course] | Iterable[Course] = (),
        strategies: StrategyRegistry | None = None,
    ):
        self.db_path = db_path
        if isinstance(courses, Mapping):
            self.courses = dict(courses)
        else:
            self.courses = {course.id: course for course in courses}
        self.strategies = strategies

    def add_course(self, course: Course) -> None:
        self.courses[course.id] = course

    def save(self, session: Session) -> Session:
        """Save the session row and replace its stored history."""
        conn = get_connection(self.db_path)
        try:
            conn.execute(
                """INSERT OR REPLACE INTO sessions
                (id, course_id, strategy_name, strategy_state, start_time, end_time,
                 time_spent_seconds, current_block_id, current_question_id,
                 completion_pct, accuracy_pct, best_streak, total_score)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)""",
                (
                    session.id,
                    session.course.id,
                    session.strategy.name,
                    json.dumps(session.strategy.save_state()),
                    _to_text(session.start_time),
                    _to_text(session.end_time),
                    session.time_spent_seconds,
                    session.current_block.id if session.current_block else None,
                    session.current_question.id if session.current_question else None,
                    session.completion_pct,
                    session.accuracy_pct,
                    session.best_streak,
                    session.total_score,
                ),
            )
            conn.execute("DELETE FROM session_records WHERE session_id = ?", (session.id,))
            for position, record in enumerate(session.records):
                self._insert_record(conn, session, position, record)
            conn.commit()
        except sqlite3.Error as exc:
            conn.rollback()
            raise PersistenceError(f"Could not save session '{session.id}': {exc}") from exc
        finally:
            conn.close()
        logger.debug(f"Saved session '{session.id}' with {len(session.records)} records")
        return session

    def get_by_id(self, session_id: str) -> Session | None:
        """Load a single session by ID."""
        conn = get_connection(self.db_path)
        try:
            row = conn.execute("SELECT * FROM sessions WHERE id = ?", (session_id,)).fetchone()
            if row is None:
                return None
            record_rows = conn.execute(
                "SELECT * FROM session_records WHERE session_id = ? ORDER BY position",
                (session_id,),
            ).fetchall()
        except sqlite3.Error as exc:
            raise PersistenceError(f"Could not load session '{session_id}': {exc}") from exc
        finally:
            conn.close()
        return self._row_to_session(row, record_rows)

    def delete(self, session_id: str) -> bool:
        conn = get_connection(self.db_path)
        try:
            cursor = conn.execute("DELETE FROM sessions WHERE id = ?", (session_id,))
            conn.commit()
            return cursor.rowcount > 0
        except sqlite3.Error as exc:
            raise PersistenceError(f"Could not delete session '{session_id}': {exc}") from exc
        finally:
            conn.close()

    def list_summaries(
        self, course_id: str | None = None, active_only: bool = False
    ) -> list[SessionSummary]:
        query = """SELECT s.*, COUNT(r.position) AS record_count
            FROM sessions s LEFT JOIN session_records r ON r.session_id = s.id"""
        conditions = []
        params: list[str] = []
        if course_id is not None:
            conditions.append("s.course_id = ?")
            params.append(course_id)
        if active_only:
            conditions.append("s.end_time IS NULL")
        if conditions:
            query += " WHERE " + " AND ".join(conditions)
        query += " GROUP BY s.id ORDER BY s.start_time DESC"

        conn = get_connection(self.db_path)
        try:
            rows = conn.execute(query, params).fetchall()
        except sqlite3.Error as exc:
            raise PersistenceError(f"Could not list sessions: {exc}") from exc
        finally:
            conn.close()
        return [
            SessionSummary(
                id=row["id"],
                course_id=row["course_id"],
                strategy=row["strategy_name"],
                start_time=_from_text(row["start_time"]),
                end_time=_from_text(row["end_time"]),
                completion_pct=row["completion_pct"],
                accuracy_pct=row["accuracy_pct"],
                total_score=row["total_score"],
                record_count=row["record_count"],
            )
            for row in rows
        ]

    def count(self) -> int:
        conn = get_connection(self.db_path)
        try:
            return conn.execute("SELECT COUNT(*) FROM sessions").fetchone()[0]
        except sqlite3.Error as exc:
            raise PersistenceError(f"Could not count sessions: {exc}") from exc
        finally:
            conn.close()

    def _insert_record(
        self,
        conn: sqlite3.Connection,
        session: Session,
        position: int,
        record: QuestionSessionRecord,
    ) -> None:
        block = session.course.find_block_for(record.question)
        conn.execute(
            """INSERT INTO session_records
            (session_id, position, block_id, question_id, result, time_spent_seconds,
             attempts, hints_used, answered_at, response)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)""",
            (
                session.id,
                position,
                block.id if block else None,
                record.question.id,
                record.result.value,
                record.time_spent_seconds,
                record.attempts,
                record.hints_used,
                _to_text(record.answered_at),
                record.response,
            ),
        )

    def _find_question(
        self, course: Course, block_id: str | None, question_id: str | None
    ) -> Question | None:
        if question_id is None:
            return None
        block = course.find_block(block_id) if block_id else None
        if block is not None:
            question = block.find_question(question_id)
            if question is not None:
                return question
        for block in course.blocks:
            question = block.find_question(question_id)
            if question is not None:
                return question
        return None

    def _row_to_session(self, row, record_rows) -> Session:
        """Convert database rows back into a Session."""
        course = self.courses.get(row["course_id"])
        if course is None:
            raise PersistenceError(
                f"Session '{row['id']}' refers to unknown course '{row['course_id']}'"
            )
        if self.strategies is None:
            raise PersistenceError("A strategy registry is required to load sessions")

        strategy = self.strategies.create(row["strategy_name"], course.questions())
        strategy.restore_state(json.loads(row["strategy_state"]))

        records = []
        for record_row in record_rows:
            question = self._find_question(
                course, record_row["block_id"], record_row["question_id"]
            )
            if question is None:
                raise PersistenceError(
                    f"Session '{row['id']}' refers to unknown question "
                    f"'{record_row['question_id']}'"
                )
            records.append(
                QuestionSessionRecord(
                    question=question,
                    result=QuestionResult(record_row["result"]),
                    time_spent_seconds=record_row["time_spent_seconds"],
                    attempts=record_row["attempts"],
                    hints_used=record_row["hints_used"],
                    answered_at=_from_text(record_row["answered_at"]),
                    response=record_row["response"],
                )
            )

        return Session.rehydrate(
            records=records,
            id=row["id"],
            course=course,
            strategy=strategy,
            start_time=_from_text(row["start_time"]),
            end_time=_from_text(row["end_time"]),
            time_spent_seconds=row["time_spent_seconds"],
            current_block=course.find_block(row["current_block_id"])
            if row["current_block_id"]
            else None,
            current_question=self._find_question(
                course, row["current_block_id"], row["current_question_id"]
            ),
            completion_pct=row["completion_pct"],
            accuracy_pct=row["accuracy_pct"],
            best_streak=row["best_streak"],
            total_score=row["total_score"],
        )
