"""Storage layer for learning sessions.

Provides the repository interface and its SQLite implementation.
"""

from collections.abc import Iterable, Mapping
from pathlib import Path

from models import Course
from strategies.registry import StrategyRegistry

from .base import SessionRepository
from .sqlite import SQLiteSessionRepository
from .connection import get_connection, init_schema, DEFAULT_DB_PATH

__all__ = [
    "SessionRepository",
    "SQLiteSessionRepository",
    "get_connection",
    "init_schema",
    "DEFAULT_DB_PATH",
    "get_session_repo",
]


def get_session_repo(
    db_path: Path = DEFAULT_DB_PATH,
    courses: Mapping[str, Course] | Iterable[Course] = (),
    strategies: StrategyRegistry | None = None,
) -> SessionRepository:
    """Get a SessionRepository instance, creating the schema if needed."""
    init_schema(db_path)
    return SQLiteSessionRepository(db_path, courses=courses, strategies=strategies)
