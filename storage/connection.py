"""Database connection management and schema initialization."""

import sqlite3
from pathlib import Path

from config import DEFAULT_DB_PATH

SCHEMA_SQL = """
-- One row per learning session
CREATE TABLE IF NOT EXISTS sessions (
    id TEXT PRIMARY KEY,
    course_id TEXT NOT NULL,
    strategy_name TEXT NOT NULL,
    strategy_state TEXT NOT NULL DEFAULT '{}',  -- JSON object from save_state()
    start_time TEXT NOT NULL,
    end_time TEXT,
    time_spent_seconds INTEGER NOT NULL DEFAULT 0 CHECK (time_spent_seconds >= 0),
    current_block_id TEXT,
    current_question_id TEXT,
    completion_pct REAL NOT NULL DEFAULT 0 CHECK (completion_pct BETWEEN 0 AND 100),
    accuracy_pct REAL NOT NULL DEFAULT 0 CHECK (accuracy_pct BETWEEN 0 AND 100),
    best_streak INTEGER NOT NULL DEFAULT 0 CHECK (best_streak >= 0),
    total_score INTEGER NOT NULL DEFAULT 0 CHECK (total_score >= 0)
);

CREATE INDEX IF NOT EXISTS idx_sessions_course ON sessions(course_id);

-- Answer history, in the order records were appended
CREATE TABLE IF NOT EXISTS session_records (
    session_id TEXT NOT NULL,
    position INTEGER NOT NULL,
    block_id TEXT,
    question_id TEXT NOT NULL,
    result TEXT NOT NULL CHECK (result IN ('unanswered', 'correct', 'incorrect')),
    time_spent_seconds INTEGER NOT NULL DEFAULT 0,
    attempts INTEGER NOT NULL DEFAULT 0,
    hints_used INTEGER NOT NULL DEFAULT 0,
    answered_at TEXT,
    response TEXT,
    PRIMARY KEY (session_id, position),
    FOREIGN KEY (session_id) REFERENCES sessions(id) ON DELETE CASCADE
);
"""


def get_connection(db_path: Path = DEFAULT_DB_PATH) -> sqlite3.Connection:
    """Get a database connection with appropriate settings.

    Args:
        db_path: Path to the SQLite database file.

    Returns:
        A configured sqlite3 Connection object.
    """
    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    return conn


def init_schema(db_path: Path = DEFAULT_DB_PATH) -> None:
    """Create the tables if they don't exist."""
    db_path.parent.mkdir(parents=True, exist_ok=True)

    conn = get_connection(db_path)
    try:
        conn.executescript(SCHEMA_SQL)
        conn.commit()
    finally:
        conn.close()
