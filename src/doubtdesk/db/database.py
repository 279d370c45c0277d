"""SQLite database connection and schema management.

Provides connection management and schema initialization for Doubt Desk.
Every ``get_db()`` block is one transaction: it commits when the block exits
normally and rolls back on any exception.
"""

from __future__ import annotations

import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Generator

import structlog

from doubtdesk.config.app_config import load_app_config
from doubtdesk.utils.validators import StorageError

logger = structlog.get_logger(__name__)

# Current database (module-level, set by init_db)
_db_path: Path | None = None


def _resolve_path() -> Path:
    if _db_path is not None:
        return _db_path
    return Path(load_app_config().database.path)


def init_db(db_path: Path | None = None) -> None:
    """Initialize database with schema.

    Creates the database file and all required tables if they don't exist.

    Args:
        db_path: Path to database file. Defaults to the configured path.
    """
    global _db_path
    _db_path = Path(db_path) if db_path else Path(load_app_config().database.path)

    with get_db() as conn:
        _create_schema(conn)

    logger.info("database.initialized", path=str(_db_path))


def get_db_path() -> Path:
    """Return the database file currently in use."""
    return _resolve_path()


def _casefold(value: str | None) -> str | None:
    return value.casefold() if value is not None else None


@contextmanager
def get_db(immediate: bool = False) -> Generator[sqlite3.Connection, None, None]:
    """Get database connection as a transactional context manager.

    Args:
        immediate: Take the write lock up front (BEGIN IMMEDIATE). Use it for
            operations that read a row and then write based on what they read.

    Yields:
        SQLite connection with row factory set to sqlite3.Row

    Raises:
        StorageError: If SQLite fails inside the block (after rollback)

    Example:
        with get_db() as conn:
            conn.execute("INSERT INTO doubts (...) VALUES (...)", params)
            conn.execute("UPDATE doubts SET status = 'answered' ...")
    """
    db_path = _resolve_path()

    # Ensure directory exists
    db_path.parent.mkdir(parents=True, exist_ok=True)

    try:
        conn = sqlite3.connect(db_path, timeout=10)
    except sqlite3.Error as e:
        logger.error("database.connect_failed", path=str(db_path), error=str(e))
        raise StorageError(f"Cannot open database: {e}") from e

    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    # Unicode-aware folding; SQLite LOWER() only folds ASCII
    conn.create_function("casefold", 1, _casefold, deterministic=True)

    try:
        if immediate:
            conn.execute("BEGIN IMMEDIATE")
        yield conn
        conn.commit()
    except sqlite3.Error as e:
        conn.rollback()
        logger.error("database.transaction_failed", error=str(e))
        raise StorageError(str(e)) from e
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def _create_schema(conn: sqlite3.Connection) -> None:
    """Create database schema.

    Uses IF NOT EXISTS for idempotency. Timestamps carry milliseconds so
    "newest first" ordering is stable within a second.
    """
    conn.executescript(
        """
        CREATE TABLE IF NOT EXISTS users (
            user_id INTEGER PRIMARY KEY AUTOINCREMENT,
            email TEXT NOT NULL UNIQUE,
            full_name TEXT NOT NULL,
            role TEXT NOT NULL CHECK(role IN ('student', 'professor')),
            password_hash TEXT NOT NULL,
            role_details TEXT NOT NULL DEFAULT '{}',
            points INTEGER NOT NULL DEFAULT 0,
            created_at TEXT NOT NULL DEFAULT (strftime('%Y-%m-%d %H:%M:%f', 'now'))
        );

        -- professor NULL = open to any professor
        CREATE TABLE IF NOT EXISTS doubts (
            doubt_id INTEGER PRIMARY KEY AUTOINCREMENT,
            user_id INTEGER NOT NULL REFERENCES users(user_id),
            branch TEXT,
            semester TEXT,
            course TEXT,
            question TEXT NOT NULL,
            professor INTEGER REFERENCES users(user_id),
            status TEXT NOT NULL DEFAULT 'pending' CHECK(status IN ('pending', 'answered')),
            created_at TEXT NOT NULL DEFAULT (strftime('%Y-%m-%d %H:%M:%f', 'now'))
        );

        -- no UNIQUE on doubt_id: a doubt may collect more than one answer
        CREATE TABLE IF NOT EXISTS answers (
            answer_id INTEGER PRIMARY KEY AUTOINCREMENT,
            doubt_id INTEGER NOT NULL REFERENCES doubts(doubt_id),
            answer_text TEXT NOT NULL,
            answered_by INTEGER NOT NULL REFERENCES users(user_id),
            created_at TEXT NOT NULL DEFAULT (strftime('%Y-%m-%d %H:%M:%f', 'now'))
        );

        CREATE TABLE IF NOT EXISTS practice_answers (
            practice_id INTEGER PRIMARY KEY AUTOINCREMENT,
            doubt_id INTEGER NOT NULL REFERENCES doubts(doubt_id),
            student_id INTEGER NOT NULL REFERENCES users(user_id),
            answer_text TEXT NOT NULL,
            status TEXT NOT NULL DEFAULT 'pending' CHECK(status IN ('pending', 'correct', 'incorrect')),
            reviewed_by INTEGER REFERENCES users(user_id),
            reviewed_at TEXT,
            created_at TEXT NOT NULL DEFAULT (strftime('%Y-%m-%d %H:%M:%f', 'now'))
        );

        CREATE TABLE IF NOT EXISTS departments (
            department_id INTEGER PRIMARY KEY,
            name TEXT NOT NULL UNIQUE
        );

        CREATE TABLE IF NOT EXISTS subjects (
            subject_id INTEGER PRIMARY KEY AUTOINCREMENT,
            department_id INTEGER NOT NULL REFERENCES departments(department_id),
            semester TEXT NOT NULL,
            subject_name TEXT NOT NULL,
            UNIQUE(department_id, semester, subject_name)
        );

        -- Indexes
        CREATE INDEX IF NOT EXISTS idx_doubts_user ON doubts(user_id);
        CREATE INDEX IF NOT EXISTS idx_doubts_professor ON doubts(professor);
        CREATE INDEX IF NOT EXISTS idx_answers_doubt ON answers(doubt_id);
        CREATE INDEX IF NOT EXISTS idx_answers_author ON answers(answered_by);
        CREATE INDEX IF NOT EXISTS idx_practice_status ON practice_answers(status);
        CREATE INDEX IF NOT EXISTS idx_subjects_lookup ON subjects(department_id, semester);
        """
    )
