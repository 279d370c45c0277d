"""Repository functions for departments and subjects tables.

Subjects are static reference data: written by the seed command, read by the
subjects lookup view.
"""

from __future__ import annotations

import sqlite3
from typing import Any

import structlog

from doubtdesk.db.database import get_db

logger = structlog.get_logger(__name__)


def _upsert_department(conn: sqlite3.Connection, department_id: int, name: str) -> None:
    conn.execute(
        """
        INSERT INTO departments (department_id, name) VALUES (?, ?)
        ON CONFLICT(department_id) DO UPDATE SET name = excluded.name
        """,
        (department_id, name),
    )


def _insert_subjects(
    conn: sqlite3.Connection,
    department_id: int,
    semester: str,
    subject_names: list[str],
) -> int:
    inserted = 0
    for name in subject_names:
        cursor = conn.execute(
            """
            INSERT OR IGNORE INTO subjects (department_id, semester, subject_name)
            VALUES (?, ?, ?)
            """,
            (department_id, str(semester), name),
        )
        inserted += cursor.rowcount
    return inserted


def upsert_department(department_id: int, name: str) -> None:
    """Insert a department or rename an existing one."""
    with get_db() as conn:
        _upsert_department(conn, department_id, name)

    logger.debug("departments.upserted", department_id=department_id)


def insert_subjects(
    department_id: int,
    semester: str,
    subject_names: list[str],
) -> int:
    """Insert subjects for a department and semester.

    Already-present subjects are skipped.

    Returns:
        Number of subjects actually inserted
    """
    with get_db() as conn:
        inserted = _insert_subjects(conn, department_id, semester, subject_names)

    logger.debug(
        "subjects.inserted",
        department_id=department_id,
        semester=semester,
        count=inserted,
    )
    return inserted


def seed_from_catalog(catalog: dict[str, Any]) -> int:
    """Load a subject catalog in a single transaction.

    Expected shape (as parsed from YAML):
        departments:
          - id: 1
            name: Computer Engineering
            semesters:
              "3": [Data Structures, Digital Logic]

    A malformed entry anywhere in the catalog rolls back the whole load.

    Returns:
        Total subjects inserted

    Raises:
        KeyError, ValueError, TypeError: If the catalog is malformed
    """
    total = 0
    with get_db() as conn:
        for department in catalog.get("departments") or []:
            department_id = int(department["id"])
            _upsert_department(conn, department_id, department["name"])
            for semester, names in (department.get("semesters") or {}).items():
                total += _insert_subjects(
                    conn, department_id, str(semester), list(names or [])
                )

    logger.info("subjects.seeded", count=total)
    return total
