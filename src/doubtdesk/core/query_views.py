"""Read-only projections: archive, leaderboard, subjects, professors."""

from __future__ import annotations

from typing import Any

import structlog

from doubtdesk.config.app_config import load_app_config
from doubtdesk.core.models import Role, Subject
from doubtdesk.db.database import get_db
from doubtdesk.utils.validators import ValidationError, parse_identity, require_fields

logger = structlog.get_logger(__name__)


def _escape_like(text: str) -> str:
    return text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def search_archive(
    semester: str | None = None,
    course: str | None = None,
    search: str | None = None,
) -> list[dict[str, Any]]:
    """List answered doubts with their answers, newest answer first.

    Only doubts with at least one linked answer appear.

    Args:
        semester: Exact semester filter
        course: Exact course filter
        search: Case-insensitive substring of the question text
    """
    clauses: list[str] = []
    params: list[Any] = []

    if semester:
        clauses.append("d.semester = ?")
        params.append(str(semester))

    if course:
        clauses.append("d.course = ?")
        params.append(course)

    if search:
        clauses.append("casefold(d.question) LIKE ? ESCAPE '\\'")
        params.append(f"%{_escape_like(search.casefold())}%")

    where = f"WHERE {' AND '.join(clauses)}" if clauses else ""

    with get_db() as conn:
        rows = conn.execute(
            f"""
            SELECT
                d.doubt_id,
                d.question,
                d.course,
                d.semester,
                a.answer_id,
                a.answer_text,
                a.created_at AS answered_at,
                u.full_name AS answered_by
            FROM doubts d
            JOIN answers a ON a.doubt_id = d.doubt_id
            JOIN users u ON u.user_id = a.answered_by
            {where}
            ORDER BY a.created_at DESC, a.answer_id DESC
            """,
            params,
        ).fetchall()

    logger.debug("archive.searched", results=len(rows), search=search)
    return [dict(row) for row in rows]


def get_leaderboard(limit: int | None = None) -> list[dict[str, Any]]:
    """Top students by points, highest first.

    Args:
        limit: Maximum rows (default from config, 5)
    """
    size = limit if limit is not None else load_app_config().views.leaderboard_size
    if size < 1:
        raise ValidationError(f"Invalid leaderboard size: {size}", fields=["limit"])

    with get_db() as conn:
        rows = conn.execute(
            """
            SELECT user_id, full_name, points
            FROM users
            WHERE role = ?
            ORDER BY points DESC, user_id ASC
            LIMIT ?
            """,
            (Role.STUDENT.value, size),
        ).fetchall()

    return [dict(row) for row in rows]


def list_subjects(department_id: Any, semester: Any) -> list[Subject]:
    """Subjects of a department and semester, alphabetical.

    Raises:
        ValidationError: If either parameter is missing
    """
    try:
        require_fields(department_id=department_id, semester=semester)
    except ValidationError as e:
        raise ValidationError(
            "department_id and semester required", fields=e.fields
        ) from e

    dept_id = parse_identity("department_id", department_id)

    with get_db() as conn:
        rows = conn.execute(
            """
            SELECT subject_id, subject_name
            FROM subjects
            WHERE department_id = ? AND semester = ?
            ORDER BY subject_name
            """,
            (dept_id, str(semester).strip()),
        ).fetchall()

    return [
        Subject(subject_id=row["subject_id"], subject_name=row["subject_name"])
        for row in rows
    ]


def list_professors() -> list[dict[str, Any]]:
    """Professor directory for addressing doubts, alphabetical."""
    with get_db() as conn:
        rows = conn.execute(
            """
            SELECT user_id, full_name
            FROM users
            WHERE role = ?
            ORDER BY full_name, user_id
            """,
            (Role.PROFESSOR.value,),
        ).fetchall()

    return [dict(row) for row in rows]
