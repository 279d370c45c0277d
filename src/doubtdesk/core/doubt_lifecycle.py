"""Doubt lifecycle manager.

Responsibilities:
- Create doubts in the pending state
- Normalize the professor a doubt is addressed to
- Read surfaces: student history, professor inbox, practice question browser

The pending -> answered transition itself is performed by the answer
recorder and by the practice review engine's publish action.
"""

from __future__ import annotations

from typing import Any

import structlog

from doubtdesk.core.answer_recorder import fetch_doubt_status
from doubtdesk.core.models import Doubt, DoubtStatus, DoubtSubmission, Role
from doubtdesk.db.database import get_db
from doubtdesk.db.users_repository import fetch_user_role
from doubtdesk.utils.validators import (
    NotFoundError,
    parse_identity,
    parse_professor,
    require_fields,
)

logger = structlog.get_logger(__name__)

PRACTICE_FILTER_ANSWERED = "answered"
PRACTICE_FILTER_UNANSWERED = "unanswered"


def _optional_text(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def submit_doubt(
    user_id: Any,
    question: str | None,
    branch: Any = None,
    semester: Any = None,
    course: Any = None,
    professor: Any = None,
) -> DoubtSubmission:
    """Create a pending doubt.

    Args:
        user_id: Submitting student
        question: Question text
        branch: Optional branch label
        semester: Optional semester label
        course: Optional course name
        professor: Optional professor identity; blank or "null" means any

    Returns:
        DoubtSubmission with the new doubt_id

    Raises:
        ValidationError: If user_id or question is missing, or professor is malformed
        NotFoundError: If the student or the addressed professor does not exist
    """
    require_fields(user_id=user_id, question=question)
    author_id = parse_identity("user_id", user_id)
    assignment = parse_professor(professor)

    with get_db() as conn:
        if fetch_user_role(conn, author_id) is None:
            raise NotFoundError("User", author_id)

        if assignment.is_assigned:
            role = fetch_user_role(conn, assignment.professor_id)
            if role is not Role.PROFESSOR:
                raise NotFoundError("Professor", assignment.professor_id)

        cursor = conn.execute(
            """
            INSERT INTO doubts (user_id, branch, semester, course, question, professor, status)
            VALUES (?, ?, ?, ?, ?, ?, ?)
            """,
            (
                author_id,
                _optional_text(branch),
                _optional_text(semester),
                _optional_text(course),
                str(question).strip(),
                assignment.professor_id,
                DoubtStatus.PENDING.value,
            ),
        )
        doubt_id = cursor.lastrowid

    logger.info(
        "doubts.submitted",
        doubt_id=doubt_id,
        user_id=author_id,
        professor=assignment.professor_id,
    )

    return DoubtSubmission(doubt_id=doubt_id, professor=assignment.professor_id)


def list_student_doubts(user_id: Any) -> list[dict[str, Any]]:
    """List every doubt a student has asked, newest first.

    Each row is joined with its answer (if any) and the answering user's name.
    A doubt that collected several answers appears once per answer.
    """
    student_id = parse_identity("user_id", user_id)

    with get_db() as conn:
        rows = conn.execute(
            """
            SELECT
                d.doubt_id AS question_id,
                d.question,
                d.course,
                d.status,
                d.created_at,
                a.answer_text,
                a.created_at AS answered_at,
                u.full_name AS answered_by_name
            FROM doubts d
            LEFT JOIN answers a ON a.doubt_id = d.doubt_id
            LEFT JOIN users u ON u.user_id = a.answered_by
            WHERE d.user_id = ?
            ORDER BY d.created_at DESC, d.doubt_id DESC
            """,
            (student_id,),
        ).fetchall()

    return [dict(row) for row in rows]


def list_professor_inbox(professor_id: Any) -> list[dict[str, Any]]:
    """List unanswered doubts visible to a professor, newest first.

    Visible means addressed to nobody in particular or to this professor.
    Unanswered means no answer row is linked, regardless of status.
    """
    prof_id = parse_identity("professor_id", professor_id)

    with get_db() as conn:
        rows = conn.execute(
            """
            SELECT
                d.doubt_id,
                d.question,
                d.course,
                d.branch,
                d.semester,
                d.created_at,
                d.professor
            FROM doubts d
            WHERE (d.professor IS NULL OR d.professor = ?)
              AND NOT EXISTS (
                  SELECT 1 FROM answers a WHERE a.doubt_id = d.doubt_id
              )
            ORDER BY d.created_at DESC, d.doubt_id DESC
            """,
            (prof_id,),
        ).fetchall()

    return [dict(row) for row in rows]


def list_practice_questions(
    course: str | None = None,
    status: str | None = None,
) -> list[dict[str, Any]]:
    """List doubts students can practice on, newest first.

    Args:
        course: Only doubts for this course
        status: "answered" keeps doubts with an answer, "unanswered" those
            without; any other value is ignored

    Returns:
        Doubt rows left-joined with their answer text
    """
    clauses: list[str] = []
    params: list[Any] = []

    if course:
        clauses.append("d.course = ?")
        params.append(course)

    if status == PRACTICE_FILTER_ANSWERED:
        clauses.append("a.answer_id IS NOT NULL")
    elif status == PRACTICE_FILTER_UNANSWERED:
        clauses.append("a.answer_id IS NULL")
    elif status:
        logger.debug("practice_questions.unknown_status_ignored", status=status)

    where = f"WHERE {' AND '.join(clauses)}" if clauses else ""

    with get_db() as conn:
        rows = conn.execute(
            f"""
            SELECT
                d.doubt_id,
                d.question,
                d.course,
                d.status,
                a.answer_text
            FROM doubts d
            LEFT JOIN answers a ON a.doubt_id = d.doubt_id
            {where}
            ORDER BY d.created_at DESC, d.doubt_id DESC
            """,
            params,
        ).fetchall()

    return [dict(row) for row in rows]


def get_doubt_status(doubt_id: Any) -> DoubtStatus:
    """Return the current status of a doubt.

    Raises:
        NotFoundError: If the doubt does not exist
    """
    did = parse_identity("doubt_id", doubt_id)

    with get_db() as conn:
        status = fetch_doubt_status(conn, did)

    if status is None:
        raise NotFoundError("Doubt", did)

    return status


def get_doubt(doubt_id: Any) -> Doubt:
    """Load a doubt.

    Raises:
        NotFoundError: If the doubt does not exist
    """
    did = parse_identity("doubt_id", doubt_id)

    with get_db() as conn:
        row = conn.execute("SELECT * FROM doubts WHERE doubt_id = ?", (did,)).fetchone()

    if row is None:
        raise NotFoundError("Doubt", did)

    return Doubt.from_row(row)
