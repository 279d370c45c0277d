"""Answer recorder.

Inserts a professor's answer and flips the parent doubt to answered, both in
one transaction. The practice review engine reuses the same write pair when
it publishes a reviewed practice answer.
"""

from __future__ import annotations

import sqlite3
from typing import Any

import structlog

from doubtdesk.core.models import Answer, AnswerReceipt, DoubtStatus
from doubtdesk.db.database import get_db
from doubtdesk.db.users_repository import fetch_user_role
from doubtdesk.utils.validators import NotFoundError, parse_identity, require_fields

logger = structlog.get_logger(__name__)


def fetch_doubt_status(conn: sqlite3.Connection, doubt_id: int) -> DoubtStatus | None:
    """Read a doubt's status on an open connection, None if it does not exist."""
    row = conn.execute(
        "SELECT status FROM doubts WHERE doubt_id = ?", (doubt_id,)
    ).fetchone()

    if row is None:
        return None

    return DoubtStatus(row["status"])


def insert_resolving_answer(
    conn: sqlite3.Connection,
    doubt_id: int,
    answer_text: str,
    answered_by: int,
) -> int:
    """Insert an answer and mark its doubt answered.

    Must run inside the caller's transaction. The doubt's previous status is
    not checked: answering an already-answered doubt adds another answer.

    Returns:
        The new answer_id
    """
    cursor = conn.execute(
        """
        INSERT INTO answers (doubt_id, answer_text, answered_by)
        VALUES (?, ?, ?)
        """,
        (doubt_id, answer_text, answered_by),
    )
    conn.execute(
        "UPDATE doubts SET status = ? WHERE doubt_id = ?",
        (DoubtStatus.ANSWERED.value, doubt_id),
    )
    return cursor.lastrowid


def record_answer(
    doubt_id: Any,
    answer_text: str | None,
    answered_by: Any,
) -> AnswerReceipt:
    """Record a direct answer to a doubt.

    Args:
        doubt_id: Doubt being answered
        answer_text: Answer body
        answered_by: Author (normally a professor)

    Returns:
        AnswerReceipt with the new answer_id

    Raises:
        ValidationError: If any argument is missing
        NotFoundError: If the doubt or the author does not exist
        StorageError: If the transaction fails; neither write is kept
    """
    require_fields(
        doubt_id=doubt_id, answer_text=answer_text, answered_by=answered_by
    )
    did = parse_identity("doubt_id", doubt_id)
    author_id = parse_identity("answered_by", answered_by)

    with get_db(immediate=True) as conn:
        previous = fetch_doubt_status(conn, did)
        if previous is None:
            raise NotFoundError("Doubt", did)

        if fetch_user_role(conn, author_id) is None:
            raise NotFoundError("User", author_id)

        if previous is DoubtStatus.ANSWERED:
            logger.info("answers.doubt_already_answered", doubt_id=did)

        answer_id = insert_resolving_answer(conn, did, str(answer_text), author_id)

    logger.info(
        "answers.recorded",
        answer_id=answer_id,
        doubt_id=did,
        answered_by=author_id,
    )

    return AnswerReceipt(answer_id=answer_id, doubt_id=did)


def list_professor_answers(professor_id: Any) -> list[dict[str, Any]]:
    """List answers authored by a professor with their question, newest first."""
    prof_id = parse_identity("professor_id", professor_id)

    with get_db() as conn:
        rows = conn.execute(
            """
            SELECT
                a.answer_id,
                a.answer_text,
                a.created_at AS answered_at,
                d.doubt_id,
                d.question,
                d.course
            FROM answers a
            JOIN doubts d ON d.doubt_id = a.doubt_id
            WHERE a.answered_by = ?
            ORDER BY a.created_at DESC, a.answer_id DESC
            """,
            (prof_id,),
        ).fetchall()

    return [dict(row) for row in rows]


def list_doubt_answers(doubt_id: Any) -> list[Answer]:
    """Answers linked to a doubt, oldest first."""
    did = parse_identity("doubt_id", doubt_id)

    with get_db() as conn:
        rows = conn.execute(
            """
            SELECT * FROM answers
            WHERE doubt_id = ?
            ORDER BY created_at, answer_id
            """,
            (did,),
        ).fetchall()

    return [Answer.from_row(row) for row in rows]
