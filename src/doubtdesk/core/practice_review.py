"""Practice review engine.

Responsibilities:
- Accept student practice answers for existing doubts (status pending)
- Review them: pending -> correct | incorrect
- Award points when a practice answer becomes correct
- Optionally publish the practice text as a public answer, closing the doubt
- Serve the professor review queue (pending practice answers only)

A review is one transaction: the status update, the point award and the
publish writes are either all committed or all rolled back.

Known gaps kept on purpose:
- Reviewing an already-reviewed row re-applies the review. Points are only
  granted on the transition into correct, so a repeated correct review
  awards nothing.
- Publishing does not check whether the doubt already has an answer.
"""

from __future__ import annotations

from typing import Any

import structlog

from doubtdesk.config.app_config import load_app_config
from doubtdesk.core.answer_recorder import fetch_doubt_status, insert_resolving_answer
from doubtdesk.core.models import (
    REVIEW_OUTCOMES,
    PracticeAnswer,
    PracticeReceipt,
    PracticeStatus,
    ReviewResult,
)
from doubtdesk.db.database import get_db
from doubtdesk.db.users_repository import fetch_user_role
from doubtdesk.utils.validators import (
    NotFoundError,
    ValidationError,
    parse_identity,
    require_fields,
)

logger = structlog.get_logger(__name__)


# =============================================================================
# HELPER FUNCTIONS
# =============================================================================


def parse_outcome(raw: Any) -> PracticeStatus:
    """Parse a review outcome.

    Args:
        raw: "correct", "incorrect" or a PracticeStatus

    Returns:
        PracticeStatus.CORRECT or PracticeStatus.INCORRECT

    Raises:
        ValidationError: If the outcome is missing, unknown or "pending"
    """
    require_fields(status=raw)

    try:
        outcome = PracticeStatus(str(getattr(raw, "value", raw)).strip().lower())
    except ValueError as e:
        raise ValidationError(f"Invalid review outcome: {raw!r}", fields=["status"]) from e

    if outcome not in REVIEW_OUTCOMES:
        raise ValidationError(
            f"Invalid review outcome: {outcome.value!r}", fields=["status"]
        )

    return outcome


def _reward_points(reward_points: int | None) -> int:
    if reward_points is not None:
        return reward_points
    return load_app_config().rewards.practice_correct_points


# =============================================================================
# SUBMISSION
# =============================================================================


def submit_practice_answer(
    doubt_id: Any,
    student_id: Any,
    answer_text: str | None,
) -> PracticeReceipt:
    """Submit a practice answer for review.

    The doubt may be pending or already answered.

    Raises:
        ValidationError: If any field is missing
        NotFoundError: If the doubt or the student does not exist
    """
    require_fields(doubt_id=doubt_id, student_id=student_id, answer_text=answer_text)
    did = parse_identity("doubt_id", doubt_id)
    sid = parse_identity("student_id", student_id)

    with get_db() as conn:
        if fetch_doubt_status(conn, did) is None:
            raise NotFoundError("Doubt", did)

        if fetch_user_role(conn, sid) is None:
            raise NotFoundError("User", sid)

        cursor = conn.execute(
            """
            INSERT INTO practice_answers (doubt_id, student_id, answer_text, status)
            VALUES (?, ?, ?, ?)
            """,
            (did, sid, str(answer_text), PracticeStatus.PENDING.value),
        )
        practice_id = cursor.lastrowid

    logger.info(
        "practice.submitted",
        practice_id=practice_id,
        doubt_id=did,
        student_id=sid,
    )

    return PracticeReceipt(practice_id=practice_id, doubt_id=did)


# =============================================================================
# REVIEW
# =============================================================================


def review_practice_answer(
    practice_id: Any,
    outcome: Any,
    publish: bool = False,
    reviewer_id: Any = None,
    reward_points: int | None = None,
) -> ReviewResult:
    """Review a practice answer.

    Args:
        practice_id: Practice answer to review
        outcome: "correct" or "incorrect"
        publish: Also turn the practice text into a public answer and mark
            the doubt answered
        reviewer_id: Reviewing professor
        reward_points: Points for a correct answer (default from config)

    Returns:
        ReviewResult with points awarded and the published answer id, if any

    Raises:
        ValidationError: If practice_id, outcome or reviewer_id is missing or malformed
        NotFoundError: If the practice answer or the reviewer does not exist
        StorageError: If the transaction fails; nothing is applied
    """
    require_fields(practice_id=practice_id, reviewer_id=reviewer_id)
    pid = parse_identity("practice_id", practice_id)
    rid = parse_identity("reviewer_id", reviewer_id)
    new_status = parse_outcome(outcome)
    reward = _reward_points(reward_points)

    points_awarded = 0
    published_answer_id: int | None = None

    # Write lock up front: the point award depends on the status read here.
    with get_db(immediate=True) as conn:
        row = conn.execute(
            "SELECT * FROM practice_answers WHERE practice_id = ?", (pid,)
        ).fetchone()

        if row is None:
            raise NotFoundError("Practice answer", pid)

        practice = PracticeAnswer.from_row(row)

        if fetch_user_role(conn, rid) is None:
            raise NotFoundError("User", rid)

        if practice.is_reviewed:
            logger.info(
                "practice.re_review",
                practice_id=pid,
                previous=practice.status.value,
                outcome=new_status.value,
            )

        conn.execute(
            """
            UPDATE practice_answers SET
                status = ?,
                reviewed_by = ?,
                reviewed_at = strftime('%Y-%m-%d %H:%M:%f', 'now')
            WHERE practice_id = ?
            """,
            (new_status.value, rid, pid),
        )

        if (
            new_status is PracticeStatus.CORRECT
            and practice.status is not PracticeStatus.CORRECT
        ):
            conn.execute(
                "UPDATE users SET points = points + ? WHERE user_id = ?",
                (reward, practice.student_id),
            )
            points_awarded = reward

        if publish:
            published_answer_id = insert_resolving_answer(
                conn,
                practice.doubt_id,
                practice.answer_text,
                practice.student_id,
            )

    logger.info(
        "practice.reviewed",
        practice_id=pid,
        outcome=new_status.value,
        reviewer_id=rid,
        points_awarded=points_awarded,
        published_answer_id=published_answer_id,
    )

    return ReviewResult(
        practice_id=pid,
        outcome=new_status,
        points_awarded=points_awarded,
        published_answer_id=published_answer_id,
    )


# =============================================================================
# READ SURFACE
# =============================================================================


def get_practice_answer(practice_id: Any) -> PracticeAnswer:
    """Load a practice answer.

    Raises:
        NotFoundError: If it does not exist
    """
    pid = parse_identity("practice_id", practice_id)

    with get_db() as conn:
        row = conn.execute(
            "SELECT * FROM practice_answers WHERE practice_id = ?", (pid,)
        ).fetchone()

    if row is None:
        raise NotFoundError("Practice answer", pid)

    return PracticeAnswer.from_row(row)


def list_review_queue() -> list[dict[str, Any]]:
    """List pending practice answers for professors, newest first.

    Joined with the doubt's question and status and the student's name.
    """
    with get_db() as conn:
        rows = conn.execute(
            """
            SELECT
                p.practice_id,
                p.doubt_id,
                p.answer_text,
                p.status,
                p.created_at,
                d.question,
                d.status AS doubt_status,
                u.full_name AS student_name
            FROM practice_answers p
            JOIN doubts d ON d.doubt_id = p.doubt_id
            JOIN users u ON u.user_id = p.student_id
            WHERE p.status = ?
            ORDER BY p.created_at DESC, p.practice_id DESC
            """,
            (PracticeStatus.PENDING.value,),
        ).fetchall()

    return [dict(row) for row in rows]
