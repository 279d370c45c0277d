"""Fixtures for F3 tests - Practice review."""

import pytest

from doubtdesk.core.doubt_lifecycle import submit_doubt
from doubtdesk.core.practice_review import submit_practice_answer
from doubtdesk.db.database import get_db


@pytest.fixture
def doubt_id(make_user):
    """A pending doubt asked by someone other than the practising student."""
    asker = make_user("Asker")
    return submit_doubt(
        user_id=asker,
        question="Explain normalization.",
        semester="4",
        course="Database Systems",
    ).doubt_id


@pytest.fixture
def practice_id(doubt_id, student):
    """A pending practice answer by the default student."""
    return submit_practice_answer(
        doubt_id=doubt_id,
        student_id=student,
        answer_text="Splitting tables to remove redundancy.",
    ).practice_id


@pytest.fixture
def points_of():
    """Read a user's points."""

    def _points(user_id: int) -> int:
        with get_db() as conn:
            return conn.execute(
                "SELECT points FROM users WHERE user_id = ?", (user_id,)
            ).fetchone()["points"]

    return _points


@pytest.fixture
def answers_for():
    """Read answers of a doubt as (text, author) tuples."""

    def _answers(doubt_id: int) -> list[tuple[str, int]]:
        with get_db() as conn:
            rows = conn.execute(
                "SELECT answer_text, answered_by FROM answers WHERE doubt_id = ? ORDER BY answer_id",
                (doubt_id,),
            ).fetchall()
        return [(row["answer_text"], row["answered_by"]) for row in rows]

    return _answers
