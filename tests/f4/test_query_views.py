"""Tests for read-only query views (F4)."""

import pytest

from doubtdesk.core.answer_recorder import record_answer
from doubtdesk.core.doubt_lifecycle import submit_doubt
from doubtdesk.core.models import Role
from doubtdesk.core.practice_review import review_practice_answer, submit_practice_answer
from doubtdesk.core.query_views import (
    get_leaderboard,
    list_professors,
    list_subjects,
    search_archive,
)
from doubtdesk.db.database import get_db
from doubtdesk.db.subjects_repository import insert_subjects, upsert_department
from doubtdesk.utils.validators import ValidationError


def _set_points(user_id, points):
    with get_db() as conn:
        conn.execute("UPDATE users SET points = ? WHERE user_id = ?", (points, user_id))


class TestArchive:
    """Tests for search_archive."""

    @pytest.fixture
    def archive(self, student, professor):
        d1 = submit_doubt(user_id=student, question="What is a Deadlock?", semester="4", course="OS").doubt_id
        d2 = submit_doubt(user_id=student, question="Explain paging", semester="4", course="OS").doubt_id
        d3 = submit_doubt(user_id=student, question="What is a join?", semester="3", course="DBMS").doubt_id
        submit_doubt(user_id=student, question="Unanswered deadlock doubt", semester="4", course="OS")
        record_answer(d1, "Circular wait.", professor)
        record_answer(d2, "Fixed-size pages.", professor)
        record_answer(d3, "Combining rows.", professor)
        return d1, d2, d3

    def test_only_answered_doubts(self, archive):
        rows = search_archive()
        assert {r["doubt_id"] for r in rows} == set(archive)
        assert all(r["answer_text"] for r in rows)

    def test_newest_answer_first(self, archive):
        assert [r["doubt_id"] for r in search_archive()] == list(reversed(archive))

    def test_answered_by_name(self, archive):
        assert search_archive()[0]["answered_by"] == "Dr. Rao"

    def test_semester_and_course_filters(self, archive):
        assert {r["doubt_id"] for r in search_archive(semester="4")} == {archive[0], archive[1]}
        assert [r["doubt_id"] for r in search_archive(course="DBMS")] == [archive[2]]
        assert search_archive(semester="3", course="OS") == []

    def test_search_is_case_insensitive_substring(self, archive):
        rows = search_archive(search="deadLOCK")
        assert [r["doubt_id"] for r in rows] == [archive[0]]

    def test_search_folds_non_ascii_case(self, student, professor):
        doubt_id = submit_doubt(user_id=student, question="ÉCOLE question", course="FR").doubt_id
        record_answer(doubt_id, "Oui.", professor)

        assert [r["doubt_id"] for r in search_archive(search="école")] == [doubt_id]
        assert [r["doubt_id"] for r in search_archive(search="ÉCOLE")] == [doubt_id]

    def test_search_treats_wildcards_literally(self, archive):
        assert search_archive(search="%") == []
        assert search_archive(search="_") == []

    def test_published_practice_appears(self, doubt_owner_and_practice, professor):
        doubt_id, practice_id, practising_student = doubt_owner_and_practice
        review_practice_answer(practice_id, "correct", True, professor)

        rows = search_archive()
        assert [r["doubt_id"] for r in rows] == [doubt_id]
        assert rows[0]["answered_by"] == "Practising Student"

    @pytest.fixture
    def doubt_owner_and_practice(self, student, make_user):
        practising = make_user("Practising Student")
        doubt_id = submit_doubt(user_id=student, question="Define entropy").doubt_id
        practice_id = submit_practice_answer(doubt_id, practising, "Disorder measure").practice_id
        return doubt_id, practice_id, practising


class TestLeaderboard:
    """Tests for get_leaderboard."""

    def test_top_five_by_points(self, make_user, professor):
        ids = [make_user(f"Student {i}") for i in range(7)]
        for user_id, points in zip(ids, [10, 700, 300, 0, 500, 300, 50]):
            _set_points(user_id, points)
        _set_points(professor, 10_000)

        rows = get_leaderboard()

        assert len(rows) == 5
        assert [r["points"] for r in rows] == [700, 500, 300, 300, 50]
        assert all(r["user_id"] != professor for r in rows)

    def test_non_increasing(self, make_user):
        for i in range(3):
            _set_points(make_user(f"S{i}"), i * 100)
        points = [r["points"] for r in get_leaderboard()]
        assert points == sorted(points, reverse=True)

    def test_custom_limit(self, make_user):
        for i in range(4):
            make_user(f"S{i}")
        assert len(get_leaderboard(limit=2)) == 2

    def test_invalid_limit(self, db_path):
        with pytest.raises(ValidationError):
            get_leaderboard(limit=0)

    def test_empty(self, db_path):
        assert get_leaderboard() == []


class TestSubjects:
    """Tests for list_subjects."""

    @pytest.fixture
    def subjects(self, db_path):
        upsert_department(1, "Computer Engineering")
        upsert_department(2, "Electronics")
        insert_subjects(1, "3", ["Digital Logic", "Data Structures"])
        insert_subjects(1, "4", ["Operating Systems"])
        insert_subjects(2, "3", ["Network Theory"])

    def test_alphabetical(self, subjects):
        names = [s.subject_name for s in list_subjects(1, "3")]
        assert names == ["Data Structures", "Digital Logic"]

    def test_accepts_string_department_and_int_semester(self, subjects):
        names = [s.subject_name for s in list_subjects("1", 4)]
        assert names == ["Operating Systems"]

    @pytest.mark.parametrize("args", [(None, "3"), (1, None), ("", "")])
    def test_missing_params(self, db_path, args):
        with pytest.raises(ValidationError) as exc_info:
            list_subjects(*args)
        assert "department_id and semester required" in str(exc_info.value)


class TestProfessors:
    def test_only_professors_alphabetical(self, student, professor, other_professor):
        rows = list_professors()
        assert [r["full_name"] for r in rows] == ["Dr. Mehta", "Dr. Rao"]
        assert {r["user_id"] for r in rows} == {professor, other_professor}

    def test_roles_enum_values(self):
        assert Role.PROFESSOR.value == "professor"
