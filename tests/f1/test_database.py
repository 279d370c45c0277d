"""Tests for database connection and schema (F1)."""

import sqlite3

import pytest

from doubtdesk.db.database import get_db, get_db_path, init_db
from doubtdesk.db.subjects_repository import insert_subjects, seed_from_catalog, upsert_department
from doubtdesk.db.users_repository import (
    email_exists,
    get_credentials_by_email,
    get_user_by_id,
    insert_user,
)
from doubtdesk.core.models import Role
from doubtdesk.utils.validators import StorageError


class TestSchema:
    """Tests for init_db."""

    def test_creates_tables(self, db_path):
        with get_db() as conn:
            names = {
                row["name"]
                for row in conn.execute(
                    "SELECT name FROM sqlite_master WHERE type = 'table'"
                )
            }
        assert {
            "users",
            "doubts",
            "answers",
            "practice_answers",
            "departments",
            "subjects",
        } <= names

    def test_init_is_idempotent(self, db_path):
        init_db(db_path)
        init_db(db_path)
        assert get_db_path() == db_path

    def test_creates_parent_directory(self, tmp_path):
        path = tmp_path / "nested" / "dir" / "x.db"
        init_db(path)
        assert path.exists()


class TestTransactions:
    """Tests for get_db transaction semantics."""

    def test_commit_on_success(self, db_path):
        with get_db() as conn:
            conn.execute("INSERT INTO departments (department_id, name) VALUES (1, 'CE')")

        with get_db() as conn:
            row = conn.execute("SELECT name FROM departments").fetchone()
        assert row["name"] == "CE"

    def test_rollback_on_exception(self, db_path):
        with pytest.raises(RuntimeError):
            with get_db() as conn:
                conn.execute("INSERT INTO departments (department_id, name) VALUES (1, 'CE')")
                raise RuntimeError("boom")

        with get_db() as conn:
            count = conn.execute("SELECT COUNT(*) FROM departments").fetchone()[0]
        assert count == 0

    def test_sqlite_error_becomes_storage_error(self, db_path):
        """SQLite failures surface as StorageError after rollback."""
        with pytest.raises(StorageError) as exc_info:
            with get_db() as conn:
                conn.execute("INSERT INTO departments (department_id, name) VALUES (1, 'CE')")
                conn.execute("INSERT INTO departments (department_id, name) VALUES (1, 'EE')")

        assert isinstance(exc_info.value.__cause__, sqlite3.IntegrityError)
        with get_db() as conn:
            count = conn.execute("SELECT COUNT(*) FROM departments").fetchone()[0]
        assert count == 0

    def test_foreign_keys_enforced(self, db_path):
        with pytest.raises(StorageError):
            with get_db() as conn:
                conn.execute(
                    "INSERT INTO doubts (user_id, question) VALUES (999, 'orphan')"
                )

    def test_immediate_transaction(self, db_path):
        with get_db(immediate=True) as conn:
            assert conn.in_transaction


class TestUsersRepository:
    def test_insert_and_get(self, db_path):
        user_id = insert_user(
            email="a@example.com",
            full_name="Ana",
            role=Role.STUDENT,
            password_hash="h",
            role_details={"branch": "CE"},
        )
        user = get_user_by_id(user_id)
        assert user is not None
        assert user.full_name == "Ana"
        assert user.role is Role.STUDENT
        assert user.points == 0
        assert user.role_details == {"branch": "CE"}

    def test_get_missing(self, db_path):
        assert get_user_by_id(12345) is None

    def test_credentials_by_email(self, db_path):
        insert_user("b@example.com", "Bo", Role.PROFESSOR, "hash-b")
        user, password_hash = get_credentials_by_email("b@example.com")
        assert user.role is Role.PROFESSOR
        assert password_hash == "hash-b"
        assert get_credentials_by_email("nobody@example.com") is None

    def test_duplicate_email_is_storage_error(self, db_path):
        insert_user("c@example.com", "Cy", Role.STUDENT, "h")
        assert email_exists("c@example.com")
        with pytest.raises(StorageError):
            insert_user("c@example.com", "Cy2", Role.STUDENT, "h")


class TestSubjectsRepository:
    def test_insert_subjects_skips_duplicates(self, db_path):
        upsert_department(1, "Computer Engineering")
        assert insert_subjects(1, "3", ["Data Structures", "Digital Logic"]) == 2
        assert insert_subjects(1, "3", ["Data Structures"]) == 0

    def test_seed_from_catalog(self, db_path):
        catalog = {
            "departments": [
                {
                    "id": 1,
                    "name": "Computer Engineering",
                    "semesters": {"3": ["Data Structures"], 4: ["Networks", "DBMS"]},
                },
                {"id": 2, "name": "Electronics"},
            ]
        }
        assert seed_from_catalog(catalog) == 3

        with get_db() as conn:
            semesters = {
                row["semester"]
                for row in conn.execute("SELECT DISTINCT semester FROM subjects")
            }
        assert semesters == {"3", "4"}

    def test_malformed_catalog_seeds_nothing(self, db_path):
        """A bad entry after valid ones rolls back the whole catalog."""
        catalog = {
            "departments": [
                {
                    "id": 1,
                    "name": "Computer Engineering",
                    "semesters": {"3": ["Data Structures"]},
                },
                {"name": "Missing id"},
            ]
        }

        with pytest.raises(KeyError):
            seed_from_catalog(catalog)

        with get_db() as conn:
            assert conn.execute("SELECT COUNT(*) FROM departments").fetchone()[0] == 0
            assert conn.execute("SELECT COUNT(*) FROM subjects").fetchone()[0] == 0


class TestSqlFunctions:
    def test_casefold_folds_unicode(self, db_path):
        with get_db() as conn:
            row = conn.execute("SELECT casefold(?) AS folded", ("ÉCOLE Straße",)).fetchone()
        assert row["folded"] == "école strasse"
