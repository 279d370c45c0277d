"""Repository functions for users table.

Provides the record-level operations the authentication collaborator and the
workflow core need on users.
"""

from __future__ import annotations

import json
import sqlite3
from typing import Any

import structlog

from doubtdesk.core.models import Role, User
from doubtdesk.db.database import get_db

logger = structlog.get_logger(__name__)


def insert_user(
    email: str,
    full_name: str,
    role: Role,
    password_hash: str,
    role_details: dict[str, Any] | None = None,
) -> int:
    """Insert a new user record.

    Args:
        email: Login email (unique)
        full_name: Display name
        role: student or professor
        password_hash: Already-hashed password
        role_details: Free-form role data (branch, semester, department...)

    Returns:
        The new user_id

    Raises:
        StorageError: If the email already exists or the write fails
    """
    with get_db() as conn:
        cursor = conn.execute(
            """
            INSERT INTO users (email, full_name, role, password_hash, role_details)
            VALUES (?, ?, ?, ?, ?)
            """,
            (
                email,
                full_name,
                Role(role).value,
                password_hash,
                json.dumps(role_details or {}),
            ),
        )
        user_id = cursor.lastrowid

    logger.debug("users.inserted", user_id=user_id, role=Role(role).value)
    return user_id


def get_user_by_id(user_id: int) -> User | None:
    """Get user by ID.

    Returns:
        User if found, None otherwise
    """
    with get_db() as conn:
        row = conn.execute(
            "SELECT * FROM users WHERE user_id = ?", (user_id,)
        ).fetchone()

    if row is None:
        return None

    return User.from_row(row)


def get_credentials_by_email(email: str) -> tuple[User, str] | None:
    """Get user and stored password hash by email.

    Returns:
        (User, password_hash) if found, None otherwise
    """
    with get_db() as conn:
        row = conn.execute(
            "SELECT * FROM users WHERE email = ?", (email,)
        ).fetchone()

    if row is None:
        return None

    return User.from_row(row), row["password_hash"]


def email_exists(email: str) -> bool:
    """Check whether an email is already registered."""
    with get_db() as conn:
        row = conn.execute(
            "SELECT 1 FROM users WHERE email = ?", (email,)
        ).fetchone()

    return row is not None


def fetch_user_role(conn: sqlite3.Connection, user_id: int) -> Role | None:
    """Look up a user's role on an open connection.

    Used inside core transactions to check referenced users.
    """
    row = conn.execute(
        "SELECT role FROM users WHERE user_id = ?", (user_id,)
    ).fetchone()

    if row is None:
        return None

    return Role(row["role"])
