"""Authentication collaborator.

Sign-up and login producing a user identity and role, plus bearer token
issuance. The workflow core never validates credentials itself; it only
receives user ids resolved here.
"""

from __future__ import annotations

import re
import sqlite3
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any

import bcrypt
import structlog
from jose import JWTError, jwt

from doubtdesk.config.app_config import load_app_config
from doubtdesk.core.models import Role, User
from doubtdesk.db.users_repository import (
    email_exists,
    get_credentials_by_email,
    insert_user,
)
from doubtdesk.utils.validators import (
    DoubtDeskError,
    StorageError,
    ValidationError,
    require_fields,
)

logger = structlog.get_logger(__name__)

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


class EmailInUseError(DoubtDeskError):
    """Raised when signing up with an email that is already registered."""

    def __init__(self, email: str):
        self.email = email
        super().__init__(f"Email already in use: {email}")


class InvalidCredentialsError(DoubtDeskError):
    """Raised when email, password or role do not match."""

    def __init__(self):
        super().__init__("Invalid email or password.")


@dataclass
class AuthenticatedUser:
    """Identity handed to the routing layer after login."""

    user_id: int
    full_name: str
    role: Role
    token: str


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(plain: str, hashed: str) -> bool:
    try:
        return bcrypt.checkpw(plain.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        return False


def _parse_role(raw: Any) -> Role:
    try:
        return Role(str(getattr(raw, "value", raw)).strip().lower())
    except ValueError as e:
        raise ValidationError(f"Invalid role: {raw!r}", fields=["role"]) from e


def sign_up_user(
    email: str,
    password: str,
    full_name: str,
    role: Any,
    role_details: dict[str, Any] | None,
) -> User:
    """Register a new user.

    Args:
        email: Login email
        password: Plain password (hashed with bcrypt before storage)
        full_name: Display name
        role: "student" or "professor"
        role_details: Role-specific data (branch/semester, department...)

    Returns:
        The created User

    Raises:
        ValidationError: If a field is missing or malformed
        EmailInUseError: If the email is already registered
    """
    require_fields(
        email=email,
        password=password,
        full_name=full_name,
        role=role,
        role_details=role_details,
    )
    normalized_email = email.strip().lower()
    if not EMAIL_PATTERN.match(normalized_email):
        raise ValidationError("Invalid email format", fields=["email"])

    user_role = _parse_role(role)

    if email_exists(normalized_email):
        raise EmailInUseError(normalized_email)

    try:
        user_id = insert_user(
            email=normalized_email,
            full_name=full_name.strip(),
            role=user_role,
            password_hash=hash_password(password),
            role_details=dict(role_details or {}),
        )
    except StorageError as e:
        # lost a race against a concurrent sign-up with the same email
        if isinstance(e.__cause__, sqlite3.IntegrityError):
            raise EmailInUseError(normalized_email) from e
        raise

    logger.info("auth.signed_up", user_id=user_id, role=user_role.value)

    return User(
        user_id=user_id,
        email=normalized_email,
        full_name=full_name.strip(),
        role=user_role,
        role_details=dict(role_details or {}),
    )


def login_user(email: str, password: str, role: Any) -> AuthenticatedUser:
    """Authenticate a user for a given role.

    Raises:
        ValidationError: If a field is missing
        InvalidCredentialsError: If the user does not exist, the password is
            wrong, or the account has a different role
    """
    require_fields(email=email, password=password, role=role)
    requested_role = _parse_role(role)

    found = get_credentials_by_email(email.strip().lower())
    if found is None:
        logger.info("auth.login_failed", reason="unknown_email")
        raise InvalidCredentialsError()

    user, password_hash = found
    if user.role is not requested_role or not verify_password(password, password_hash):
        logger.info("auth.login_failed", user_id=user.user_id, reason="mismatch")
        raise InvalidCredentialsError()

    logger.info("auth.logged_in", user_id=user.user_id)

    return AuthenticatedUser(
        user_id=user.user_id,
        full_name=user.full_name,
        role=user.role,
        token=issue_token(user),
    )


def issue_token(user: User) -> str:
    """Issue a signed, expiring bearer token for a user."""
    auth = load_app_config().auth
    payload = {
        "sub": str(user.user_id),
        "role": user.role.value,
        "exp": datetime.now(timezone.utc) + timedelta(minutes=auth.token_ttl_minutes),
    }
    return jwt.encode(payload, auth.get_secret(), algorithm=auth.algorithm)


def decode_token(token: str) -> dict[str, Any] | None:
    """Decode a bearer token. Returns the payload, or None if invalid or expired."""
    auth = load_app_config().auth
    try:
        return jwt.decode(token, auth.get_secret(), algorithms=[auth.algorithm])
    except (JWTError, ValueError, TypeError):
        return None
