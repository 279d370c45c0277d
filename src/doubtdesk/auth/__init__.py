"""Authentication collaborator: sign-up, login and bearer tokens."""

from doubtdesk.auth.service import (
    AuthenticatedUser,
    EmailInUseError,
    InvalidCredentialsError,
    decode_token,
    issue_token,
    login_user,
    sign_up_user,
)

__all__ = [
    "AuthenticatedUser",
    "EmailInUseError",
    "InvalidCredentialsError",
    "decode_token",
    "issue_token",
    "login_user",
    "sign_up_user",
]
