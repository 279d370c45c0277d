"""Pydantic schemas for the Web API.

Request bodies are deliberately loose (optional fields, str | int ids): the
core owns required-field validation and reports it as a 400 with an
{"error": ...} body.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, Field, field_validator


# =============================================================================
# AUTH SCHEMAS
# =============================================================================


class SignUpRequest(BaseModel):
    """Request body for sign-up."""

    email: str | None = None
    password: str | None = None
    full_name: str | None = Field(default=None, alias="fullName")
    role: str | None = None
    role_details: dict[str, Any] | None = Field(default=None, alias="roleDetails")

    model_config = {"populate_by_name": True}


class SignedUpUser(BaseModel):
    user_id: int
    email: str
    role: str


class SignUpResponse(BaseModel):
    message: str
    user: SignedUpUser


class LoginRequest(BaseModel):
    """Request body for login."""

    email: str | None = None
    password: str | None = None
    role: str | None = None


class LoggedInUser(BaseModel):
    user_id: int
    full_name: str = Field(serialization_alias="fullName")
    role: str


class LoginResponse(BaseModel):
    message: str
    token: str
    user: LoggedInUser


# =============================================================================
# DOUBT / ANSWER SCHEMAS
# =============================================================================


class DoubtCreate(BaseModel):
    """Request body for submitting a doubt."""

    user_id: int | str | None = None
    question: str | None = None
    branch: str | None = None
    semester: str | int | None = None
    course: str | None = None
    professor: int | str | None = None


class DoubtCreatedResponse(BaseModel):
    message: str
    doubt_id: int


class AnswerCreate(BaseModel):
    """Request body for a professor answer."""

    doubt_id: int | str | None = None
    answer_text: str | None = None
    answered_by: int | str | None = None


class MessageResponse(BaseModel):
    message: str


# =============================================================================
# PRACTICE SCHEMAS
# =============================================================================


class PracticeAnswerCreate(BaseModel):
    """Request body for a practice answer."""

    doubt_id: int | str | None = None
    student_id: int | str | None = None
    answer_text: str | None = None


class PracticeReviewRequest(BaseModel):
    """Request body for reviewing a practice answer."""

    practice_id: int | str | None = None
    status: str | None = None
    publish: bool = False
    professor_id: int | str | None = None

    @field_validator("publish", mode="before")
    @classmethod
    def publish_only_on_true(cls, value: Any) -> bool:
        # "true", 1 and other truthy values do not publish
        return value is True


class PracticeReviewResponse(BaseModel):
    message: str
    practice_id: int
    status: str
    points_awarded: int
    published_answer_id: int | None = None


# =============================================================================
# VIEW SCHEMAS
# =============================================================================


class SubjectResponse(BaseModel):
    subject_id: int
    subject_name: str

    model_config = {"from_attributes": True}


class SubjectListResponse(BaseModel):
    subjects: list[SubjectResponse]


# =============================================================================
# HEALTH SCHEMAS
# =============================================================================


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = "ok"
    version: str = "0.1.0"
    timestamp: str = Field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat()
    )


class ErrorResponse(BaseModel):
    error: str
