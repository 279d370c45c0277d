"""Shared data model for the doubt / answer / practice workflow.

Records mirror the database rows; result types are what the core operations
return to the routing layer.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


# =============================================================================
# ENUMS
# =============================================================================


class Role(str, Enum):
    """User roles."""

    STUDENT = "student"
    PROFESSOR = "professor"


class DoubtStatus(str, Enum):
    """Doubt lifecycle: pending -> answered, never reversed."""

    PENDING = "pending"
    ANSWERED = "answered"


class PracticeStatus(str, Enum):
    """Practice answer lifecycle: pending -> correct | incorrect (terminal)."""

    PENDING = "pending"
    CORRECT = "correct"
    INCORRECT = "incorrect"


REVIEW_OUTCOMES = (PracticeStatus.CORRECT, PracticeStatus.INCORRECT)


# =============================================================================
# RECORDS
# =============================================================================


@dataclass
class User:
    """User record from database."""

    user_id: int
    email: str
    full_name: str
    role: Role
    points: int = 0
    role_details: dict[str, Any] = field(default_factory=dict)
    created_at: str = ""

    @classmethod
    def from_row(cls, row) -> "User":
        return cls(
            user_id=row["user_id"],
            email=row["email"],
            full_name=row["full_name"],
            role=Role(row["role"]),
            points=row["points"],
            role_details=json.loads(row["role_details"]) if row["role_details"] else {},
            created_at=row["created_at"],
        )


@dataclass
class Doubt:
    """A student question awaiting resolution."""

    doubt_id: int
    user_id: int
    question: str
    status: DoubtStatus
    professor: int | None = None
    branch: str | None = None
    semester: str | None = None
    course: str | None = None
    created_at: str = ""

    @classmethod
    def from_row(cls, row) -> "Doubt":
        return cls(
            doubt_id=row["doubt_id"],
            user_id=row["user_id"],
            question=row["question"],
            status=DoubtStatus(row["status"]),
            professor=row["professor"],
            branch=row["branch"],
            semester=row["semester"],
            course=row["course"],
            created_at=row["created_at"],
        )


@dataclass
class Answer:
    """An immutable answer resolving a doubt."""

    answer_id: int
    doubt_id: int
    answer_text: str
    answered_by: int
    created_at: str = ""

    @classmethod
    def from_row(cls, row) -> "Answer":
        return cls(
            answer_id=row["answer_id"],
            doubt_id=row["doubt_id"],
            answer_text=row["answer_text"],
            answered_by=row["answered_by"],
            created_at=row["created_at"],
        )


@dataclass
class PracticeAnswer:
    """A student's attempt at an existing doubt."""

    practice_id: int
    doubt_id: int
    student_id: int
    answer_text: str
    status: PracticeStatus
    reviewed_by: int | None = None
    reviewed_at: str | None = None
    created_at: str = ""

    @property
    def is_reviewed(self) -> bool:
        return self.status != PracticeStatus.PENDING

    @classmethod
    def from_row(cls, row) -> "PracticeAnswer":
        return cls(
            practice_id=row["practice_id"],
            doubt_id=row["doubt_id"],
            student_id=row["student_id"],
            answer_text=row["answer_text"],
            status=PracticeStatus(row["status"]),
            reviewed_by=row["reviewed_by"],
            reviewed_at=row["reviewed_at"],
            created_at=row["created_at"],
        )


@dataclass
class Subject:
    """Static reference data."""

    subject_id: int
    subject_name: str


# =============================================================================
# OPERATION RESULTS
# =============================================================================


@dataclass
class DoubtSubmission:
    """Result of submitting a doubt."""

    doubt_id: int
    status: DoubtStatus = DoubtStatus.PENDING
    professor: int | None = None
    message: str = "Doubt submitted successfully"


@dataclass
class AnswerReceipt:
    """Result of recording a professor answer."""

    answer_id: int
    doubt_id: int
    message: str = "Answer submitted successfully"


@dataclass
class PracticeReceipt:
    """Result of submitting a practice answer."""

    practice_id: int
    doubt_id: int
    message: str = "Practice answer submitted for review"


@dataclass
class ReviewResult:
    """Result of reviewing a practice answer."""

    practice_id: int
    outcome: PracticeStatus
    points_awarded: int = 0
    published_answer_id: int | None = None
    message: str = "Review processed successfully"

    @property
    def published(self) -> bool:
        return self.published_answer_id is not None
