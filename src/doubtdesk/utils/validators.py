"""Input validation helpers and error types.

Error kinds surfaced by the core:
- ValidationError: missing or malformed required input
- NotFoundError: referenced entity does not exist
- StorageError: transaction or connectivity failure

Functions:
- require_fields(**fields) -> None: Reject absent/blank required inputs
- parse_professor(raw) -> ProfessorAssignment: Normalize loosely-typed professor input
- parse_identity(name, raw) -> int: Coerce an identifier to a positive int
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

# SQLite INTEGER is a signed 64-bit value
MAX_IDENTITY = 2**63 - 1


class DoubtDeskError(Exception):
    """Base class for errors raised by the workflow core."""


class ValidationError(DoubtDeskError):
    """Raised when required input is missing or malformed."""

    def __init__(self, message: str, fields: list[str] | None = None):
        self.fields = fields or []
        super().__init__(message)


class NotFoundError(DoubtDeskError):
    """Raised when a referenced entity does not exist."""

    def __init__(self, entity: str, entity_id: Any):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} not found: {entity_id}")


class StorageError(DoubtDeskError):
    """Raised when the database fails during an operation.

    The transaction has already been rolled back when this is raised.
    """


@dataclass(frozen=True)
class ProfessorAssignment:
    """Professor a doubt is addressed to.

    professor_id is None when the doubt is open to any professor.
    """

    professor_id: int | None = None

    @property
    def is_assigned(self) -> bool:
        return self.professor_id is not None


UNASSIGNED = ProfessorAssignment()


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str) and not value.strip():
        return True
    return False


def require_fields(**fields: Any) -> None:
    """Ensure every keyword argument carries a value.

    Args:
        **fields: Field name to value mapping

    Raises:
        ValidationError: If any value is None or a blank string
    """
    missing = [name for name, value in fields.items() if _is_blank(value)]
    if missing:
        raise ValidationError(
            f"Missing required fields: {', '.join(missing)}", fields=missing
        )


def parse_identity(name: str, raw: Any) -> int:
    """Coerce a user/doubt/practice identifier to a positive int.

    Args:
        name: Field name used in the error message
        raw: Incoming value (int or numeric string)

    Returns:
        The identifier as int

    Raises:
        ValidationError: If the value is absent, non-numeric, not positive or out of range
    """
    if _is_blank(raw) or isinstance(raw, bool):
        raise ValidationError(f"Missing required fields: {name}", fields=[name])

    try:
        value = int(str(raw).strip())
    except ValueError as e:
        raise ValidationError(f"Invalid {name}: {raw!r}", fields=[name]) from e

    if value <= 0 or value > MAX_IDENTITY:
        raise ValidationError(f"Invalid {name}: {raw!r}", fields=[name])

    return value


def parse_professor(raw: Any) -> ProfessorAssignment:
    """Normalize the professor a doubt is addressed to.

    Examples:
        None -> UNASSIGNED
        "" -> UNASSIGNED
        "null" -> UNASSIGNED
        "7" -> ProfessorAssignment(professor_id=7)
        7 -> ProfessorAssignment(professor_id=7)

    Args:
        raw: Loosely-typed professor value from the client

    Returns:
        A concrete assignment or UNASSIGNED

    Raises:
        ValidationError: If the value is present but not a valid identifier
    """
    if isinstance(raw, ProfessorAssignment):
        return raw
    if _is_blank(raw):
        return UNASSIGNED
    if isinstance(raw, str) and raw.strip().lower() == "null":
        return UNASSIGNED

    return ProfessorAssignment(professor_id=parse_identity("professor", raw))
