"""Read-only view endpoints: archive, leaderboard, subjects, professors."""

from typing import Any

from fastapi import APIRouter

from doubtdesk.core.query_views import (
    get_leaderboard,
    list_professors,
    list_subjects,
    search_archive,
)
from doubtdesk.web.schemas import SubjectListResponse, SubjectResponse

router = APIRouter(prefix="/api", tags=["views"])


@router.get("/archive")
def archive(
    semester: str | None = None,
    course: str | None = None,
    search: str | None = None,
) -> dict[str, Any]:
    """Answered doubts with their answers."""
    return {"archive": search_archive(semester=semester, course=course, search=search)}


@router.get("/leaderboard")
def leaderboard() -> dict[str, Any]:
    """Top students by points."""
    return {"leaderboard": get_leaderboard()}


@router.get("/subjects", response_model=SubjectListResponse)
def subjects(
    department_id: str | None = None,
    semester: str | None = None,
) -> SubjectListResponse:
    """Subjects for a department and semester."""
    rows = list_subjects(department_id, semester)
    return SubjectListResponse(
        subjects=[SubjectResponse.model_validate(s) for s in rows]
    )


@router.get("/professors")
def professors() -> dict[str, Any]:
    """Professors a doubt can be addressed to."""
    return {"professors": list_professors()}
