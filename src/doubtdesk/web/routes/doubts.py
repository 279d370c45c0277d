"""Doubt endpoints: submission, student history, professor inbox."""

from typing import Any

from fastapi import APIRouter, status

from doubtdesk.core.doubt_lifecycle import (
    list_professor_inbox,
    list_student_doubts,
    submit_doubt,
)
from doubtdesk.web.schemas import DoubtCreate, DoubtCreatedResponse

router = APIRouter(prefix="/api", tags=["doubts"])


@router.post(
    "/doubts",
    response_model=DoubtCreatedResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_doubt(request: DoubtCreate) -> DoubtCreatedResponse:
    """Submit a doubt, optionally addressed to one professor."""
    result = submit_doubt(
        user_id=request.user_id,
        question=request.question,
        branch=request.branch,
        semester=request.semester,
        course=request.course,
        professor=request.professor,
    )
    return DoubtCreatedResponse(message=result.message, doubt_id=result.doubt_id)


@router.get("/student/questions/{user_id}")
def student_questions(user_id: int) -> dict[str, Any]:
    """A student's doubts with answers, newest first."""
    return {"questions": list_student_doubts(user_id)}


@router.get("/professor/doubts/{professor_id}")
def professor_doubts(professor_id: int) -> dict[str, Any]:
    """Unanswered doubts visible to a professor."""
    return {"doubts": list_professor_inbox(professor_id)}
