"""Practice endpoints: question browser, submission, review queue, review."""

from typing import Any

from fastapi import APIRouter, status

from doubtdesk.core.doubt_lifecycle import list_practice_questions
from doubtdesk.core.practice_review import (
    list_review_queue,
    review_practice_answer,
    submit_practice_answer,
)
from doubtdesk.web.schemas import (
    MessageResponse,
    PracticeAnswerCreate,
    PracticeReviewRequest,
    PracticeReviewResponse,
)

router = APIRouter(prefix="/api", tags=["practice"])


@router.get("/practice/questions")
def practice_questions(
    course: str | None = None,
    status: str | None = None,
) -> dict[str, Any]:
    """Doubts to practice on, optionally filtered by course and answered state."""
    return {"questions": list_practice_questions(course=course, status=status)}


@router.post(
    "/practice/answer",
    response_model=MessageResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_practice_answer(request: PracticeAnswerCreate) -> MessageResponse:
    """Submit a practice answer for professor review."""
    receipt = submit_practice_answer(
        doubt_id=request.doubt_id,
        student_id=request.student_id,
        answer_text=request.answer_text,
    )
    return MessageResponse(message=receipt.message)


@router.get("/professor/practice")
@router.get("/professor/practice/{professor_id}")
def review_queue(professor_id: int | None = None) -> dict[str, Any]:
    """Pending practice answers; the queue is shared by all professors."""
    return {"practices": list_review_queue()}


@router.post("/practice/review", response_model=PracticeReviewResponse)
def review(request: PracticeReviewRequest) -> PracticeReviewResponse:
    """Mark a practice answer correct or incorrect, optionally publishing it."""
    result = review_practice_answer(
        practice_id=request.practice_id,
        outcome=request.status,
        publish=request.publish,
        reviewer_id=request.professor_id,
    )
    return PracticeReviewResponse(
        message=result.message,
        practice_id=result.practice_id,
        status=result.outcome.value,
        points_awarded=result.points_awarded,
        published_answer_id=result.published_answer_id,
    )
