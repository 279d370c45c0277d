"""Professor answer endpoints."""

from typing import Any

from fastapi import APIRouter, status

from doubtdesk.core.answer_recorder import list_professor_answers, record_answer
from doubtdesk.web.schemas import AnswerCreate, MessageResponse

router = APIRouter(prefix="/api", tags=["answers"])


@router.post(
    "/answers", response_model=MessageResponse, status_code=status.HTTP_201_CREATED
)
def create_answer(request: AnswerCreate) -> MessageResponse:
    """Answer a doubt and mark it answered."""
    receipt = record_answer(
        doubt_id=request.doubt_id,
        answer_text=request.answer_text,
        answered_by=request.answered_by,
    )
    return MessageResponse(message=receipt.message)


@router.get("/professor/answers/{professor_id}")
def professor_answers(professor_id: int) -> dict[str, Any]:
    """Answers written by a professor, newest first."""
    return {"answers": list_professor_answers(professor_id)}
