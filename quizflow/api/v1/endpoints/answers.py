"""Answer endpoints: public submission and owner-only views."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from quizflow.common.envelope import SuccessResponse, ok
from quizflow.common.pagination import Page, PaginationParams, pagination_params
from quizflow.core.dependencies import get_current_user
from quizflow.core.rate_limit_deps import require_rate_limit_submit_ip
from quizflow.db.session import get_db
from quizflow.models.answer import AnswerStatus
from quizflow.models.user import User
from quizflow.schemas.answer import AnswerOut, AnswerStats, AnswerSubmit, ScoreUpdate, SubmitResult
from quizflow.services import answers as answer_service

router = APIRouter()


@router.post(
    "/submit",
    response_model=SuccessResponse[SubmitResult],
    status_code=201,
    dependencies=[Depends(require_rate_limit_submit_ip)],
    summary="Submit a quiz",
)
async def submit_answer(data: AnswerSubmit, request: Request, db: Session = Depends(get_db)):
    """Public: score and store a submission identified by quiz code."""
    answer, review = answer_service.submit_answer(db, data)
    result = SubmitResult(
        id=answer.id,
        score=answer.score,
        total_score=answer.total_score,
        submitted_at=answer.submitted_at,
        review=review,
    )
    return ok(request, result)


@router.get("/paper/{paper_id}", response_model=SuccessResponse[Page[AnswerOut]])
async def list_answers(
    paper_id: UUID,
    request: Request,
    status: Annotated[AnswerStatus | None, Query()] = None,
    student_email: Annotated[str | None, Query(max_length=255)] = None,
    pagination: PaginationParams = Depends(pagination_params),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Submissions of a paper the caller owns."""
    items, total = answer_service.list_answers(
        db,
        paper_id,
        current_user,
        pagination,
        status=status.value if status else None,
        student_email=student_email,
    )
    page = Page.build([AnswerOut.model_validate(a) for a in items], total, pagination)
    return ok(request, page)


@router.get("/paper/{paper_id}/stats", response_model=SuccessResponse[AnswerStats])
async def answer_stats(
    paper_id: UUID,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return ok(request, AnswerStats(**answer_service.get_answer_stats(db, paper_id, current_user)))


@router.get("/{answer_id}", response_model=SuccessResponse[AnswerOut])
async def get_answer(
    answer_id: UUID,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    answer = answer_service.get_answer(db, answer_id, current_user)
    return ok(request, AnswerOut.model_validate(answer))


@router.patch("/{answer_id}/score", response_model=SuccessResponse[AnswerOut])
async def update_score(
    answer_id: UUID,
    data: ScoreUpdate,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Manual regrade; marks the submission as graded."""
    answer = answer_service.update_score(db, answer_id, current_user, data.score)
    return ok(request, AnswerOut.model_validate(answer))
