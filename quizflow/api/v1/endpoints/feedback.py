"""Feedback endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from quizflow.common.envelope import SuccessResponse, ok
from quizflow.common.pagination import Page, PaginationParams, pagination_params
from quizflow.core.dependencies import get_current_user, get_optional_user, require_roles
from quizflow.core.rate_limit_deps import require_rate_limit_feedback_ip
from quizflow.db.session import get_db
from quizflow.models.feedback import FeedbackStatus, FeedbackType
from quizflow.models.user import User, UserRole
from quizflow.schemas.feedback import FeedbackCreate, FeedbackOut, FeedbackStats, FeedbackUpdate
from quizflow.services import feedback as feedback_service

router = APIRouter()


@router.post(
    "",
    response_model=SuccessResponse[FeedbackOut],
    status_code=201,
    dependencies=[Depends(require_rate_limit_feedback_ip)],
)
async def create_feedback(
    data: FeedbackCreate,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User | None = Depends(get_optional_user),
):
    """Public: submit feedback; linked to the caller when a valid token is sent."""
    feedback = feedback_service.create_feedback(db, data, current_user)
    return ok(request, FeedbackOut.model_validate(feedback))


@router.get("", response_model=SuccessResponse[Page[FeedbackOut]])
async def list_feedback(
    request: Request,
    status: Annotated[FeedbackStatus | None, Query()] = None,
    type: Annotated[FeedbackType | None, Query()] = None,
    pagination: PaginationParams = Depends(pagination_params),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """The caller's feedback (admins see all)."""
    items, total = feedback_service.list_feedback(
        db,
        current_user,
        pagination,
        status=status.value if status else None,
        feedback_type=type.value if type else None,
    )
    page = Page.build([FeedbackOut.model_validate(f) for f in items], total, pagination)
    return ok(request, page)


@router.get("/stats", response_model=SuccessResponse[FeedbackStats])
async def feedback_stats(
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(UserRole.ADMIN)),
):
    return ok(request, FeedbackStats(**feedback_service.get_feedback_stats(db)))


@router.get("/{feedback_id}", response_model=SuccessResponse[FeedbackOut])
async def get_feedback(
    feedback_id: UUID,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    feedback = feedback_service.get_feedback(db, feedback_id, current_user)
    return ok(request, FeedbackOut.model_validate(feedback))


@router.patch("/{feedback_id}", response_model=SuccessResponse[FeedbackOut])
async def update_feedback(
    feedback_id: UUID,
    data: FeedbackUpdate,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(UserRole.ADMIN)),
):
    """Admin triage: status and response."""
    feedback = feedback_service.update_feedback(db, feedback_id, current_user, data)
    return ok(request, FeedbackOut.model_validate(feedback))


@router.delete("/{feedback_id}", response_model=SuccessResponse[None])
async def delete_feedback(
    feedback_id: UUID,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    feedback_service.delete_feedback(db, feedback_id, current_user)
    return ok(request, None)
