"""Plan listing and the caller's subscription."""

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from quizflow.common.envelope import SuccessResponse, ok
from quizflow.core.dependencies import get_current_user
from quizflow.db.session import get_db
from quizflow.models.user import User
from quizflow.schemas.subscription import PlanOut, SubscriptionOut
from quizflow.services import plans as plan_service

router = APIRouter()


@router.get("/plans", response_model=SuccessResponse[list[PlanOut]])
async def list_plans(request: Request):
    """Public: available plans and their limits."""
    return ok(request, [PlanOut(**plan) for plan in plan_service.list_plans()])


@router.get("", response_model=SuccessResponse[SubscriptionOut])
async def get_subscription(
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return ok(request, SubscriptionOut(**plan_service.get_subscription(db, current_user)))
