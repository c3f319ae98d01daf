"""Subscription plans and per-plan quotas."""

from dataclasses import asdict, dataclass

from sqlalchemy import func
from sqlalchemy.orm import Session

from quizflow.core.app_exceptions import QuotaExceededError
from quizflow.models.paper import Paper
from quizflow.models.question import Question
from quizflow.models.user import PlanType, User


@dataclass(frozen=True)
class PlanLimits:
    questions: int
    papers: int
    ai_enabled: bool


PLAN_LIMITS: dict[str, PlanLimits] = {
    PlanType.FREE.value: PlanLimits(questions=100, papers=10, ai_enabled=False),
    PlanType.PROFESSIONAL.value: PlanLimits(questions=1000, papers=100, ai_enabled=True),
    PlanType.INSTITUTION.value: PlanLimits(questions=10000, papers=1000, ai_enabled=True),
    PlanType.AI_ENHANCED.value: PlanLimits(questions=5000, papers=500, ai_enabled=True),
}

# Resource name -> model counted against the quota
QUOTA_MODELS = {"questions": Question, "papers": Paper}


def get_plan_limits(plan: str | None) -> PlanLimits:
    """Limits of ``plan``; unknown plans fall back to the free tier."""
    return PLAN_LIMITS.get(plan or PlanType.FREE.value, PLAN_LIMITS[PlanType.FREE.value])


def list_plans() -> list[dict]:
    return [{"id": plan_id, **asdict(limits)} for plan_id, limits in PLAN_LIMITS.items()]


def count_usage(db: Session, user_id, resource: str) -> int:
    model = QUOTA_MODELS[resource]
    return db.query(func.count(model.id)).filter(model.user_id == user_id).scalar() or 0


def ensure_quota(db: Session, user: User, resource: str) -> None:
    """Raise if creating one more ``resource`` would exceed the user's plan."""
    limit = getattr(get_plan_limits(user.plan), resource)
    if count_usage(db, user.id, resource) >= limit:
        raise QuotaExceededError(resource, limit)


def ensure_feature(user: User, feature: str, resource: str) -> None:
    """Raise when the user's plan lacks ``feature`` (a boolean limit) guarding ``resource``."""
    if not getattr(get_plan_limits(user.plan), feature):
        raise QuotaExceededError(resource, 0)


def get_subscription(db: Session, user: User) -> dict:
    """Current plan, its limits and the caller's usage."""
    limits = get_plan_limits(user.plan)
    return {
        "plan": user.plan,
        "status": "active",
        "limits": {"id": user.plan, **asdict(limits)},
        "usage": {resource: count_usage(db, user.id, resource) for resource in QUOTA_MODELS},
    }
