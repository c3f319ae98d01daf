"""Feedback service."""

from uuid import UUID

from sqlalchemy import func
from sqlalchemy.orm import Session

from quizflow.common.pagination import PaginationParams
from quizflow.core.app_exceptions import PermissionDeniedError, ResourceNotFoundError
from quizflow.core.logging import get_logger
from quizflow.models.feedback import Feedback, FeedbackStatus
from quizflow.models.user import User
from quizflow.schemas.feedback import FeedbackCreate, FeedbackUpdate

logger = get_logger(__name__)


def create_feedback(db: Session, data: FeedbackCreate, user: User | None = None) -> Feedback:
    """Store feedback as pending, linked to the caller when signed in."""
    feedback = Feedback(
        user_id=user.id if user else None,
        type=data.type.value,
        title=data.title,
        content=data.content,
        rating=data.rating,
        user_email=str(data.user_email) if data.user_email else (user.email if user else None),
        user_name=data.user_name or (user.name if user else None),
        status=FeedbackStatus.PENDING.value,
    )
    db.add(feedback)
    db.commit()
    db.refresh(feedback)
    logger.info("Feedback received", extra={"feedback_id": str(feedback.id), "type": feedback.type})
    return feedback


def list_feedback(
    db: Session,
    user: User,
    pagination: PaginationParams,
    status: str | None = None,
    feedback_type: str | None = None,
) -> tuple[list[Feedback], int]:
    """The caller's feedback; admins see everyone's."""
    query = db.query(Feedback)
    if not user.is_admin:
        query = query.filter(Feedback.user_id == user.id)
    if status:
        query = query.filter(Feedback.status == status)
    if feedback_type:
        query = query.filter(Feedback.type == feedback_type)

    total = query.count()
    items = (
        query.order_by(Feedback.created_at.desc(), Feedback.id)
        .offset(pagination.offset)
        .limit(pagination.limit)
        .all()
    )
    return items, total


def get_feedback(db: Session, feedback_id: UUID, user: User) -> Feedback:
    feedback = db.query(Feedback).filter(Feedback.id == feedback_id).first()
    if not feedback:
        raise ResourceNotFoundError("Feedback", feedback_id)
    if not user.is_admin and feedback.user_id != user.id:
        raise PermissionDeniedError("access this feedback")
    return feedback


def update_feedback(db: Session, feedback_id: UUID, admin: User, data: FeedbackUpdate) -> Feedback:
    feedback = get_feedback(db, feedback_id, admin)
    if data.status is not None:
        feedback.status = data.status.value
    if data.admin_response is not None:
        feedback.admin_response = data.admin_response
    db.commit()
    db.refresh(feedback)
    return feedback


def delete_feedback(db: Session, feedback_id: UUID, user: User) -> None:
    feedback = get_feedback(db, feedback_id, user)
    db.delete(feedback)
    db.commit()


def get_feedback_stats(db: Session) -> dict:
    counts = dict(db.query(Feedback.status, func.count(Feedback.id)).group_by(Feedback.status).all())
    avg_rating = db.query(func.avg(Feedback.rating)).scalar()
    return {
        "total": sum(counts.values()),
        **{status.value: counts.get(status.value, 0) for status in FeedbackStatus},
        "avg_rating": round(float(avg_rating), 2) if avg_rating is not None else None,
    }
