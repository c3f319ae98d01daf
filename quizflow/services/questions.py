"""Question bank service: owner-scoped CRUD, filters and tags."""

from uuid import UUID

from sqlalchemy import distinct
from sqlalchemy.orm import Session

from quizflow.common.pagination import PaginationParams
from quizflow.core.app_exceptions import (
    BusinessValidationError,
    PermissionDeniedError,
    ResourceNotFoundError,
)
from quizflow.core.logging import get_logger
from quizflow.models.paper import PaperStatus
from quizflow.models.question import Question, QuestionTag
from quizflow.models.user import User
from quizflow.schemas.question import QuestionCreate, QuestionUpdate, check_question_shape
from quizflow.services.plans import ensure_quota

logger = get_logger(__name__)


def get_owned_question(db: Session, question_id: UUID, user: User) -> Question:
    """Fetch a question the caller owns (404 if absent, 403 if someone else's)."""
    question = db.query(Question).filter(Question.id == question_id).first()
    if not question:
        raise ResourceNotFoundError("Question", question_id)
    if question.user_id != user.id:
        raise PermissionDeniedError("access this question")
    return question


def list_questions(
    db: Session,
    user: User,
    pagination: PaginationParams,
    search: str | None = None,
    tags: list[str] | None = None,
    difficulty: str | None = None,
    question_type: str | None = None,
) -> tuple[list[Question], int]:
    """List the caller's questions, newest first.

    ``tags`` matches questions carrying every listed tag.
    """
    query = db.query(Question).filter(Question.user_id == user.id)

    if search:
        query = query.filter(Question.content.ilike(f"%{search}%"))
    for tag in tags or []:
        query = query.filter(Question.tag_links.any(QuestionTag.tag == tag))
    if difficulty:
        query = query.filter(Question.difficulty == difficulty)
    if question_type:
        query = query.filter(Question.type == question_type)

    total = query.count()
    questions = (
        query.order_by(Question.created_at.desc(), Question.id)
        .offset(pagination.offset)
        .limit(pagination.limit)
        .all()
    )
    return questions, total


def list_tags(db: Session, user: User) -> list[str]:
    """Distinct tags used by the caller, alphabetically."""
    rows = (
        db.query(distinct(QuestionTag.tag))
        .join(Question, QuestionTag.question_id == Question.id)
        .filter(Question.user_id == user.id)
        .order_by(QuestionTag.tag)
        .all()
    )
    return [row[0] for row in rows]


def create_question(db: Session, user: User, data: QuestionCreate) -> Question:
    """Create a question within the caller's plan quota."""
    ensure_quota(db, user, "questions")

    question = Question(
        user_id=user.id,
        type=data.type.value,
        content=data.content,
        options=data.options,
        answer=data.answer,
        explanation=data.explanation,
        difficulty=data.difficulty.value,
        points=data.points,
    )
    question.tags = data.tags
    db.add(question)
    db.commit()
    db.refresh(question)

    logger.info(
        "Question created",
        extra={"question_id": str(question.id), "user_id": str(user.id), "type": question.type},
    )
    return question


def update_question(db: Session, question_id: UUID, user: User, data: QuestionUpdate) -> Question:
    """Apply a partial update after re-checking the merged question's shape."""
    question = get_owned_question(db, question_id, user)
    update_dict = data.model_dump(exclude_unset=True)

    merged_type = update_dict.get("type") or question.type
    merged_type = getattr(merged_type, "value", merged_type)
    merged_options = update_dict["options"] if "options" in update_dict else question.options
    merged_answer = update_dict["answer"] if "answer" in update_dict else question.answer
    try:
        check_question_shape(merged_type, merged_options, merged_answer)
    except ValueError as e:
        raise BusinessValidationError(str(e)) from e

    for field, value in update_dict.items():
        if field in ("type", "difficulty") and value is not None:
            value = value.value
        if field == "tags":
            question.tags = value or []
            continue
        if value is None and field in ("content", "answer", "type", "difficulty", "points"):
            # Required columns cannot be cleared
            continue
        setattr(question, field, value)

    db.commit()
    db.refresh(question)
    return question


def delete_question(db: Session, question_id: UUID, user: User) -> None:
    """Delete a question; it is also removed from every paper that used it.

    A published paper must keep at least one question, so its last question
    cannot be deleted.
    """
    question = get_owned_question(db, question_id, user)
    sole_question_of = [
        str(link.paper_id)
        for link in question.paper_links
        if link.paper.status == PaperStatus.PUBLISHED.value and len(link.paper.question_links) == 1
    ]
    if sole_question_of:
        raise BusinessValidationError(
            "Cannot delete the only question of a published paper",
            {"paper_ids": sole_question_of},
        )
    db.delete(question)
    db.commit()
    logger.info("Question deleted", extra={"question_id": str(question_id), "user_id": str(user.id)})
