"""Paper service: assembly, status transitions and quiz-code lookup."""

import re
from uuid import UUID

from sqlalchemy.orm import Session

from quizflow.common.pagination import PaginationParams
from quizflow.core.app_exceptions import (
    BusinessValidationError,
    InvalidQuizCodeError,
    PaperStatusError,
    PermissionDeniedError,
    ResourceNotFoundError,
)
from quizflow.core.logging import get_logger
from quizflow.models.paper import DEFAULT_PAPER_SETTINGS, Paper, PaperQuestion, PaperStatus
from quizflow.models.question import Question
from quizflow.models.user import User
from quizflow.schemas.paper import PaperCreate, PaperUpdate
from quizflow.services.plans import ensure_quota
from quizflow.services.quiz_code import generate_unique_quiz_code

logger = get_logger(__name__)

ALLOWED_TRANSITIONS: dict[str, set[str]] = {
    PaperStatus.DRAFT.value: {PaperStatus.PUBLISHED.value},
    PaperStatus.PUBLISHED.value: {PaperStatus.ARCHIVED.value},
    # Reopen an archived paper for editing
    PaperStatus.ARCHIVED.value: {PaperStatus.DRAFT.value},
}

QUIZ_CODE_PATTERN = re.compile(r"^[A-Z0-9]{1,10}$")


def get_owned_paper(db: Session, paper_id: UUID, user: User) -> Paper:
    """Fetch a paper the caller owns (404 if absent, 403 if someone else's)."""
    paper = db.query(Paper).filter(Paper.id == paper_id).first()
    if not paper:
        raise ResourceNotFoundError("Paper", paper_id)
    if paper.user_id != user.id:
        raise PermissionDeniedError("access this paper")
    return paper


def _load_owned_questions(db: Session, question_ids: list[UUID], user: User) -> None:
    """Check every referenced question exists (400) and belongs to the caller (403)."""
    if not question_ids:
        return
    questions = db.query(Question).filter(Question.id.in_(question_ids)).all()
    found = {question.id for question in questions}
    missing = [str(qid) for qid in question_ids if qid not in found]
    if missing:
        raise BusinessValidationError("Some questions do not exist", {"missing_ids": missing})
    if any(question.user_id != user.id for question in questions):
        raise PermissionDeniedError("use some of these questions")


def _set_questions(paper: Paper, question_ids: list[UUID]) -> None:
    # Keep surviving rows so the (paper_id, question_id) key is never inserted twice
    existing = {link.question_id: link for link in paper.question_links}
    links = []
    for position, question_id in enumerate(question_ids):
        link = existing.get(question_id) or PaperQuestion(question_id=question_id)
        link.position = position
        links.append(link)
    paper.question_links = links


def change_status(db: Session, paper: Paper, new_status: str) -> None:
    """Move a paper to ``new_status``, issuing a quiz code on first publish.

    Same-status changes are no-ops. The quiz code, once issued, is kept.
    """
    current = paper.status
    if new_status == current:
        return
    if new_status not in ALLOWED_TRANSITIONS.get(current, set()):
        raise PaperStatusError(f"move to {new_status}", current)

    if new_status == PaperStatus.PUBLISHED.value:
        if not paper.question_links:
            raise BusinessValidationError("Cannot publish a paper without questions")
        if not paper.quiz_code:
            paper.quiz_code = generate_unique_quiz_code(db)

    paper.status = new_status
    logger.info(
        "Paper status changed",
        extra={"paper_id": str(paper.id), "from": current, "to": new_status},
    )


def list_papers(
    db: Session,
    user: User,
    pagination: PaginationParams,
    status: str | None = None,
    search: str | None = None,
) -> tuple[list[Paper], int]:
    query = db.query(Paper).filter(Paper.user_id == user.id)
    if status:
        query = query.filter(Paper.status == status)
    if search:
        query = query.filter(Paper.title.ilike(f"%{search}%"))

    total = query.count()
    papers = (
        query.order_by(Paper.created_at.desc(), Paper.id)
        .offset(pagination.offset)
        .limit(pagination.limit)
        .all()
    )
    return papers, total


def create_paper(db: Session, user: User, data: PaperCreate) -> Paper:
    ensure_quota(db, user, "papers")
    _load_owned_questions(db, data.question_ids, user)

    paper = Paper(
        user_id=user.id,
        title=data.title,
        description=data.description,
        settings={**DEFAULT_PAPER_SETTINGS, **data.settings.model_dump()},
        status=PaperStatus.DRAFT.value,
    )
    _set_questions(paper, data.question_ids)
    db.add(paper)
    db.flush()

    if data.status == PaperStatus.ARCHIVED:
        # Archived on creation: no quiz code until it is reopened and published
        paper.status = PaperStatus.ARCHIVED.value
    else:
        change_status(db, paper, data.status.value)

    db.commit()
    db.refresh(paper)
    logger.info("Paper created", extra={"paper_id": str(paper.id), "user_id": str(user.id)})
    return paper


def update_paper(db: Session, paper_id: UUID, user: User, data: PaperUpdate) -> Paper:
    paper = get_owned_paper(db, paper_id, user)
    update_dict = data.model_dump(exclude_unset=True)

    if data.question_ids is not None:
        _load_owned_questions(db, data.question_ids, user)
        if not data.question_ids and paper.status == PaperStatus.PUBLISHED.value:
            raise BusinessValidationError("A published paper must keep at least one question")
        _set_questions(paper, data.question_ids)

    if data.title is not None:
        paper.title = data.title
    if "description" in update_dict:
        paper.description = data.description
    if data.settings is not None:
        paper.settings = {**DEFAULT_PAPER_SETTINGS, **data.settings.model_dump()}

    if data.status is not None:
        change_status(db, paper, data.status.value)

    db.commit()
    db.refresh(paper)
    return paper


def delete_paper(db: Session, paper_id: UUID, user: User) -> None:
    """Delete a paper with its submissions and report."""
    paper = get_owned_paper(db, paper_id, user)
    db.delete(paper)
    db.commit()
    logger.info("Paper deleted", extra={"paper_id": str(paper_id), "user_id": str(user.id)})


def publish_paper(db: Session, paper_id: UUID, user: User) -> Paper:
    paper = get_owned_paper(db, paper_id, user)
    change_status(db, paper, PaperStatus.PUBLISHED.value)
    db.commit()
    db.refresh(paper)
    return paper


def archive_paper(db: Session, paper_id: UUID, user: User) -> Paper:
    paper = get_owned_paper(db, paper_id, user)
    change_status(db, paper, PaperStatus.ARCHIVED.value)
    db.commit()
    db.refresh(paper)
    return paper


def get_published_paper_by_code(db: Session, code: str) -> Paper:
    """Resolve a quiz code to its published paper.

    Raises:
        InvalidQuizCodeError: malformed code, unknown code or paper not published
    """
    normalized = (code or "").strip().upper()
    if not QUIZ_CODE_PATTERN.match(normalized):
        raise InvalidQuizCodeError()
    paper = (
        db.query(Paper)
        .filter(Paper.quiz_code == normalized, Paper.status == PaperStatus.PUBLISHED.value)
        .first()
    )
    if not paper:
        raise InvalidQuizCodeError()
    return paper


def build_quiz_view(paper: Paper) -> dict:
    """Student-facing paper: questions in paper order, without answer keys.

    Shuffling (``shuffle_questions``/``shuffle_options``) is left to the
    quiz client so that ``order`` stays stable across reloads.
    """
    questions = [
        {
            "id": question.id,
            "type": question.type,
            "content": question.content,
            "options": question.options,
            "points": question.points,
            "order": position,
        }
        for position, question in enumerate(paper.questions, start=1)
    ]
    return {
        "id": paper.id,
        "title": paper.title,
        "description": paper.description,
        "quiz_code": paper.quiz_code,
        "settings": paper.settings,
        "total_points": paper.total_points,
        "question_count": len(questions),
        "questions": questions,
    }
