"""Answer service: public submission with automatic scoring, and owner views."""

from datetime import timedelta
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.orm import Session

from quizflow.common.dates import utcnow
from quizflow.common.pagination import PaginationParams
from quizflow.core.app_exceptions import (
    AnswerAlreadySubmittedError,
    BusinessValidationError,
    ResourceNotFoundError,
)
from quizflow.core.logging import get_logger
from quizflow.models.answer import FINISHED_STATUSES, Answer, AnswerStatus
from quizflow.models.paper import Paper
from quizflow.models.user import User
from quizflow.schemas.answer import AnswerSubmit
from quizflow.services.papers import get_owned_paper, get_published_paper_by_code
from quizflow.services.scoring import calculate_score, is_response_correct

logger = get_logger(__name__)


def has_submitted(db: Session, paper_id: UUID, student_email: str) -> bool:
    return (
        db.query(Answer.id)
        .filter(
            Answer.paper_id == paper_id,
            func.lower(Answer.student_email) == student_email.lower(),
            Answer.status.in_(FINISHED_STATUSES),
        )
        .first()
        is not None
    )


def build_review(paper: Paper, responses: dict) -> list[dict]:
    """Per-question outcome for the student, in paper order."""
    review = []
    for question in paper.questions:
        response = responses.get(str(question.id))
        review.append(
            {
                "question_id": question.id,
                "response": response,
                "correct_answer": question.answer,
                "explanation": question.explanation,
                "is_correct": is_response_correct(response, question.answer),
                "points": question.points,
            }
        )
    return review


def submit_answer(db: Session, data: AnswerSubmit) -> tuple[Answer, list[dict] | None]:
    """Score and store a student's submission.

    Returns:
        The stored answer and, when the paper shows correct answers, the review
    """
    paper = get_published_paper_by_code(db, data.quiz_code)

    if data.student_email and has_submitted(db, paper.id, data.student_email):
        raise AnswerAlreadySubmittedError()

    score, total_score = calculate_score(data.responses, paper.questions)
    submitted_at = utcnow()

    answer = Answer(
        paper_id=paper.id,
        student_name=data.student_name,
        student_email=str(data.student_email) if data.student_email else None,
        responses=data.responses,
        score=score,
        total_score=total_score,
        time_spent=data.time_spent,
        status=AnswerStatus.COMPLETED.value,
        started_at=submitted_at - timedelta(seconds=data.time_spent),
        submitted_at=submitted_at,
    )
    db.add(answer)
    db.commit()
    db.refresh(answer)

    logger.info(
        "Answer submitted",
        extra={
            "answer_id": str(answer.id),
            "paper_id": str(paper.id),
            "score": score,
            "total_score": total_score,
        },
    )

    review = None
    if (paper.settings or {}).get("show_correct_answer"):
        review = build_review(paper, data.responses)
    return answer, review


def list_answers(
    db: Session,
    paper_id: UUID,
    user: User,
    pagination: PaginationParams,
    status: str | None = None,
    student_email: str | None = None,
) -> tuple[list[Answer], int]:
    get_owned_paper(db, paper_id, user)
    query = db.query(Answer).filter(Answer.paper_id == paper_id)
    if status:
        query = query.filter(Answer.status == status)
    if student_email:
        query = query.filter(func.lower(Answer.student_email) == student_email.lower())

    total = query.count()
    answers = (
        query.order_by(Answer.created_at.desc(), Answer.id)
        .offset(pagination.offset)
        .limit(pagination.limit)
        .all()
    )
    return answers, total


def finished_answers(db: Session, paper_id: UUID) -> list[Answer]:
    return (
        db.query(Answer)
        .filter(Answer.paper_id == paper_id, Answer.status.in_(FINISHED_STATUSES))
        .all()
    )


def get_answer_stats(db: Session, paper_id: UUID, user: User) -> dict:
    """Counts and averages over a paper's submissions (averages over finished ones)."""
    get_owned_paper(db, paper_id, user)
    total_answers = db.query(func.count(Answer.id)).filter(Answer.paper_id == paper_id).scalar()
    finished = finished_answers(db, paper_id)
    completed_count = len(finished)
    return {
        "total_answers": total_answers or 0,
        "completed_count": completed_count,
        "average_score": (
            round(sum(a.score for a in finished) / completed_count, 2) if completed_count else 0.0
        ),
        "average_time_spent": (
            round(sum(a.time_spent for a in finished) / completed_count, 2)
            if completed_count
            else 0.0
        ),
    }


def get_answer(db: Session, answer_id: UUID, user: User) -> Answer:
    """Fetch one submission; only the paper owner may read it."""
    answer = db.query(Answer).filter(Answer.id == answer_id).first()
    if not answer:
        raise ResourceNotFoundError("Answer", answer_id)
    get_owned_paper(db, answer.paper_id, user)
    return answer


def update_score(db: Session, answer_id: UUID, user: User, score: float) -> Answer:
    """Manual regrade, e.g. after reviewing essay responses."""
    answer = get_answer(db, answer_id, user)
    if score > answer.total_score:
        raise BusinessValidationError(
            "Score cannot exceed the total score",
            {"score": score, "total_score": answer.total_score},
        )
    answer.score = score
    answer.status = AnswerStatus.GRADED.value
    db.commit()
    db.refresh(answer)
    logger.info(
        "Answer regraded",
        extra={"answer_id": str(answer.id), "score": score, "user_id": str(user.id)},
    )
    return answer
