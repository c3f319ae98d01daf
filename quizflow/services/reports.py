"""Report service: aggregates a paper's submissions into summary and chart data."""

from uuid import UUID

from sqlalchemy.orm import Session

from quizflow.common.dates import utcnow
from quizflow.common.pagination import PaginationParams
from quizflow.core.app_exceptions import PermissionDeniedError, ResourceNotFoundError
from quizflow.core.config import settings
from quizflow.core.logging import get_logger
from quizflow.models.answer import Answer
from quizflow.models.paper import Paper
from quizflow.models.report import Report
from quizflow.models.user import User
from quizflow.services.answers import finished_answers
from quizflow.services.papers import get_owned_paper
from quizflow.services.scoring import is_response_correct

logger = get_logger(__name__)

# (label, lower bound inclusive) in percent of total score; upper bound is the next lower bound
SCORE_BUCKETS = [("0-60", 0), ("60-70", 60), ("70-80", 70), ("80-90", 80), ("90-100", 90)]
# (label, lower bound inclusive) in minutes
TIME_BUCKETS = [("0-5", 0), ("5-10", 5), ("10-20", 10), ("20-30", 20), ("30+", 30)]


def _bucket(value: float, buckets: list[tuple[str, float]]) -> str:
    label = buckets[0][0]
    for name, lower in buckets:
        if value >= lower:
            label = name
    return label


def percentage(answer: Answer) -> float | None:
    if not answer.total_score:
        return None
    return answer.score / answer.total_score * 100


def build_summary(paper: Paper, total_answers: int, finished: list[Answer]) -> dict:
    count = len(finished)
    percentages = [p for p in (percentage(a) for a in finished) if p is not None]
    passed = sum(1 for p in percentages if p >= settings.PASS_PERCENTAGE)
    return {
        "paper_title": paper.title,
        "total_students": count,
        "total_answers": total_answers,
        "average_score": round(sum(a.score for a in finished) / count, 2) if count else 0.0,
        "average_time_spent": round(sum(a.time_spent for a in finished) / count, 2) if count else 0.0,
        "pass_rate": round(passed / count * 100, 2) if count else 0.0,
        "completion_rate": round(count / total_answers * 100, 2) if total_answers else 0.0,
        "generated_at": utcnow().isoformat(),
    }


def build_chart_data(paper: Paper, finished: list[Answer]) -> dict:
    score_distribution = {label: 0 for label, _ in SCORE_BUCKETS}
    time_analysis = {label: 0 for label, _ in TIME_BUCKETS}

    for answer in finished:
        pct = percentage(answer)
        if pct is not None:
            score_distribution[_bucket(pct, SCORE_BUCKETS)] += 1
        time_analysis[_bucket((answer.time_spent or 0) / 60, TIME_BUCKETS)] += 1

    question_analysis = []
    for position, question in enumerate(paper.questions, start=1):
        key = str(question.id)
        answered = [a.responses.get(key) for a in finished if a.responses.get(key) is not None]
        correct = sum(1 for response in answered if is_response_correct(response, question.answer))
        question_analysis.append(
            {
                "question_id": key,
                "order": position,
                "content": question.content,
                "type": question.type,
                "answered_count": len(answered),
                "correct_count": correct,
                "correct_rate": round(correct / len(finished) * 100, 2) if finished else 0.0,
            }
        )

    return {
        "score_distribution": score_distribution,
        "question_analysis": question_analysis,
        "time_analysis": time_analysis,
        "total_responses": len(finished),
    }


def generate_report(db: Session, paper_id: UUID, user: User) -> Report:
    """Compute (or recompute) the report of a paper the caller owns."""
    paper = get_owned_paper(db, paper_id, user)
    finished = finished_answers(db, paper.id)
    total_answers = db.query(Answer).filter(Answer.paper_id == paper.id).count()

    summary = build_summary(paper, total_answers, finished)
    chart_data = build_chart_data(paper, finished)

    report = db.query(Report).filter(Report.paper_id == paper.id).first()
    if report:
        report.summary = summary
        report.chart_data = chart_data
    else:
        report = Report(paper_id=paper.id, user_id=user.id, summary=summary, chart_data=chart_data)
        db.add(report)
    db.commit()
    db.refresh(report)

    logger.info(
        "Report generated",
        extra={"report_id": str(report.id), "paper_id": str(paper.id), "students": len(finished)},
    )
    return report


def list_reports(
    db: Session, user: User, pagination: PaginationParams, paper_id: UUID | None = None
) -> tuple[list[tuple[Report, str]], int]:
    """Reports of the caller with their paper titles, newest first."""
    query = (
        db.query(Report, Paper.title)
        .join(Paper, Report.paper_id == Paper.id)
        .filter(Report.user_id == user.id)
    )
    if paper_id:
        query = query.filter(Report.paper_id == paper_id)

    total = query.count()
    rows = (
        query.order_by(Report.created_at.desc(), Report.id)
        .offset(pagination.offset)
        .limit(pagination.limit)
        .all()
    )
    return [(report, title) for report, title in rows], total


def get_report(db: Session, report_id: UUID, user: User) -> Report:
    report = db.query(Report).filter(Report.id == report_id).first()
    if not report:
        raise ResourceNotFoundError("Report", report_id)
    if report.user_id != user.id:
        raise PermissionDeniedError("access this report")
    return report


def get_report_by_paper(db: Session, paper_id: UUID, user: User) -> Report:
    get_owned_paper(db, paper_id, user)
    report = db.query(Report).filter(Report.paper_id == paper_id).first()
    if not report:
        raise ResourceNotFoundError("Report for paper", paper_id)
    return report


def delete_report(db: Session, report_id: UUID, user: User) -> None:
    report = get_report(db, report_id, user)
    db.delete(report)
    db.commit()
