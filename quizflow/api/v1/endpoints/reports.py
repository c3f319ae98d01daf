"""Report endpoints (paper owners only)."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from quizflow.common.envelope import SuccessResponse, ok
from quizflow.common.pagination import Page, PaginationParams, pagination_params
from quizflow.core.dependencies import get_current_user
from quizflow.db.session import get_db
from quizflow.models.user import User
from quizflow.schemas.report import ReportGenerate, ReportListItem, ReportOut
from quizflow.services import reports as report_service

router = APIRouter()


@router.post("/generate", response_model=SuccessResponse[ReportOut], summary="Generate a report")
async def generate_report(
    data: ReportGenerate,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Compute the paper's report, replacing any previous one."""
    report = report_service.generate_report(db, data.paper_id, current_user)
    return ok(request, ReportOut.model_validate(report))


@router.get("", response_model=SuccessResponse[Page[ReportListItem]])
async def list_reports(
    request: Request,
    paper_id: Annotated[UUID | None, Query()] = None,
    pagination: PaginationParams = Depends(pagination_params),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    rows, total = report_service.list_reports(db, current_user, pagination, paper_id=paper_id)
    items = [
        ReportListItem.model_validate(report).model_copy(update={"paper_title": title})
        for report, title in rows
    ]
    return ok(request, Page.build(items, total, pagination))


@router.get("/paper/{paper_id}", response_model=SuccessResponse[ReportOut])
async def get_report_by_paper(
    paper_id: UUID,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    report = report_service.get_report_by_paper(db, paper_id, current_user)
    return ok(request, ReportOut.model_validate(report))


@router.get("/{report_id}", response_model=SuccessResponse[ReportOut])
async def get_report(
    report_id: UUID,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    report = report_service.get_report(db, report_id, current_user)
    return ok(request, ReportOut.model_validate(report))


@router.delete("/{report_id}", response_model=SuccessResponse[None])
async def delete_report(
    report_id: UUID,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    report_service.delete_report(db, report_id, current_user)
    return ok(request, None)
