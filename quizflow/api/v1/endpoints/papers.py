"""Paper endpoints, including the public quiz view."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from quizflow.common.envelope import SuccessResponse, ok
from quizflow.common.pagination import Page, PaginationParams, pagination_params
from quizflow.core.dependencies import get_current_user
from quizflow.db.session import get_db
from quizflow.models.paper import Paper, PaperStatus
from quizflow.models.user import User
from quizflow.schemas.paper import PaperCreate, PaperDetailOut, PaperOut, PaperUpdate, QuizPaperOut
from quizflow.services import papers as paper_service

router = APIRouter()


def _detail(paper: Paper) -> PaperDetailOut:
    return PaperDetailOut.model_validate(paper)


@router.get("/public/{code}", response_model=SuccessResponse[QuizPaperOut], summary="Open a quiz")
async def get_quiz_by_code(code: str, request: Request, db: Session = Depends(get_db)):
    """Public: the published paper behind a quiz code, without answer keys."""
    paper = paper_service.get_published_paper_by_code(db, code)
    return ok(request, QuizPaperOut.model_validate(paper_service.build_quiz_view(paper)))


@router.get("", response_model=SuccessResponse[Page[PaperOut]], summary="List papers")
async def list_papers(
    request: Request,
    status: Annotated[PaperStatus | None, Query()] = None,
    search: Annotated[str | None, Query(max_length=200, description="Title substring")] = None,
    pagination: PaginationParams = Depends(pagination_params),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    items, total = paper_service.list_papers(
        db, current_user, pagination, status=status.value if status else None, search=search
    )
    page = Page.build([PaperOut.model_validate(p) for p in items], total, pagination)
    return ok(request, page)


@router.get("/{paper_id}", response_model=SuccessResponse[PaperDetailOut])
async def get_paper(
    paper_id: UUID,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """One paper with its questions in order."""
    paper = paper_service.get_owned_paper(db, paper_id, current_user)
    return ok(request, _detail(paper))


@router.post("", response_model=SuccessResponse[PaperDetailOut], status_code=201)
async def create_paper(
    data: PaperCreate,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    paper = paper_service.create_paper(db, current_user, data)
    return ok(request, _detail(paper))


@router.patch("/{paper_id}", response_model=SuccessResponse[PaperDetailOut])
async def update_paper(
    paper_id: UUID,
    data: PaperUpdate,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    paper = paper_service.update_paper(db, paper_id, current_user, data)
    return ok(request, _detail(paper))


@router.delete("/{paper_id}", response_model=SuccessResponse[None])
async def delete_paper(
    paper_id: UUID,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    paper_service.delete_paper(db, paper_id, current_user)
    return ok(request, None)


@router.post("/{paper_id}/publish", response_model=SuccessResponse[PaperDetailOut])
async def publish_paper(
    paper_id: UUID,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Publish a draft; the first publish issues the quiz code."""
    paper = paper_service.publish_paper(db, paper_id, current_user)
    return ok(request, _detail(paper))


@router.post("/{paper_id}/archive", response_model=SuccessResponse[PaperDetailOut])
async def archive_paper(
    paper_id: UUID,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    paper = paper_service.archive_paper(db, paper_id, current_user)
    return ok(request, _detail(paper))
