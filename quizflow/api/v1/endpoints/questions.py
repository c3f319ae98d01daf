"""Question bank endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from quizflow.common.envelope import SuccessResponse, ok
from quizflow.common.pagination import Page, PaginationParams, pagination_params
from quizflow.core.dependencies import get_current_user
from quizflow.db.session import get_db
from quizflow.models.question import Difficulty, QuestionType
from quizflow.models.user import User
from quizflow.schemas.question import QuestionCreate, QuestionOut, QuestionUpdate
from quizflow.services import questions as question_service

router = APIRouter()


@router.get("", response_model=SuccessResponse[Page[QuestionOut]], summary="List questions")
async def list_questions(
    request: Request,
    search: Annotated[str | None, Query(max_length=200, description="Content substring")] = None,
    tags: Annotated[list[str] | None, Query(description="Questions carrying all these tags")] = None,
    difficulty: Annotated[Difficulty | None, Query()] = None,
    type: Annotated[QuestionType | None, Query(description="Question type")] = None,
    pagination: PaginationParams = Depends(pagination_params),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """List the caller's questions, newest first."""
    items, total = question_service.list_questions(
        db,
        current_user,
        pagination,
        search=search,
        tags=tags,
        difficulty=difficulty.value if difficulty else None,
        question_type=type.value if type else None,
    )
    page = Page.build([QuestionOut.model_validate(q) for q in items], total, pagination)
    return ok(request, page)


@router.get("/tags", response_model=SuccessResponse[list[str]], summary="List tags")
async def list_tags(
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Distinct tags used across the caller's questions."""
    return ok(request, question_service.list_tags(db, current_user))


@router.get("/{question_id}", response_model=SuccessResponse[QuestionOut])
async def get_question(
    question_id: UUID,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    question = question_service.get_owned_question(db, question_id, current_user)
    return ok(request, QuestionOut.model_validate(question))


@router.post("", response_model=SuccessResponse[QuestionOut], status_code=201)
async def create_question(
    data: QuestionCreate,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Create a question (counts against the plan's question quota)."""
    question = question_service.create_question(db, current_user, data)
    return ok(request, QuestionOut.model_validate(question))


@router.patch("/{question_id}", response_model=SuccessResponse[QuestionOut])
async def update_question(
    question_id: UUID,
    data: QuestionUpdate,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    question = question_service.update_question(db, question_id, current_user, data)
    return ok(request, QuestionOut.model_validate(question))


@router.delete("/{question_id}", response_model=SuccessResponse[None])
async def delete_question(
    question_id: UUID,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    question_service.delete_question(db, question_id, current_user)
    return ok(request, None)
