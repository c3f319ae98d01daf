"""AI question drafting endpoints."""

from fastapi import APIRouter, Depends, Request

from quizflow.common.envelope import SuccessResponse, ok
from quizflow.core.dependencies import get_current_user
from quizflow.core.rate_limit_deps import require_rate_limit_ai_user
from quizflow.models.user import User
from quizflow.schemas.ai import GeneratedQuestions, GenerateQuestionsRequest
from quizflow.services import ai as ai_service

router = APIRouter()


@router.post(
    "/generate-questions",
    response_model=SuccessResponse[GeneratedQuestions],
    dependencies=[Depends(require_rate_limit_ai_user)],
)
def generate_questions(
    data: GenerateQuestionsRequest,
    request: Request,
    current_user: User = Depends(get_current_user),
):
    """Draft questions from a prompt (plans with AI only). Drafts are not saved."""
    return ok(request, ai_service.generate_questions(current_user, data))
