"""FastAPI dependencies that apply rate limits."""

from fastapi import Depends, Request

from quizflow.core.config import settings
from quizflow.core.dependencies import get_current_user
from quizflow.core.rate_limit import check_rate_limit_and_raise, get_client_ip
from quizflow.models.user import User


def require_rate_limit_submit_ip(request: Request) -> None:
    """Rate limit dependency for answer submission by IP."""
    ip = get_client_ip(request)
    check_rate_limit_and_raise(
        f"rl:submit:ip:{ip}",
        settings.RL_SUBMIT_IP_LIMIT,
        settings.RL_SUBMIT_IP_WINDOW,
        request,
    )


def require_rate_limit_feedback_ip(request: Request) -> None:
    """Rate limit dependency for feedback by IP."""
    ip = get_client_ip(request)
    check_rate_limit_and_raise(
        f"rl:feedback:ip:{ip}",
        settings.RL_FEEDBACK_IP_LIMIT,
        settings.RL_FEEDBACK_IP_WINDOW,
        request,
    )


def require_rate_limit_ai_user(request: Request, current_user: User = Depends(get_current_user)) -> None:
    """Rate limit dependency for AI drafting, per signed-in user."""
    check_rate_limit_and_raise(
        f"rl:ai:user:{current_user.id}",
        settings.RL_AI_USER_LIMIT,
        settings.RL_AI_USER_WINDOW,
        request,
    )
