"""FastAPI dependencies for authentication and authorization."""

from typing import Annotated, Any
from uuid import UUID

from fastapi import Depends, Header, Request
from sqlalchemy.orm import Session

from quizflow.core.app_exceptions import PermissionDeniedError, UnauthorizedError
from quizflow.core.logging import get_logger
from quizflow.core.security import verify_access_token
from quizflow.db.session import get_db
from quizflow.models.user import PlanType, User, UserRole

logger = get_logger(__name__)


def _bearer_token(authorization: str | None) -> str:
    if not authorization:
        raise UnauthorizedError("Authorization header missing")
    try:
        scheme, token = authorization.split()
        if scheme.lower() != "bearer":
            raise ValueError("Invalid authorization scheme")
    except ValueError:
        raise UnauthorizedError(
            "Invalid authorization header format. Expected: Bearer <token>"
        ) from None
    return token


def provision_user(db: Session, payload: dict[str, Any]) -> User:
    """Load the token's user, creating the local mirror on first use."""
    user_id = UUID(payload["sub"])
    user = db.query(User).filter(User.id == user_id).first()
    if user:
        return user

    app_metadata = payload.get("app_metadata") or {}
    user_metadata = payload.get("user_metadata") or {}
    role = app_metadata.get("role")
    plan = app_metadata.get("plan")
    user = User(
        id=user_id,
        email=payload.get("email"),
        name=user_metadata.get("name") or user_metadata.get("full_name"),
        role=role if role in {r.value for r in UserRole} else UserRole.TEACHER.value,
        plan=plan if plan in {p.value for p in PlanType} else PlanType.FREE.value,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info("User provisioned", extra={"user_id": str(user.id), "role": user.role})
    return user


def get_current_user(
    request: Request,
    authorization: Annotated[str | None, Header()] = None,
    db: Session = Depends(get_db),
) -> User:
    """Dependency to get the current authenticated user from the bearer token."""
    token = _bearer_token(authorization)
    try:
        payload = verify_access_token(token)
        UUID(payload["sub"])
    except Exception as e:
        raise UnauthorizedError(f"Invalid or expired token: {e}") from e

    user = provision_user(db, payload)
    request.state.user_id = str(user.id)
    return user


def get_optional_user(
    request: Request,
    authorization: Annotated[str | None, Header()] = None,
    db: Session = Depends(get_db),
) -> User | None:
    """Like ``get_current_user`` but a missing or invalid token means anonymous."""
    if not authorization:
        return None
    try:
        return get_current_user(request, authorization, db)
    except UnauthorizedError:
        return None


def require_roles(*allowed_roles: UserRole):
    """Dependency factory to require specific roles."""

    def role_checker(current_user: User = Depends(get_current_user)) -> User:
        if current_user.role not in {role.value for role in allowed_roles}:
            raise PermissionDeniedError(
                f"perform this action (required roles: {[r.value for r in allowed_roles]})"
            )
        return current_user

    return role_checker
