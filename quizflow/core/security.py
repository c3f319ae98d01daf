"""Access token verification.

Tokens are issued by the hosted identity provider and signed with its shared
secret; this API never issues tokens of its own outside tests and local
tooling.
"""

from datetime import datetime, timedelta, timezone
from typing import Any

import jwt

from quizflow.core.config import settings


def verify_access_token(token: str) -> dict[str, Any]:
    """Verify and decode an access token."""
    if not settings.JWT_SECRET:
        raise ValueError("JWT_SECRET must be set")

    options = {"require": ["sub", "exp"], "verify_aud": bool(settings.JWT_AUDIENCE)}
    try:
        return jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[settings.JWT_ALG],
            audience=settings.JWT_AUDIENCE,
            options=options,
        )
    except jwt.ExpiredSignatureError:
        raise jwt.InvalidTokenError("Token has expired")
    except jwt.InvalidTokenError as e:
        raise jwt.InvalidTokenError(f"Invalid token: {e}")


def create_access_token(
    user_id: str,
    email: str | None = None,
    role: str | None = None,
    plan: str | None = None,
    expires_minutes: int | None = None,
) -> str:
    """Mint a token shaped like the identity provider's (tests and local tooling)."""
    if not settings.JWT_SECRET:
        raise ValueError("JWT_SECRET must be set")

    now = datetime.now(timezone.utc)
    expire = now + timedelta(minutes=expires_minutes or settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    app_metadata = {key: value for key, value in (("role", role), ("plan", plan)) if value}

    payload: dict[str, Any] = {
        "sub": str(user_id),
        "email": email,
        "role": "authenticated",
        "app_metadata": app_metadata,
        "iat": now,
        "exp": expire,
    }
    if settings.JWT_AUDIENCE:
        payload["aud"] = settings.JWT_AUDIENCE

    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALG)
