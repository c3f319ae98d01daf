"""Application-specific exceptions for consistent error handling.

Every business rule violation is raised as an ``AppError`` subclass from the
service layer and serialized once, by the exception handlers in
``quizflow.core.errors``, into the standard error envelope.
"""

from typing import Any

from fastapi import HTTPException, status


class AppError(HTTPException):
    """Application error with standardized error code."""

    def __init__(
        self,
        status_code: int,
        code: str,
        message: str,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(
            status_code=status_code,
            detail={
                "code": code,
                "message": message,
                "details": details,
            },
        )
        self.code = code
        self.message = message
        self.details = details


class QuotaExceededError(AppError):
    """The caller's plan does not allow more of a resource."""

    def __init__(self, resource: str, limit: int | None = None):
        details = {"resource": resource}
        if limit is not None:
            details["limit"] = limit
        super().__init__(
            status.HTTP_402_PAYMENT_REQUIRED,
            "QUOTA_EXCEEDED",
            f"{resource} quota exhausted, please upgrade your plan",
            details,
        )


class ResourceNotFoundError(AppError):
    def __init__(self, resource: str, resource_id: Any | None = None):
        message = f"{resource} not found: {resource_id}" if resource_id else f"{resource} not found"
        super().__init__(status.HTTP_404_NOT_FOUND, "NOT_FOUND", message)


class PermissionDeniedError(AppError):
    def __init__(self, action: str | None = None):
        message = f"Not allowed to {action}" if action else "Not allowed to perform this action"
        super().__init__(status.HTTP_403_FORBIDDEN, "PERMISSION_DENIED", message)


class BusinessValidationError(AppError):
    """Input that is well-formed but breaks a business rule."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(status.HTTP_400_BAD_REQUEST, "VALIDATION_ERROR", message, details)


class ConflictError(AppError):
    def __init__(self, message: str):
        super().__init__(status.HTTP_409_CONFLICT, "CONFLICT", message)


class UnauthorizedError(AppError):
    def __init__(self, message: str = "Please sign in first"):
        super().__init__(status.HTTP_401_UNAUTHORIZED, "UNAUTHORIZED", message)


class TooManyRequestsError(AppError):
    def __init__(
        self,
        message: str = "Too many requests, please try again later",
        retry_after_seconds: int | None = None,
    ):
        details = {"retry_after_seconds": retry_after_seconds} if retry_after_seconds else None
        super().__init__(status.HTTP_429_TOO_MANY_REQUESTS, "TOO_MANY_REQUESTS", message, details)


class ServiceUnavailableError(AppError):
    def __init__(self, service: str):
        super().__init__(
            status.HTTP_503_SERVICE_UNAVAILABLE,
            "SERVICE_UNAVAILABLE",
            f"{service} is temporarily unavailable, please try again later",
        )


class PaperStatusError(AppError):
    """The paper's current status does not allow the requested action."""

    def __init__(self, action: str, current_status: str):
        super().__init__(
            status.HTTP_400_BAD_REQUEST,
            "INVALID_PAPER_STATUS",
            f"Paper is {current_status}, cannot {action}",
            {"current_status": current_status},
        )


class AnswerAlreadySubmittedError(AppError):
    def __init__(self):
        super().__init__(
            status.HTTP_409_CONFLICT,
            "ANSWER_ALREADY_SUBMITTED",
            "This paper has already been submitted",
        )


class InvalidQuizCodeError(AppError):
    def __init__(self):
        super().__init__(
            status.HTTP_404_NOT_FOUND,
            "INVALID_QUIZ_CODE",
            "Quiz code is invalid or the paper is not published",
        )
