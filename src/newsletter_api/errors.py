"""Error hierarchy for the API.

Every error the orchestration layer raises derives from ``AppError`` and
carries its HTTP status. A single FastAPI exception handler renders them as
``{"error": message, "code": code, **details}``.
"""

from typing import Any

from newsletter_api.entities import AuthError


class AppError(Exception):
    """Base exception for all API errors."""

    status_code: int = 500
    code: str = "INTERNAL_ERROR"

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_response(self) -> dict[str, Any]:
        """Convert to the JSON error body."""
        return {"error": self.message, "code": self.code, **self.details}


class ValidationError(AppError):
    """Missing or invalid request fields."""

    status_code = 400
    code = "VALIDATION_ERROR"

    def __init__(self, message: str = "Missing required fields", details: dict[str, Any] | None = None) -> None:
        super().__init__(message, details)


class UnauthenticatedError(AppError):
    """Missing, invalid or expired identity token, or bad credentials."""

    status_code = 401
    code = "UNAUTHENTICATED"

    _MESSAGES = {
        AuthError.MISSING: "Token not provided",
        AuthError.MALFORMED: "Invalid token",
        AuthError.EXPIRED: "Token expired",
        AuthError.WRONG_PURPOSE: "Token not valid for this operation",
    }

    def __init__(self, message: str | None = None, reason: AuthError | None = None) -> None:
        self.reason = reason
        if message is None:
            message = self._MESSAGES.get(reason, "Authentication failed") if reason else "Authentication failed"
        details = {"reason": reason.value} if reason else None
        super().__init__(message, details)


class ForbiddenError(AppError):
    """Caller is authenticated but does not own the resource."""

    status_code = 403
    code = "FORBIDDEN"

    def __init__(self, message: str = "Access denied") -> None:
        super().__init__(message)


class NotFoundError(AppError):
    """No record at the requested key."""

    status_code = 404
    code = "NOT_FOUND"

    def __init__(self, resource: str) -> None:
        self.resource = resource
        super().__init__(f"{resource} not found")


class ConflictError(AppError):
    """Duplicate value for a unique field."""

    status_code = 409
    code = "CONFLICT"

    def __init__(self, message: str = "Resource already exists") -> None:
        super().__init__(message)


class RateLimitedError(AppError):
    """Cooldown window still active."""

    status_code = 429
    code = "RATE_LIMITED"

    def __init__(self, retry_after: int) -> None:
        self.retry_after = retry_after
        super().__init__(f"Wait {retry_after}s before retrying", {"retryAfter": retry_after})


class InternalError(AppError):
    """Store unreachable or unexpected failure."""

    status_code = 500
    code = "INTERNAL_ERROR"

    def __init__(self, message: str = "Internal server error") -> None:
        super().__init__(message)
