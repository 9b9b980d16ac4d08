"""Response DTOs for API endpoints."""

from typing import Literal

from pydantic import BaseModel, Field

CacheOriginLiteral = Literal["hit", "miss"]


class TaskItem(BaseModel):
    """Single task."""

    id: int
    description: str
    completed: bool
    created_at: str | None = None
    updated_at: str | None = None


class NewsletterItem(BaseModel):
    """Single newsletter."""

    id: int
    title: str
    description: str
    image_url: str | None = None
    author_id: int
    created_at: str | None = None
    updated_at: str | None = None


class TaskListResponse(BaseModel):
    """Response DTO for the cached task list."""

    cache: CacheOriginLiteral = Field(..., description="'hit' if served from the cache, 'miss' otherwise")
    data: list[TaskItem]


class NewsletterListResponse(BaseModel):
    """Response DTO for the cached newsletter list."""

    cache: CacheOriginLiteral = Field(..., description="'hit' if served from the cache, 'miss' otherwise")
    data: list[NewsletterItem]


class RegisteredUserResponse(BaseModel):
    """Response DTO for a newly registered user."""

    id: int
    name: str
    email: str


class UserResponse(RegisteredUserResponse):
    """Public view of a user."""

    avatar_url: str | None = None


class SignInResponse(BaseModel):
    """Response DTO for signing in."""

    token: str = Field(..., description="Session token, send as 'Authorization: Bearer <token>'")
    user: UserResponse


class ResendConfirmationResponse(BaseModel):
    """Response DTO for resend-confirmation.

    Unknown emails only get ``message``.
    """

    message: str
    verify_url: str | None = Field(None, serialization_alias="verifyUrl")
    cooldown: int | None = Field(None, description="Seconds before another link can be requested")


class VerifyEmailResponse(BaseModel):
    """Response DTO for email verification."""

    message: str
    id: int
    email: str


class HealthCheckResponse(BaseModel):
    """Response DTO for health check."""

    status: str = Field(..., description="Health status: 'healthy' or 'unhealthy'")
    cache_healthy: bool = Field(..., description="Whether the cache backend is reachable")
    database_healthy: bool = Field(..., description="Whether the database is reachable")


class ErrorResponse(BaseModel):
    """Error body shared by every non-2xx response."""

    error: str
    code: str
