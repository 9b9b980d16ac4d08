"""Data Transfer Objects for API contracts.

These Pydantic models define the external API contract.
They are used for request/response validation and serialization.

Internal domain logic should use entities from the entities package.
"""

from .requests import (
    CreateNewsletterRequest,
    CreateTaskRequest,
    RegisterRequest,
    ResendConfirmationRequest,
    SignInRequest,
    UpdateNewsletterRequest,
    UpdateTaskRequest,
)
from .responses import (
    ErrorResponse,
    HealthCheckResponse,
    NewsletterItem,
    NewsletterListResponse,
    RegisteredUserResponse,
    ResendConfirmationResponse,
    SignInResponse,
    TaskItem,
    TaskListResponse,
    UserResponse,
    VerifyEmailResponse,
)

__all__ = [
    "CreateNewsletterRequest",
    "CreateTaskRequest",
    "RegisterRequest",
    "ResendConfirmationRequest",
    "SignInRequest",
    "UpdateNewsletterRequest",
    "UpdateTaskRequest",
    "ErrorResponse",
    "HealthCheckResponse",
    "NewsletterItem",
    "NewsletterListResponse",
    "RegisteredUserResponse",
    "ResendConfirmationResponse",
    "SignInResponse",
    "TaskItem",
    "TaskListResponse",
    "UserResponse",
    "VerifyEmailResponse",
]
