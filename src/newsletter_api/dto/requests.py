"""Request DTOs for API endpoints."""

from typing import Any, ClassVar

from pydantic import BaseModel, Field


class PartialUpdate(BaseModel):
    """Base for PUT bodies: only fields the client sent are applied."""

    # Fields that may be explicitly cleared with null
    nullable_fields: ClassVar[frozenset[str]] = frozenset()

    def changes(self) -> dict[str, Any]:
        """Fields sent by the client, without nulls for non-nullable columns."""
        return {
            name: value
            for name, value in self.model_dump(exclude_unset=True).items()
            if value is not None or name in self.nullable_fields
        }


class CreateTaskRequest(BaseModel):
    """Request DTO for creating a task."""

    description: str = Field(..., description="What needs to be done", min_length=1)


class UpdateTaskRequest(PartialUpdate):
    """Request DTO for updating a task."""

    description: str | None = Field(None, description="New description", min_length=1)
    completed: bool | None = Field(None, description="Completion flag")


class CreateNewsletterRequest(BaseModel):
    """Request DTO for creating a newsletter. The author is the caller."""

    title: str = Field(..., description="Newsletter title", min_length=1, max_length=255)
    description: str = Field(..., description="Newsletter body", min_length=1)
    image_url: str | None = Field(None, description="Cover image URL", max_length=1024)


class UpdateNewsletterRequest(PartialUpdate):
    """Request DTO for updating a newsletter."""

    nullable_fields: ClassVar[frozenset[str]] = frozenset({"image_url"})

    title: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = Field(None, min_length=1)
    image_url: str | None = Field(None, max_length=1024)


class RegisterRequest(BaseModel):
    """Request DTO for user registration."""

    name: str = Field(..., min_length=1, max_length=255)
    email: str = Field(..., min_length=3, max_length=255)
    password: str = Field(..., min_length=1)


class SignInRequest(BaseModel):
    """Request DTO for signing in."""

    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class ResendConfirmationRequest(BaseModel):
    """Request DTO for resending the email-confirmation link."""

    email: str = Field(..., min_length=1, max_length=255)
