"""Auth schemas."""

from uuid import UUID

from pydantic import EmailStr, Field

from app.schemas.base import BaseSchema


class SignInRequest(BaseSchema):
    """Email/password sign-in."""

    email: EmailStr
    password: str = Field(..., min_length=6, description="Password must be at least 6 characters")


class SignUpRequest(SignInRequest):
    """Create an account together with its first organisation."""

    organisation_name: str = Field(..., min_length=2, max_length=255)


class AuthResponse(BaseSchema):
    """Result of a successful sign-in or sign-up."""

    success: bool = True
    user_id: UUID
    email: str
    organisation_id: UUID | None = None


class CurrentUserResponse(BaseSchema):
    """Current authenticated user info."""

    uid: str
    email: str | None = None
    email_verified: bool = False
    db_user_id: str | None = None
    org_id: str | None = None
    org_role: str | None = None
