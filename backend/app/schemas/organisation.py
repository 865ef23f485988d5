"""Organisation schemas."""

from typing import Optional
from uuid import UUID

from pydantic import EmailStr, Field

from app.schemas.base import BaseSchema, IDMixin, TimestampMixin
from app.models.enums import UserRole


class OrganisationCreate(BaseSchema):
    """Create a new organisation."""

    name: str = Field(..., min_length=2, max_length=255)


class OrganisationResponse(BaseSchema, IDMixin, TimestampMixin):
    """Organisation response."""

    name: str


class OrganisationWithRole(BaseSchema):
    """Organisation as seen by one of its members."""

    id: UUID
    name: str
    role: UserRole


class OrganisationSwitchRequest(BaseSchema):
    """Body of the organisation switch endpoint."""

    organisation_id: Optional[UUID] = None


class CurrentOrganisationResponse(BaseSchema):
    """Current organisation id from the cookie."""

    organisation_id: Optional[str] = None


class InviteRequest(BaseSchema):
    """Invite a user to the current organisation."""

    email: EmailStr
    role: UserRole = UserRole.VIEWER
