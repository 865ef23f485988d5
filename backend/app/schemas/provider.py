"""Service provider schemas."""

from typing import Optional
from uuid import UUID

from pydantic import EmailStr, Field, field_validator

from app.models.enums import ProviderType
from app.schemas.base import BaseSchema, IDMixin, TimestampMixin, reject_null


class ProviderBase(BaseSchema):
    """Base provider fields."""

    provider_type: ProviderType
    company_name: str = Field(..., min_length=1, max_length=255)
    contact_name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    phone: str = Field(..., min_length=1, max_length=50)
    website: Optional[str] = Field(None, max_length=255)
    specializations: list[str] = []
    is_preferred: bool = False
    average_rating: Optional[float] = Field(None, ge=0, le=5)


class ProviderCreate(ProviderBase):
    """Create a provider."""


class ProviderUpdate(BaseSchema):
    """Update provider. All fields optional."""

    provider_type: Optional[ProviderType] = None
    company_name: Optional[str] = Field(None, min_length=1, max_length=255)
    contact_name: Optional[str] = Field(None, min_length=1, max_length=255)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, min_length=1, max_length=50)
    website: Optional[str] = Field(None, max_length=255)
    specializations: Optional[list[str]] = None
    is_preferred: Optional[bool] = None
    average_rating: Optional[float] = Field(None, ge=0, le=5)

    @field_validator("provider_type", "company_name", "contact_name", "email", "phone", "is_preferred")
    @classmethod
    def not_null(cls, value):
        return reject_null(value)


class ProviderResponse(ProviderBase, IDMixin, TimestampMixin):
    """Provider response."""

    organisation_id: UUID
    specializations: Optional[list[str]] = None
    total_referrals: int = 0


class ProviderSummary(BaseSchema):
    """Directory totals."""

    total: int
    preferred: int
    average_rating: float
    total_referrals: int


class ProviderListResponse(BaseSchema):
    """Providers, the same list grouped by type, and summary."""

    providers: list[ProviderResponse]
    by_type: dict[str, list[ProviderResponse]]
    summary: ProviderSummary
