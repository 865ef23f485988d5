"""Property schemas."""

from datetime import date
from typing import Optional
from uuid import UUID

from pydantic import EmailStr, Field, field_validator

from app.schemas.base import BaseSchema, IDMixin, TimestampMixin, reject_null
from app.schemas.valuation import ValuationResponse, ValuationSummaryFields


class PropertyCreate(BaseSchema):
    """Create a new property."""

    address: str = Field(..., min_length=5, max_length=255)
    postcode: str = Field(..., min_length=3, max_length=20)
    property_value: float = Field(..., gt=0)


class PropertyUpdate(BaseSchema):
    """Update property."""

    address: Optional[str] = Field(None, min_length=5, max_length=255)
    postcode: Optional[str] = Field(None, min_length=3, max_length=20)
    property_value: Optional[float] = Field(None, gt=0)

    @field_validator("address", "postcode", "property_value")
    @classmethod
    def not_null(cls, value):
        return reject_null(value)


class PropertyResponse(BaseSchema, IDMixin, TimestampMixin):
    """Property response."""

    organisation_id: UUID
    address: str
    postcode: str
    property_value: float


class PropertyWithSummary(PropertyResponse, ValuationSummaryFields):
    """Property row with its valuation headline figures."""


class PropertyListResponse(BaseSchema):
    """Properties of the current organisation plus portfolio totals."""

    properties: list[PropertyWithSummary]
    total_count: int
    total_value: float
    average_value: float
    average_yearly_change: float


class PropertyTenant(BaseSchema, IDMixin):
    """Tenant living in a property."""

    first_name: str
    last_name: str
    email: EmailStr
    phone: Optional[str] = None
    move_in_date: date
    current_equity_percentage: float
    monthly_rent: float
    monthly_mortgage: float
    monthly_service_charge: float


class PropertyDetailResponse(PropertyWithSummary):
    """Property with valuation chart data and its tenant."""

    valuation_history: list[ValuationResponse] = []
    tenant: Optional[PropertyTenant] = None
