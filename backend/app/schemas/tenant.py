"""Tenant schemas."""

from datetime import date, datetime
from typing import Optional
from uuid import UUID

from pydantic import EmailStr, Field, field_validator

from app.models.enums import StaircasingStatus
from app.schemas.base import BaseSchema, IDMixin, TimestampMixin, reject_null


class TenantBase(BaseSchema):
    """Base tenant fields."""

    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    phone: Optional[str] = Field(None, max_length=50)
    move_in_date: date
    current_equity_percentage: float = Field(25.0, ge=0, le=100)
    monthly_rent: float = Field(..., ge=0)
    monthly_mortgage: float = Field(..., ge=0)
    monthly_service_charge: float = Field(..., ge=0)


class TenantCreate(TenantBase):
    """Create a tenant in one of the organisation's properties."""

    property_id: UUID


class TenantUpdate(BaseSchema):
    """Update tenant. All fields optional."""

    property_id: Optional[UUID] = None
    first_name: Optional[str] = Field(None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(None, min_length=1, max_length=100)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, max_length=50)
    move_in_date: Optional[date] = None
    current_equity_percentage: Optional[float] = Field(None, ge=0, le=100)
    monthly_rent: Optional[float] = Field(None, ge=0)
    monthly_mortgage: Optional[float] = Field(None, ge=0)
    monthly_service_charge: Optional[float] = Field(None, ge=0)

    @field_validator(
        "property_id",
        "first_name",
        "last_name",
        "email",
        "move_in_date",
        "current_equity_percentage",
        "monthly_rent",
        "monthly_mortgage",
        "monthly_service_charge",
    )
    @classmethod
    def not_null(cls, value):
        return reject_null(value)


class TenantResponse(TenantBase, IDMixin, TimestampMixin):
    """Tenant response."""

    organisation_id: UUID
    property_id: UUID


class TenantListItem(TenantResponse):
    """Tenant row with the address of their home."""

    property_address: str
    property_postcode: str


class TenantProperty(BaseSchema, IDMixin):
    """The property a tenant lives in."""

    address: str
    postcode: str
    property_value: float


class TenantApplication(BaseSchema, IDMixin):
    """Staircasing application as listed on a tenant's page."""

    application_date: datetime
    equity_percentage_requested: float
    estimated_cost: float
    status: StaircasingStatus
    approved_date: Optional[datetime] = None
    completed_date: Optional[datetime] = None
    notes: Optional[str] = None


class EquityBreakdown(BaseSchema):
    """Split of the property value between tenant and landlord."""

    equity_percentage: float
    owned_value: float
    remaining_value: float


class MonthlyPayments(BaseSchema):
    """What the tenant pays each month."""

    rent: float
    mortgage: float
    service_charge: float
    total: float


class TenantDetailResponse(TenantResponse):
    """Tenant with property, applications and financial breakdown."""

    property: TenantProperty
    applications: list[TenantApplication] = []
    equity: EquityBreakdown
    monthly_payments: MonthlyPayments
