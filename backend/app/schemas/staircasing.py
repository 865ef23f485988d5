"""Staircasing application schemas."""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import Field

from app.models.enums import StaircasingStatus
from app.schemas.base import BaseSchema, IDMixin, TimestampMixin


class StaircasingCreate(BaseSchema):
    """Open a staircasing application for a tenant."""

    tenant_id: UUID
    equity_percentage_requested: float = Field(..., gt=0, le=100)
    estimated_cost: Optional[float] = Field(None, ge=0)
    notes: Optional[str] = None


class StaircasingStatusUpdate(BaseSchema):
    """Move an application to a new status."""

    status: StaircasingStatus
    notes: Optional[str] = None


class StaircasingResponse(BaseSchema, IDMixin, TimestampMixin):
    """Staircasing application response."""

    organisation_id: UUID
    tenant_id: UUID
    property_id: UUID
    application_date: datetime
    equity_percentage_requested: float
    estimated_cost: float
    status: StaircasingStatus
    approved_date: Optional[datetime] = None
    completed_date: Optional[datetime] = None
    notes: Optional[str] = None


class StaircasingListItem(StaircasingResponse):
    """Application row with tenant and property details."""

    tenant_first_name: str
    tenant_last_name: str
    tenant_email: str
    property_address: str
    property_postcode: str
