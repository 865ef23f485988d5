"""Property valuation schemas."""

from datetime import date, datetime
from typing import Optional
from uuid import UUID

from pydantic import Field

from app.schemas.base import BaseSchema, IDMixin


class ValuationCreate(BaseSchema):
    """Record a new valuation for a property."""

    property_id: UUID
    valuation_date: date
    estimated_value: float = Field(..., gt=0)
    hpi_index: Optional[float] = Field(None, gt=0)
    value_change_percent: Optional[float] = None
    notes: Optional[str] = None


class ValuationResponse(BaseSchema, IDMixin):
    """Valuation response."""

    property_id: UUID
    valuation_date: date
    estimated_value: float
    value_change_percent: Optional[float] = None
    hpi_index: Optional[float] = None
    notes: Optional[str] = None
    created_at: datetime


class ValuationSummaryFields(BaseSchema):
    """Headline figures derived from a property's valuation history."""

    original_value: float
    current_value: float
    valuation_date: Optional[date] = None
    monthly_change: float = 0.0
    yearly_change: float = 0.0


class PropertyValuationOverview(ValuationSummaryFields):
    """One row of the valuations report."""

    id: UUID
    address: str
    postcode: str
    hpi_index: Optional[float] = None
    valuation_history: list[ValuationResponse] = []


class ValuationReport(BaseSchema):
    """Portfolio-wide valuation report."""

    properties: list[PropertyValuationOverview]
    total_value: float
    average_monthly_change: float
    average_yearly_change: float
