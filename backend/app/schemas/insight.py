"""Financial insight schemas."""

from datetime import datetime
from typing import Any, Optional
from uuid import UUID

from app.models.enums import RecommendedAction
from app.schemas.base import BaseSchema, IDMixin


class InsightResponse(BaseSchema, IDMixin):
    """Staircasing readiness assessment."""

    organisation_id: UUID
    tenant_id: UUID
    property_id: UUID
    readiness_score: int
    equity_growth_potential: Optional[float] = None
    estimated_monthly_savings: Optional[float] = None
    recommended_action: Optional[RecommendedAction] = None
    factors: Optional[dict[str, Any]] = None
    calculated_at: datetime


class InsightListItem(InsightResponse):
    """Assessment with the tenant's name."""

    tenant_first_name: str
    tenant_last_name: str


class RecalculateResponse(BaseSchema):
    """Result of a bulk recalculation."""

    success: bool = True
    calculated: int
