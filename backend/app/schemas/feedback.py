"""Resident feedback schemas."""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import Field

from app.models.enums import FeedbackCategory, Sentiment
from app.schemas.base import BaseSchema, IDMixin


class FeedbackCreate(BaseSchema):
    """Record a survey response."""

    tenant_id: UUID
    nps_score: Optional[int] = Field(None, ge=0, le=10)
    satisfaction_score: Optional[int] = Field(None, ge=1, le=5)
    feedback_text: Optional[str] = None
    category: Optional[FeedbackCategory] = None
    sentiment: Optional[Sentiment] = None
    submitted_at: Optional[datetime] = None


class FeedbackResponse(BaseSchema, IDMixin):
    """Feedback response."""

    organisation_id: UUID
    tenant_id: UUID
    nps_score: Optional[int] = None
    satisfaction_score: Optional[int] = None
    feedback_text: Optional[str] = None
    category: Optional[str] = None
    sentiment: Optional[Sentiment] = None
    submitted_at: datetime
    created_at: datetime


class FeedbackListItem(FeedbackResponse):
    """Feedback row with the resident's name."""

    tenant_first_name: str
    tenant_last_name: str
    tenant_email: str


class CategoryMetrics(BaseSchema):
    """Response count and average satisfaction for one category."""

    count: int
    average_satisfaction: float


class FeedbackMetrics(BaseSchema):
    """Net promoter and satisfaction figures."""

    total_responses: int
    average_nps: float
    average_satisfaction: float
    promoters: int
    passives: int
    detractors: int
    nps: float
    sentiment: dict[str, int]
    categories: dict[str, CategoryMetrics]
