"""Marketing campaign schemas."""

from datetime import datetime
from typing import Any, Optional
from uuid import UUID

from pydantic import Field, field_validator, model_validator

from app.models.enums import CampaignStatus, TriggerType
from app.schemas.base import BaseSchema, IDMixin, TimestampMixin, reject_null


class TriggerCreate(BaseSchema):
    """Attach an automated trigger to a campaign."""

    trigger_type: TriggerType
    trigger_conditions: dict[str, Any] = Field(default_factory=dict)
    is_active: bool = True


class TriggerUpdate(BaseSchema):
    """Toggle a trigger or change its conditions."""

    trigger_conditions: Optional[dict[str, Any]] = None
    is_active: Optional[bool] = None

    @field_validator("trigger_conditions", "is_active")
    @classmethod
    def not_null(cls, value):
        return reject_null(value)


class TriggerResponse(BaseSchema, IDMixin, TimestampMixin):
    """Campaign trigger response."""

    campaign_id: UUID
    trigger_type: TriggerType
    trigger_conditions: dict[str, Any]
    is_active: bool
    last_triggered_at: Optional[datetime] = None


class CampaignBase(BaseSchema):
    """Base campaign fields."""

    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    status: CampaignStatus = CampaignStatus.DRAFT
    target_segment: Optional[dict[str, Any]] = None
    email_template: Optional[str] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None


class CampaignCreate(CampaignBase):
    """Create a campaign."""

    @model_validator(mode="after")
    def check_dates(self) -> "CampaignCreate":
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self


class CampaignUpdate(BaseSchema):
    """Update campaign. Funnel counters may be reported back by the mailer."""

    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    status: Optional[CampaignStatus] = None
    target_segment: Optional[dict[str, Any]] = None
    email_template: Optional[str] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    total_sent: Optional[int] = Field(None, ge=0)
    total_opened: Optional[int] = Field(None, ge=0)
    total_clicked: Optional[int] = Field(None, ge=0)
    total_converted: Optional[int] = Field(None, ge=0)

    @field_validator(
        "name", "status", "total_sent", "total_opened", "total_clicked", "total_converted"
    )
    @classmethod
    def not_null(cls, value):
        return reject_null(value)


class CampaignResponse(CampaignBase, IDMixin, TimestampMixin):
    """Campaign with funnel counters, rates and triggers."""

    organisation_id: UUID
    total_sent: int = 0
    total_opened: int = 0
    total_clicked: int = 0
    total_converted: int = 0
    open_rate: float = 0.0
    click_rate: float = 0.0
    conversion_rate: float = 0.0
    triggers: list[TriggerResponse] = []


class CampaignSummary(BaseSchema):
    """Totals across all campaigns of the organisation."""

    active_campaigns: int
    total_sent: int
    total_converted: int
    conversion_rate: float


class CampaignListResponse(BaseSchema):
    """Campaign list with summary."""

    campaigns: list[CampaignResponse]
    summary: CampaignSummary
