"""Staircasing readiness scoring."""

import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Optional
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.models.enums import RecommendedAction
from app.models.insight import FinancialInsight
from app.models.tenant import Tenant

logger = logging.getLogger(__name__)

DAYS_PER_YEAR = 365
GROWTH_POTENTIAL_CAP = 50_000.0
MARKET_CONDITIONS_SCORE = 20


@dataclass
class Readiness:
    """Outcome of a readiness assessment."""

    score: int
    recommended_action: RecommendedAction
    equity_growth_potential: float
    estimated_monthly_savings: float
    factors: dict[str, Any] = field(default_factory=dict)


def _equity_score(equity: float) -> int:
    if equity >= 50:
        return 30
    if equity >= 35:
        return 20
    return 10


def _tenancy_score(years: float) -> int:
    if years >= 3:
        return 20
    if years >= 1.5:
        return 15
    return 5


def _payment_capacity_score(monthly_total: float) -> int:
    if monthly_total < 1500:
        return 25
    if monthly_total < 2000:
        return 18
    return 10


def recommend(score: int) -> RecommendedAction:
    if score >= 70:
        return RecommendedAction.STAIRCASE_NOW
    if score >= 50:
        return RecommendedAction.SAVE_MORE
    return RecommendedAction.WAIT_FOR_VALUE_INCREASE


def calculate_readiness(
    tenant: Tenant,
    property_value: float,
    today: Optional[date] = None,
) -> Readiness:
    """Score how ready a tenant is to buy more equity (0-95)."""
    today = today or date.today()
    equity = tenant.current_equity_percentage
    years = (today - tenant.move_in_date).days / DAYS_PER_YEAR
    monthly_total = tenant.monthly_rent + tenant.monthly_mortgage + tenant.monthly_service_charge

    factors = {
        "current_equity": equity,
        "property_value_trend": "increasing",
        "time_as_tenant": round(years, 1),
        "equity_score": _equity_score(equity),
        "time_score": _tenancy_score(years),
        "payment_capacity_score": _payment_capacity_score(monthly_total),
        "market_conditions_score": MARKET_CONDITIONS_SCORE,
    }
    score = (
        factors["equity_score"]
        + factors["time_score"]
        + factors["payment_capacity_score"]
        + factors["market_conditions_score"]
    )

    remaining_value = (100 - equity) / 100 * property_value
    savings = tenant.monthly_rent if equity >= 50 else tenant.monthly_rent * 0.5

    return Readiness(
        score=score,
        recommended_action=recommend(score),
        equity_growth_potential=round(min(remaining_value, GROWTH_POTENTIAL_CAP), 2),
        estimated_monthly_savings=round(savings, 2),
        factors=factors,
    )


class InsightService:
    """Persists readiness assessments for an organisation's tenants."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def discard(self, tenant_id: UUID) -> None:
        """Drop assessments made against the tenant's current home."""
        await self.db.execute(
            delete(FinancialInsight).where(FinancialInsight.tenant_id == tenant_id)
        )

    async def recalculate(self, tenant: Tenant, today: Optional[date] = None) -> FinancialInsight:
        """Replace the tenant's insight with a fresh assessment.

        ``tenant.property`` must be loaded.
        """
        readiness = calculate_readiness(tenant, tenant.property.property_value, today)

        await self.discard(tenant.id)
        insight = FinancialInsight(
            organisation_id=tenant.organisation_id,
            tenant_id=tenant.id,
            property_id=tenant.property_id,
            readiness_score=readiness.score,
            equity_growth_potential=readiness.equity_growth_potential,
            estimated_monthly_savings=readiness.estimated_monthly_savings,
            recommended_action=readiness.recommended_action.value,
            factors=readiness.factors,
            calculated_at=datetime.utcnow(),
        )
        self.db.add(insight)
        await self.db.flush()
        return insight

    async def recalculate_all(self, organisation_id: UUID, today: Optional[date] = None) -> int:
        """Reassess every tenant of an organisation. Returns the number assessed."""
        result = await self.db.execute(
            select(Tenant)
            .options(selectinload(Tenant.property))
            .where(Tenant.organisation_id == organisation_id)
        )
        tenants = result.scalars().all()
        for tenant in tenants:
            await self.recalculate(tenant, today)
        logger.info("Recalculated %d insights for organisation %s", len(tenants), organisation_id)
        return len(tenants)
