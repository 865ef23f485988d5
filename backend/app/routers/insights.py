"""Financial insights router - staircasing readiness per tenant."""

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.security import AuthenticatedUser, require_org_admin, require_org_member
from app.models.insight import FinancialInsight
from app.models.tenant import Tenant
from app.routers.tenants import get_org_tenant
from app.schemas.insight import InsightListItem, InsightResponse, RecalculateResponse
from app.services.insights import InsightService

router = APIRouter(prefix="/insights", tags=["insights"])


@router.get("", response_model=List[InsightListItem])
async def list_insights(
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_org_member),
):
    """Readiness assessments, most ready tenants first."""
    result = await db.execute(
        select(FinancialInsight, Tenant.first_name, Tenant.last_name)
        .join(Tenant, FinancialInsight.tenant_id == Tenant.id)
        .where(FinancialInsight.organisation_id == current_user.org_id)
        .order_by(FinancialInsight.readiness_score.desc(), Tenant.last_name)
    )
    return [
        InsightListItem(
            **InsightResponse.model_validate(insight).model_dump(),
            tenant_first_name=first_name,
            tenant_last_name=last_name,
        )
        for insight, first_name, last_name in result.all()
    ]


@router.post("/recalculate", response_model=RecalculateResponse)
async def recalculate_all(
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_org_admin),
):
    """Reassess every tenant of the organisation."""
    calculated = await InsightService(db).recalculate_all(current_user.org_id)
    await db.commit()
    return RecalculateResponse(calculated=calculated)


@router.post("/tenants/{tenant_id}", response_model=InsightResponse)
async def recalculate_tenant(
    tenant_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_org_admin),
):
    """Reassess a single tenant."""
    tenant = await get_org_tenant(db, tenant_id, current_user.org_id, with_related=True)
    insight = await InsightService(db).recalculate(tenant)
    await db.commit()
    await db.refresh(insight)
    return insight
