"""Dashboard router - headline counts for the current organisation."""

from fastapi import APIRouter, Depends
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.security import AuthenticatedUser, require_org_member
from app.models.enums import StaircasingStatus
from app.models.property import Property
from app.models.staircasing import StaircasingApplication
from app.models.tenant import Tenant
from app.schemas.dashboard import DashboardStats

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("/stats", response_model=DashboardStats)
async def get_dashboard_stats(
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_org_member),
):
    """Property, tenant and pending application counts."""
    org_id = current_user.org_id

    properties = await db.execute(
        select(func.count(Property.id)).where(Property.organisation_id == org_id)
    )
    tenants = await db.execute(
        select(func.count(Tenant.id)).where(Tenant.organisation_id == org_id)
    )
    pending = await db.execute(
        select(func.count(StaircasingApplication.id)).where(
            StaircasingApplication.organisation_id == org_id,
            StaircasingApplication.status == StaircasingStatus.PENDING,
        )
    )

    return DashboardStats(
        total_properties=properties.scalar() or 0,
        total_tenants=tenants.scalar() or 0,
        pending_applications=pending.scalar() or 0,
    )
