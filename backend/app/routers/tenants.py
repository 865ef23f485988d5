"""Tenants router."""

import logging
from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.core.database import get_db
from app.core.security import AuthenticatedUser, require_org_admin, require_org_member
from app.models.property import Property
from app.models.staircasing import StaircasingApplication
from app.models.tenant import Tenant
from app.routers.properties import get_org_property
from app.schemas.tenant import (
    EquityBreakdown,
    MonthlyPayments,
    TenantApplication,
    TenantCreate,
    TenantDetailResponse,
    TenantListItem,
    TenantProperty,
    TenantResponse,
    TenantUpdate,
)
from app.services.insights import InsightService
from app.services.staircasing import OPEN_STATUSES

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/tenants", tags=["tenants"])


async def get_org_tenant(
    db: AsyncSession,
    tenant_id: UUID,
    org_id: UUID,
    with_related: bool = False,
) -> Tenant:
    """Fetch a tenant of the organisation or raise 404."""
    query = select(Tenant).where(
        Tenant.id == tenant_id,
        Tenant.organisation_id == org_id,
    )
    if with_related:
        query = query.options(
            selectinload(Tenant.property),
            selectinload(Tenant.applications),
        )
    result = await db.execute(query)
    tenant = result.scalar_one_or_none()

    if not tenant:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Tenant not found")
    return tenant


def equity_breakdown(tenant: Tenant, property_value: float) -> EquityBreakdown:
    owned = round(tenant.current_equity_percentage / 100 * property_value, 2)
    return EquityBreakdown(
        equity_percentage=tenant.current_equity_percentage,
        owned_value=owned,
        remaining_value=round(property_value - owned, 2),
    )


def monthly_payments(tenant: Tenant) -> MonthlyPayments:
    return MonthlyPayments(
        rent=tenant.monthly_rent,
        mortgage=tenant.monthly_mortgage,
        service_charge=tenant.monthly_service_charge,
        total=round(tenant.monthly_rent + tenant.monthly_mortgage + tenant.monthly_service_charge, 2),
    )


@router.get("", response_model=List[TenantListItem])
async def list_tenants(
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_org_member),
):
    """List the organisation's tenants, newest first."""
    result = await db.execute(
        select(Tenant, Property.address, Property.postcode)
        .join(Property, Tenant.property_id == Property.id)
        .where(Tenant.organisation_id == current_user.org_id)
        .order_by(Tenant.created_at.desc())
    )
    return [
        TenantListItem(
            **TenantResponse.model_validate(tenant).model_dump(),
            property_address=address,
            property_postcode=postcode,
        )
        for tenant, address, postcode in result.all()
    ]


@router.post("", response_model=TenantResponse, status_code=status.HTTP_201_CREATED)
async def create_tenant(
    data: TenantCreate,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_org_admin),
):
    """Create a tenant in one of the organisation's properties."""
    await get_org_property(db, data.property_id, current_user.org_id)

    tenant = Tenant(organisation_id=current_user.org_id, **data.model_dump())
    db.add(tenant)
    await db.commit()
    await db.refresh(tenant)
    return tenant


@router.get("/{tenant_id}", response_model=TenantDetailResponse)
async def get_tenant(
    tenant_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_org_member),
):
    """Tenant with property, applications, equity and monthly payments."""
    tenant = await get_org_tenant(db, tenant_id, current_user.org_id, with_related=True)

    applications = sorted(tenant.applications, key=lambda a: a.application_date, reverse=True)
    return TenantDetailResponse(
        **TenantResponse.model_validate(tenant).model_dump(),
        property=TenantProperty.model_validate(tenant.property),
        applications=[TenantApplication.model_validate(a) for a in applications],
        equity=equity_breakdown(tenant, tenant.property.property_value),
        monthly_payments=monthly_payments(tenant),
    )


@router.patch("/{tenant_id}", response_model=TenantResponse)
async def update_tenant(
    tenant_id: UUID,
    data: TenantUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_org_admin),
):
    """Update a tenant.

    Moving a tenant to another property is refused while they have open
    staircasing applications, and drops insights scored against the old home.
    """
    tenant = await get_org_tenant(db, tenant_id, current_user.org_id)

    update_data = data.model_dump(exclude_unset=True)
    if "property_id" in update_data and update_data["property_id"] != tenant.property_id:
        await get_org_property(db, update_data["property_id"], current_user.org_id)

        result = await db.execute(
            select(func.count(StaircasingApplication.id)).where(
                StaircasingApplication.tenant_id == tenant.id,
                StaircasingApplication.status.in_(list(OPEN_STATUSES)),
            )
        )
        if result.scalar():
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Cannot move a tenant with open staircasing applications",
            )

        await InsightService(db).discard(tenant.id)
        logger.info("Moving tenant %s to property %s", tenant.id, update_data["property_id"])

    for field, value in update_data.items():
        setattr(tenant, field, value)

    await db.commit()
    await db.refresh(tenant)
    return tenant


@router.delete("/{tenant_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_tenant(
    tenant_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_org_admin),
):
    """Delete a tenant and their applications."""
    tenant = await get_org_tenant(db, tenant_id, current_user.org_id)
    await db.delete(tenant)
    await db.commit()
