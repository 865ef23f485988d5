"""Staircasing applications router."""

import logging
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.core.database import get_db
from app.core.security import AuthenticatedUser, require_org_admin, require_org_member
from app.models.enums import StaircasingStatus
from app.models.property import Property
from app.models.staircasing import StaircasingApplication
from app.models.tenant import Tenant
from app.routers.tenants import get_org_tenant
from app.schemas.staircasing import (
    StaircasingCreate,
    StaircasingListItem,
    StaircasingResponse,
    StaircasingStatusUpdate,
)
from app.services.staircasing import (
    DELETABLE_STATUSES,
    InvalidTransition,
    apply_status_change,
    check_equity_headroom,
    estimate_cost,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/staircasing", tags=["staircasing"])


async def get_org_application(
    db: AsyncSession,
    application_id: UUID,
    org_id: UUID,
) -> StaircasingApplication:
    result = await db.execute(
        select(StaircasingApplication)
        .options(selectinload(StaircasingApplication.tenant))
        .where(
            StaircasingApplication.id == application_id,
            StaircasingApplication.organisation_id == org_id,
        )
    )
    application = result.scalar_one_or_none()

    if not application:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Application not found")
    return application


@router.get("", response_model=List[StaircasingListItem])
async def list_applications(
    status_filter: Optional[StaircasingStatus] = Query(None, alias="status"),
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_org_member),
):
    """List applications, newest first, optionally filtered by status."""
    query = (
        select(StaircasingApplication, Tenant, Property.address, Property.postcode)
        .join(Tenant, StaircasingApplication.tenant_id == Tenant.id)
        .join(Property, StaircasingApplication.property_id == Property.id)
        .where(StaircasingApplication.organisation_id == current_user.org_id)
        .order_by(StaircasingApplication.application_date.desc())
    )
    if status_filter:
        query = query.where(StaircasingApplication.status == status_filter)

    result = await db.execute(query)
    return [
        StaircasingListItem(
            **StaircasingResponse.model_validate(application).model_dump(),
            tenant_first_name=tenant.first_name,
            tenant_last_name=tenant.last_name,
            tenant_email=tenant.email,
            property_address=address,
            property_postcode=postcode,
        )
        for application, tenant, address, postcode in result.all()
    ]


@router.post("", response_model=StaircasingResponse, status_code=status.HTTP_201_CREATED)
async def create_application(
    data: StaircasingCreate,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_org_admin),
):
    """Open an application for a tenant to buy more equity."""
    tenant = await get_org_tenant(db, data.tenant_id, current_user.org_id, with_related=True)

    try:
        check_equity_headroom(tenant.current_equity_percentage, data.equity_percentage_requested)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    cost = data.estimated_cost
    if cost is None:
        cost = estimate_cost(data.equity_percentage_requested, tenant.property.property_value)

    application = StaircasingApplication(
        organisation_id=current_user.org_id,
        tenant_id=tenant.id,
        property_id=tenant.property_id,
        equity_percentage_requested=data.equity_percentage_requested,
        estimated_cost=cost,
        status=StaircasingStatus.PENDING,
        notes=data.notes,
    )
    db.add(application)
    await db.commit()
    await db.refresh(application)

    logger.info("Opened staircasing application %s for tenant %s", application.id, tenant.id)
    return application


@router.patch("/{application_id}/status", response_model=StaircasingResponse)
async def update_application_status(
    application_id: UUID,
    data: StaircasingStatusUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_org_admin),
):
    """Approve, reject or complete an application."""
    application = await get_org_application(db, application_id, current_user.org_id)

    try:
        apply_status_change(application, application.tenant, data.status, data.notes)
    except InvalidTransition as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    await db.commit()
    await db.refresh(application)
    return application


@router.delete("/{application_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_application(
    application_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_org_admin),
):
    """Withdraw a pending or rejected application."""
    application = await get_org_application(db, application_id, current_user.org_id)

    if application.status not in DELETABLE_STATUSES:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Cannot delete an application that is {application.status.value}",
        )

    await db.delete(application)
    await db.commit()
