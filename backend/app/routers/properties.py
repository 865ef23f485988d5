"""Properties router."""

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.core.database import get_db
from app.core.security import AuthenticatedUser, require_org_admin, require_org_member
from app.models.property import Property
from app.schemas.property import (
    PropertyCreate,
    PropertyDetailResponse,
    PropertyListResponse,
    PropertyResponse,
    PropertyTenant,
    PropertyUpdate,
    PropertyWithSummary,
)
from app.schemas.valuation import ValuationResponse
from app.services.valuation import chart_history, portfolio_totals, summarise_valuations

router = APIRouter(prefix="/properties", tags=["properties"])


async def get_org_property(
    db: AsyncSession,
    property_id: UUID,
    org_id: UUID,
    with_related: bool = False,
) -> Property:
    """Fetch a property of the organisation or raise 404."""
    query = select(Property).where(
        Property.id == property_id,
        Property.organisation_id == org_id,
    )
    if with_related:
        query = query.options(
            selectinload(Property.valuations),
            selectinload(Property.tenants),
        )
    result = await db.execute(query)
    prop = result.scalar_one_or_none()

    if not prop:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Property not found")
    return prop


@router.get("", response_model=PropertyListResponse)
async def list_properties(
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_org_member),
):
    """List the organisation's properties with valuation summaries and totals."""
    result = await db.execute(
        select(Property)
        .options(selectinload(Property.valuations))
        .where(Property.organisation_id == current_user.org_id)
        .order_by(Property.address)
    )
    properties = result.scalars().all()

    summaries = [summarise_valuations(p.property_value, p.valuations) for p in properties]
    rows = [
        PropertyWithSummary(**PropertyResponse.model_validate(p).model_dump(), **summary)
        for p, summary in zip(properties, summaries)
    ]
    return PropertyListResponse(properties=rows, **portfolio_totals(properties, summaries))


@router.post("", response_model=PropertyResponse, status_code=status.HTTP_201_CREATED)
async def create_property(
    data: PropertyCreate,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_org_admin),
):
    """Create a new property (org-scoped)."""
    prop = Property(organisation_id=current_user.org_id, **data.model_dump())
    db.add(prop)
    await db.commit()
    await db.refresh(prop)
    return prop


@router.get("/{property_id}", response_model=PropertyDetailResponse)
async def get_property(
    property_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_org_member),
):
    """Get a property with its valuation history and tenant."""
    prop = await get_org_property(db, property_id, current_user.org_id, with_related=True)

    tenants = sorted(prop.tenants, key=lambda t: t.created_at)
    return PropertyDetailResponse(
        **PropertyResponse.model_validate(prop).model_dump(),
        **summarise_valuations(prop.property_value, prop.valuations),
        valuation_history=[ValuationResponse.model_validate(v) for v in chart_history(prop.valuations)],
        tenant=PropertyTenant.model_validate(tenants[0]) if tenants else None,
    )


@router.patch("/{property_id}", response_model=PropertyResponse)
async def update_property(
    property_id: UUID,
    data: PropertyUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_org_admin),
):
    """Update a property."""
    prop = await get_org_property(db, property_id, current_user.org_id)

    update_data = data.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        setattr(prop, field, value)

    await db.commit()
    await db.refresh(prop)
    return prop


@router.delete("/{property_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_property(
    property_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_org_admin),
):
    """Delete a property together with its valuations and tenants."""
    prop = await get_org_property(db, property_id, current_user.org_id)
    await db.delete(prop)
    await db.commit()
