"""Valuations router - portfolio valuation report and new valuations."""

import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.core.database import get_db
from app.core.security import AuthenticatedUser, require_org_admin, require_org_member
from app.models.property import Property, PropertyValuation
from app.routers.properties import get_org_property
from app.schemas.valuation import (
    PropertyValuationOverview,
    ValuationCreate,
    ValuationReport,
    ValuationResponse,
)
from app.services.valuation import change_percent, previous_valuation, sort_history, summarise_valuations

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/valuations", tags=["valuations"])


@router.get("", response_model=ValuationReport)
async def valuation_report(
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_org_member),
):
    """Latest valuation and growth for every property of the organisation."""
    result = await db.execute(
        select(Property)
        .options(selectinload(Property.valuations))
        .where(Property.organisation_id == current_user.org_id)
        .order_by(Property.address)
    )
    properties = result.scalars().all()

    rows = []
    for prop in properties:
        history = list(reversed(sort_history(prop.valuations)))
        rows.append(
            PropertyValuationOverview(
                id=prop.id,
                address=prop.address,
                postcode=prop.postcode,
                hpi_index=history[0].hpi_index if history else None,
                valuation_history=[ValuationResponse.model_validate(v) for v in history],
                **summarise_valuations(prop.property_value, prop.valuations),
            )
        )

    count = len(rows)
    return ValuationReport(
        properties=rows,
        total_value=sum(r.current_value for r in rows),
        average_monthly_change=round(sum(r.monthly_change for r in rows) / count, 2) if count else 0.0,
        average_yearly_change=round(sum(r.yearly_change for r in rows) / count, 2) if count else 0.0,
    )


@router.post("", response_model=ValuationResponse, status_code=status.HTTP_201_CREATED)
async def create_valuation(
    data: ValuationCreate,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_org_admin),
):
    """Record a valuation, deriving the change against the previous one when not given."""
    prop = await get_org_property(db, data.property_id, current_user.org_id, with_related=True)

    change = data.value_change_percent
    if change is None:
        previous = previous_valuation(prop.valuations, data.valuation_date)
        if previous:
            change = change_percent(previous.estimated_value, data.estimated_value)

    valuation = PropertyValuation(
        organisation_id=current_user.org_id,
        property_id=prop.id,
        valuation_date=data.valuation_date,
        estimated_value=data.estimated_value,
        value_change_percent=change,
        hpi_index=data.hpi_index,
        notes=data.notes,
    )
    db.add(valuation)
    await db.commit()
    await db.refresh(valuation)

    logger.info("Recorded valuation %s for property %s", valuation.id, prop.id)
    return valuation
