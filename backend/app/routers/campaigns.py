"""Marketing campaigns router."""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.core.database import get_db
from app.core.security import AuthenticatedUser, require_org_admin, require_org_member
from app.models.campaign import CampaignTrigger, MarketingCampaign
from app.schemas.campaign import (
    CampaignCreate,
    CampaignListResponse,
    CampaignResponse,
    CampaignSummary,
    CampaignUpdate,
    TriggerCreate,
    TriggerResponse,
    TriggerUpdate,
)
from app.services.campaigns import campaign_rates, campaign_summary

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/campaigns", tags=["campaigns"])


async def get_org_campaign(
    db: AsyncSession,
    campaign_id: UUID,
    org_id: UUID,
) -> MarketingCampaign:
    """Fetch a campaign with its triggers or raise 404."""
    result = await db.execute(
        select(MarketingCampaign)
        .options(selectinload(MarketingCampaign.triggers))
        .where(
            MarketingCampaign.id == campaign_id,
            MarketingCampaign.organisation_id == org_id,
        )
        .execution_options(populate_existing=True)
    )
    campaign = result.scalar_one_or_none()

    if not campaign:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Campaign not found")
    return campaign


def campaign_response(campaign: MarketingCampaign) -> CampaignResponse:
    return CampaignResponse.model_validate(campaign).model_copy(update=campaign_rates(campaign))


@router.get("", response_model=CampaignListResponse)
async def list_campaigns(
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_org_member),
):
    """List campaigns, latest start first, with funnel rates and summary."""
    result = await db.execute(
        select(MarketingCampaign)
        .options(selectinload(MarketingCampaign.triggers))
        .where(MarketingCampaign.organisation_id == current_user.org_id)
        .order_by(MarketingCampaign.start_date.desc().nulls_last(), MarketingCampaign.created_at.desc())
    )
    campaigns = result.scalars().all()

    return CampaignListResponse(
        campaigns=[campaign_response(c) for c in campaigns],
        summary=CampaignSummary(**campaign_summary(campaigns)),
    )


@router.post("", response_model=CampaignResponse, status_code=status.HTTP_201_CREATED)
async def create_campaign(
    data: CampaignCreate,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_org_admin),
):
    """Create a campaign."""
    campaign = MarketingCampaign(organisation_id=current_user.org_id, **data.model_dump())
    db.add(campaign)
    await db.commit()

    logger.info("Created campaign %s", campaign.id)
    return campaign_response(await get_org_campaign(db, campaign.id, current_user.org_id))


@router.get("/{campaign_id}", response_model=CampaignResponse)
async def get_campaign(
    campaign_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_org_member),
):
    """Get a campaign with its triggers."""
    return campaign_response(await get_org_campaign(db, campaign_id, current_user.org_id))


@router.patch("/{campaign_id}", response_model=CampaignResponse)
async def update_campaign(
    campaign_id: UUID,
    data: CampaignUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_org_admin),
):
    """Update a campaign."""
    campaign = await get_org_campaign(db, campaign_id, current_user.org_id)

    update_data = data.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        setattr(campaign, field, value)

    start, end = campaign.start_date, campaign.end_date
    if start and end and end < start:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="end_date must not be before start_date",
        )

    await db.commit()
    return campaign_response(await get_org_campaign(db, campaign_id, current_user.org_id))


@router.delete("/{campaign_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_campaign(
    campaign_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_org_admin),
):
    """Delete a campaign and its triggers."""
    campaign = await get_org_campaign(db, campaign_id, current_user.org_id)
    await db.delete(campaign)
    await db.commit()


# --- Triggers ---

@router.post("/{campaign_id}/triggers", response_model=TriggerResponse, status_code=status.HTTP_201_CREATED)
async def add_trigger(
    campaign_id: UUID,
    data: TriggerCreate,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_org_admin),
):
    """Attach an automated trigger to a campaign."""
    campaign = await get_org_campaign(db, campaign_id, current_user.org_id)

    trigger = CampaignTrigger(
        organisation_id=current_user.org_id,
        campaign_id=campaign.id,
        **data.model_dump(),
    )
    db.add(trigger)
    await db.commit()
    await db.refresh(trigger)
    return trigger


@router.patch("/{campaign_id}/triggers/{trigger_id}", response_model=TriggerResponse)
async def update_trigger(
    campaign_id: UUID,
    trigger_id: UUID,
    data: TriggerUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_org_admin),
):
    """Toggle a trigger or change its conditions."""
    result = await db.execute(
        select(CampaignTrigger).where(
            CampaignTrigger.id == trigger_id,
            CampaignTrigger.campaign_id == campaign_id,
            CampaignTrigger.organisation_id == current_user.org_id,
        )
    )
    trigger = result.scalar_one_or_none()

    if not trigger:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Trigger not found")

    update_data = data.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        setattr(trigger, field, value)

    await db.commit()
    await db.refresh(trigger)
    return trigger
