"""Service providers router."""

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.security import AuthenticatedUser, require_org_admin, require_org_member
from app.models.provider import ServiceProvider
from app.schemas.provider import (
    ProviderCreate,
    ProviderListResponse,
    ProviderResponse,
    ProviderSummary,
    ProviderUpdate,
)
from app.services.providers import group_by_type, provider_summary, sort_providers

router = APIRouter(prefix="/providers", tags=["providers"])


async def get_org_provider(db: AsyncSession, provider_id: UUID, org_id: UUID) -> ServiceProvider:
    result = await db.execute(
        select(ServiceProvider).where(
            ServiceProvider.id == provider_id,
            ServiceProvider.organisation_id == org_id,
        )
    )
    provider = result.scalar_one_or_none()

    if not provider:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Provider not found")
    return provider


@router.get("", response_model=ProviderListResponse)
async def list_providers(
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_org_member),
):
    """Provider directory, preferred and best rated first, grouped by type."""
    result = await db.execute(
        select(ServiceProvider).where(ServiceProvider.organisation_id == current_user.org_id)
    )
    providers = sort_providers(result.scalars().all())

    return ProviderListResponse(
        providers=[ProviderResponse.model_validate(p) for p in providers],
        by_type={
            provider_type: [ProviderResponse.model_validate(p) for p in group]
            for provider_type, group in group_by_type(providers).items()
        },
        summary=ProviderSummary(**provider_summary(providers)),
    )


@router.post("", response_model=ProviderResponse, status_code=status.HTTP_201_CREATED)
async def create_provider(
    data: ProviderCreate,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_org_admin),
):
    """Add a provider to the directory."""
    provider = ServiceProvider(organisation_id=current_user.org_id, **data.model_dump())
    db.add(provider)
    await db.commit()
    await db.refresh(provider)
    return provider


@router.patch("/{provider_id}", response_model=ProviderResponse)
async def update_provider(
    provider_id: UUID,
    data: ProviderUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_org_admin),
):
    """Update a provider."""
    provider = await get_org_provider(db, provider_id, current_user.org_id)

    update_data = data.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        setattr(provider, field, value)

    await db.commit()
    await db.refresh(provider)
    return provider


@router.delete("/{provider_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_provider(
    provider_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_org_admin),
):
    provider = await get_org_provider(db, provider_id, current_user.org_id)
    await db.delete(provider)
    await db.commit()


@router.post("/{provider_id}/referrals", response_model=ProviderResponse)
async def record_referral(
    provider_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_org_admin),
):
    """Count a resident referral to this provider."""
    provider = await get_org_provider(db, provider_id, current_user.org_id)
    provider.total_referrals = (provider.total_referrals or 0) + 1

    await db.commit()
    await db.refresh(provider)
    return provider
