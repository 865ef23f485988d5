"""Resident feedback router."""

from datetime import datetime
from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.security import AuthenticatedUser, require_org_admin, require_org_member
from app.models.feedback import ResidentFeedback
from app.models.tenant import Tenant
from app.routers.tenants import get_org_tenant
from app.schemas.feedback import FeedbackCreate, FeedbackListItem, FeedbackMetrics, FeedbackResponse
from app.services.feedback import feedback_metrics

router = APIRouter(prefix="/feedback", tags=["feedback"])


@router.get("", response_model=List[FeedbackListItem])
async def list_feedback(
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_org_member),
):
    """Survey responses, most recently submitted first."""
    result = await db.execute(
        select(ResidentFeedback, Tenant.first_name, Tenant.last_name, Tenant.email)
        .join(Tenant, ResidentFeedback.tenant_id == Tenant.id)
        .where(ResidentFeedback.organisation_id == current_user.org_id)
        .order_by(ResidentFeedback.submitted_at.desc())
    )
    return [
        FeedbackListItem(
            **FeedbackResponse.model_validate(feedback).model_dump(),
            tenant_first_name=first_name,
            tenant_last_name=last_name,
            tenant_email=email,
        )
        for feedback, first_name, last_name, email in result.all()
    ]


@router.get("/metrics", response_model=FeedbackMetrics)
async def get_feedback_metrics(
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_org_member),
):
    """Net promoter score, satisfaction and sentiment breakdown."""
    result = await db.execute(
        select(ResidentFeedback).where(ResidentFeedback.organisation_id == current_user.org_id)
    )
    return FeedbackMetrics(**feedback_metrics(result.scalars().all()))


@router.post("", response_model=FeedbackResponse, status_code=status.HTTP_201_CREATED)
async def create_feedback(
    data: FeedbackCreate,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_org_admin),
):
    """Record a survey response from one of the organisation's tenants."""
    tenant = await get_org_tenant(db, data.tenant_id, current_user.org_id)

    feedback = ResidentFeedback(
        organisation_id=current_user.org_id,
        tenant_id=tenant.id,
        nps_score=data.nps_score,
        satisfaction_score=data.satisfaction_score,
        feedback_text=data.feedback_text,
        category=data.category.value if data.category else None,
        sentiment=data.sentiment,
        submitted_at=data.submitted_at or datetime.utcnow(),
    )
    db.add(feedback)
    await db.commit()
    await db.refresh(feedback)
    return feedback
