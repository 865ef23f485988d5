"""Organisation router - membership listing and current organisation switching."""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response, status
from fastapi.responses import RedirectResponse
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.security import (
    ORGANISATION_COOKIE,
    AuthenticatedUser,
    get_current_user,
    get_membership,
    parse_uuid,
    require_org_admin,
    set_organisation_cookie,
)
from app.models.enums import UserRole
from app.models.organisation import Organisation, UserOrganisation
from app.models.user import User
from app.schemas.base import ActionResponse
from app.schemas.organisation import (
    CurrentOrganisationResponse,
    InviteRequest,
    OrganisationCreate,
    OrganisationResponse,
    OrganisationSwitchRequest,
    OrganisationWithRole,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/organisations", tags=["organisations"])

DEFAULT_RETURN_URL = "/dashboard"


def safe_return_url(return_url: Optional[str]) -> str:
    """Only same-site relative paths are followed after a switch."""
    if not return_url or not return_url.startswith("/") or return_url.startswith("//") or "\\" in return_url:
        return DEFAULT_RETURN_URL
    return return_url


@router.get("", response_model=List[OrganisationWithRole])
async def list_my_organisations(
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(get_current_user),
):
    """Organisations the caller belongs to, with their role in each."""
    result = await db.execute(
        select(Organisation, UserOrganisation.role)
        .join(UserOrganisation, UserOrganisation.organisation_id == Organisation.id)
        .where(UserOrganisation.user_id == current_user.db_user_id)
        .order_by(UserOrganisation.created_at, UserOrganisation.organisation_id)
    )
    return [
        OrganisationWithRole(id=org.id, name=org.name, role=role)
        for org, role in result.all()
    ]


@router.post("", response_model=OrganisationResponse, status_code=status.HTTP_201_CREATED)
async def create_organisation(
    data: OrganisationCreate,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(get_current_user),
):
    """Create a new organisation. Creator becomes its admin."""
    org = Organisation(name=data.name)
    db.add(org)
    await db.flush()

    db.add(
        UserOrganisation(
            user_id=current_user.db_user_id,
            organisation_id=org.id,
            role=UserRole.ADMIN,
        )
    )
    await db.commit()
    await db.refresh(org)

    logger.info("User %s created organisation %s", current_user.db_user_id, org.id)
    return org


@router.post("/switch", response_model=ActionResponse)
async def switch_organisation(
    data: OrganisationSwitchRequest,
    response: Response,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(get_current_user),
):
    """Make another organisation the current one."""
    if data.organisation_id is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Organisation ID is required",
        )

    membership = await get_membership(db, current_user.db_user_id, data.organisation_id)
    if not membership:
        logger.warning(
            "User %s denied switch to organisation %s",
            current_user.db_user_id,
            data.organisation_id,
        )
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Access denied")

    set_organisation_cookie(response, data.organisation_id)
    logger.info("User %s switched to organisation %s", current_user.db_user_id, data.organisation_id)
    return ActionResponse()


@router.get("/switch", response_model=CurrentOrganisationResponse)
async def switch_organisation_link(
    request: Request,
    organisation_id: Optional[str] = Query(None),
    return_url: Optional[str] = Query(None),
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(get_current_user),
):
    """Switch by link and redirect, or report the current organisation.

    Unknown or malformed ids fall through to the report.
    """
    target = parse_uuid(organisation_id)
    if target is not None:
        membership = await get_membership(db, current_user.db_user_id, target)
        if membership:
            redirect = RedirectResponse(
                safe_return_url(return_url), status_code=status.HTTP_303_SEE_OTHER
            )
            set_organisation_cookie(redirect, target)
            logger.info("User %s switched to organisation %s", current_user.db_user_id, target)
            return redirect

    return CurrentOrganisationResponse(organisation_id=request.cookies.get(ORGANISATION_COOKIE))


@router.post("/invite", response_model=ActionResponse)
async def invite_member(
    data: InviteRequest,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_org_admin),
):
    """Invite someone to the current organisation (admin only).

    Email delivery is handled outside this service.
    """
    email = data.email.lower()
    result = await db.execute(
        select(func.count())
        .select_from(UserOrganisation)
        .join(User, User.id == UserOrganisation.user_id)
        .where(
            UserOrganisation.organisation_id == current_user.org_id,
            func.lower(User.email) == email,
        )
    )
    if result.scalar():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="User is already a member of this organisation",
        )

    logger.info(
        "Invitation to organisation %s sent to %s as %s",
        current_user.org_id,
        email,
        data.role.value,
    )
    return ActionResponse(data={"message": f"Invitation sent to {data.email}"})
