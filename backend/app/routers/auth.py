"""Auth router - password sign-up/sign-in backed by Firebase sessions."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from fastapi.security import HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.identity import FirebaseIdentityClient, IdentityError, IdentitySession, get_identity_client
from app.core.security import (
    ORGANISATION_COOKIE,
    SESSION_COOKIE,
    AuthenticatedUser,
    clear_auth_cookies,
    get_current_user,
    get_or_link_user,
    resolve_membership,
    set_organisation_cookie,
    set_session_cookie,
)
from app.core.security import security as bearer_scheme
from app.models.enums import UserRole
from app.models.organisation import Organisation, UserOrganisation
from app.models.user import User
from app.schemas.auth import AuthResponse, CurrentUserResponse, SignInRequest, SignUpRequest
from app.schemas.base import ActionResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


def _identity_failure(e: IdentityError) -> HTTPException:
    return HTTPException(status_code=e.status_code, detail=e.message)


async def _local_user(db: AsyncSession, session: IdentitySession) -> User:
    """Find, re-link or create the local user row for a provider session."""
    user = await get_or_link_user(db, session.uid, session.email)
    await db.flush()
    return user


@router.post("/signup", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def signup(
    data: SignUpRequest,
    response: Response,
    db: AsyncSession = Depends(get_db),
    identity: FirebaseIdentityClient = Depends(get_identity_client),
):
    """Create an account, its first organisation and an admin membership."""
    try:
        session = await identity.sign_up(data.email, data.password)
        session_cookie = identity.create_session_cookie(session.id_token)
    except IdentityError as e:
        raise _identity_failure(e)

    user = await _local_user(db, session)

    org = Organisation(name=data.organisation_name)
    db.add(org)
    await db.flush()

    db.add(UserOrganisation(user_id=user.id, organisation_id=org.id, role=UserRole.ADMIN))
    await db.commit()

    logger.info("User %s signed up with organisation %s", user.id, org.id)

    set_session_cookie(response, session_cookie)
    set_organisation_cookie(response, org.id)
    return AuthResponse(user_id=user.id, email=user.email, organisation_id=org.id)


@router.post("/login", response_model=AuthResponse)
async def login(
    data: SignInRequest,
    response: Response,
    db: AsyncSession = Depends(get_db),
    identity: FirebaseIdentityClient = Depends(get_identity_client),
):
    """Exchange email/password for a session cookie."""
    try:
        session = await identity.sign_in(data.email, data.password)
        session_cookie = identity.create_session_cookie(session.id_token)
    except IdentityError as e:
        raise _identity_failure(e)

    user = await _local_user(db, session)
    await db.commit()

    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="User account is disabled",
        )

    membership = await resolve_membership(db, user.id, None)

    set_session_cookie(response, session_cookie)
    if membership:
        set_organisation_cookie(response, membership.organisation_id)
    return AuthResponse(
        user_id=user.id,
        email=user.email,
        organisation_id=membership.organisation_id if membership else None,
    )


@router.post("/logout", response_model=ActionResponse)
async def logout(
    request: Request,
    response: Response,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    identity: FirebaseIdentityClient = Depends(get_identity_client),
):
    """Drop auth cookies, revoking the provider session while it still verifies."""
    uid = None
    if credentials is not None:
        uid = identity.uid_for(credentials.credentials, session=False)
    elif request.cookies.get(SESSION_COOKIE):
        uid = identity.uid_for(request.cookies[SESSION_COOKIE])

    if uid:
        identity.revoke(uid)
    clear_auth_cookies(response)
    return ActionResponse()


@router.get("/me", response_model=CurrentUserResponse)
async def get_current_user_info(
    request: Request,
    current_user: AuthenticatedUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Get current authenticated user info."""
    membership = await resolve_membership(
        db, current_user.db_user_id, request.cookies.get(ORGANISATION_COOKIE)
    )
    return CurrentUserResponse(
        uid=current_user.uid,
        email=current_user.email,
        email_verified=current_user.email_verified,
        db_user_id=str(current_user.db_user_id) if current_user.db_user_id else None,
        org_id=str(membership.organisation_id) if membership else None,
        org_role=membership.role.value if membership else None,
    )
