"""Firebase session verification and organisation context dependencies."""

import logging
from typing import Any, Optional
from uuid import UUID

from fastapi import Depends, HTTPException, Request, Response, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from firebase_admin import auth
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import get_settings
from app.core.database import get_db
from app.core.identity import get_firebase_app
from app.models.enums import UserRole
from app.models.organisation import UserOrganisation
from app.models.user import User

logger = logging.getLogger(__name__)

settings = get_settings()

SESSION_COOKIE = "session"
ORGANISATION_COOKIE = "current_organisation_id"

security = HTTPBearer(auto_error=False)


class AuthenticatedUser:
    """Represents an authenticated user from a Firebase session or ID token."""

    def __init__(
        self,
        uid: str,
        email: Optional[str] = None,
        email_verified: bool = False,
        claims: Optional[dict[str, Any]] = None,
    ):
        self.uid = uid
        self.email = email
        self.email_verified = email_verified
        self.claims = claims or {}
        self.db_user_id: Optional[UUID] = None
        self.org_id: Optional[UUID] = None
        self.org_role: Optional[str] = None


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def verify_firebase_token(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> AuthenticatedUser:
    """Verify the caller's identity.

    Accepts either a Bearer ID token or the ``session`` cookie minted at login.
    This service NEVER mints ID tokens itself.
    """
    session_cookie = request.cookies.get(SESSION_COOKIE)
    if credentials is None and not session_cookie:
        raise _unauthorized("Not authenticated")

    get_firebase_app()
    try:
        if credentials is not None:
            decoded = auth.verify_id_token(credentials.credentials)
        else:
            decoded = auth.verify_session_cookie(session_cookie, check_revoked=True)
    except (auth.ExpiredIdTokenError, auth.ExpiredSessionCookieError):
        raise _unauthorized("Session has expired")
    except (auth.RevokedIdTokenError, auth.RevokedSessionCookieError):
        raise _unauthorized("Session has been revoked")
    except (auth.InvalidIdTokenError, auth.InvalidSessionCookieError, ValueError):
        raise _unauthorized("Invalid authentication token")
    except auth.UserDisabledError:
        raise _unauthorized("User account is disabled")

    return AuthenticatedUser(
        uid=decoded["uid"],
        email=decoded.get("email"),
        email_verified=decoded.get("email_verified", False),
        claims=decoded,
    )


async def get_or_link_user(
    db: AsyncSession,
    uid: str,
    email: str,
    full_name: Optional[str] = None,
) -> User:
    """Local user row for a provider uid.

    Falls back to a case-insensitive email match and re-links ``firebase_uid``
    when the provider account was recreated under a new uid. Changes are left
    pending for the caller to flush or commit.
    """
    result = await db.execute(select(User).where(User.firebase_uid == uid))
    user = result.scalar_one_or_none()
    if user:
        return user

    email = email.lower()
    result = await db.execute(select(User).where(func.lower(User.email) == email))
    user = result.scalar_one_or_none()
    if user:
        logger.info("Re-linking user %s from uid %s to %s", user.id, user.firebase_uid, uid)
        user.firebase_uid = uid
    else:
        user = User(firebase_uid=uid, email=email, full_name=full_name)
        db.add(user)
        logger.info("Provisioning local user for uid %s", uid)
    return user


async def get_current_user(
    auth_user: AuthenticatedUser = Depends(verify_firebase_token),
    db: AsyncSession = Depends(get_db),
) -> AuthenticatedUser:
    """Get current user with database context (db_user_id).

    A local user row is provisioned, or re-linked by email, on first sight of
    a verified identity.
    """
    user = await get_or_link_user(
        db,
        auth_user.uid,
        auth_user.email or f"{auth_user.uid}@users.invalid",
        full_name=auth_user.claims.get("name"),
    )
    if db.new or db.dirty:
        await db.commit()
        await db.refresh(user)

    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="User account is disabled",
        )

    auth_user.db_user_id = user.id
    return auth_user


def set_organisation_cookie(response: Response, organisation_id: UUID) -> None:
    """Persist the current organisation choice on the client."""
    response.set_cookie(
        ORGANISATION_COOKIE,
        str(organisation_id),
        max_age=settings.organisation_cookie_max_age,
        path="/",
        httponly=True,
        secure=settings.cookie_secure,
        samesite="lax",
    )


def set_session_cookie(response: Response, session_cookie: str) -> None:
    """Attach a freshly minted Firebase session cookie."""
    response.set_cookie(
        SESSION_COOKIE,
        session_cookie,
        max_age=settings.session_cookie_days * 24 * 60 * 60,
        path="/",
        httponly=True,
        secure=settings.cookie_secure,
        samesite="lax",
    )


def clear_auth_cookies(response: Response) -> None:
    response.delete_cookie(SESSION_COOKIE, path="/")
    response.delete_cookie(ORGANISATION_COOKIE, path="/")


def parse_uuid(value: Optional[str]) -> Optional[UUID]:
    if not value:
        return None
    try:
        return UUID(value)
    except ValueError:
        return None


async def get_membership(
    db: AsyncSession,
    user_id: UUID,
    organisation_id: Optional[UUID],
) -> Optional[UserOrganisation]:
    """Membership of a user in a specific organisation, if any."""
    if organisation_id is None:
        return None
    result = await db.execute(
        select(UserOrganisation).where(
            UserOrganisation.user_id == user_id,
            UserOrganisation.organisation_id == organisation_id,
        )
    )
    return result.scalar_one_or_none()


async def resolve_membership(
    db: AsyncSession,
    user_id: UUID,
    requested: Optional[str],
) -> Optional[UserOrganisation]:
    """Resolve the current organisation for a request.

    The requested organisation wins when the user belongs to it; otherwise the
    user's first membership is used. Returns None for users with no membership.
    """
    membership = await get_membership(db, user_id, parse_uuid(requested))
    if membership:
        return membership

    result = await db.execute(
        select(UserOrganisation)
        .where(UserOrganisation.user_id == user_id)
        .order_by(UserOrganisation.created_at, UserOrganisation.organisation_id)
        .limit(1)
    )
    return result.scalar_one_or_none()


async def require_org_member(
    request: Request,
    response: Response,
    current_user: AuthenticatedUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> AuthenticatedUser:
    """Require user to be a member of the current organisation.

    Sets ``org_id``/``org_role`` on the user and re-issues the organisation
    cookie whenever it was missing or pointed at a foreign organisation.
    """
    requested = request.cookies.get(ORGANISATION_COOKIE)
    membership = await resolve_membership(db, current_user.db_user_id, requested)

    if not membership:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Organisation membership required",
        )

    if requested != str(membership.organisation_id):
        if requested:
            logger.warning(
                "User %s has no access to organisation %s, falling back to %s",
                current_user.db_user_id,
                requested,
                membership.organisation_id,
            )
        set_organisation_cookie(response, membership.organisation_id)

    current_user.org_id = membership.organisation_id
    current_user.org_role = membership.role.value
    return current_user


def require_org_admin(
    current_user: AuthenticatedUser = Depends(require_org_member),
) -> AuthenticatedUser:
    """Require user to be an admin of the current organisation."""
    if current_user.org_role != UserRole.ADMIN.value:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin privileges required",
        )
    return current_user
