from __future__ import annotations

import os

# Settings are read once at import time
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("FIREBASE_PROJECT_ID", "stairproperty-test")
os.environ.setdefault("FIREBASE_WEB_API_KEY", "test-api-key")
os.environ.setdefault("DEBUG", "true")

import pytest
import pytest_asyncio
from fastapi import HTTPException, Request
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.core.database import Base, get_db
from app.core.identity import IdentityError, IdentitySession, get_identity_client
from app.core.security import AuthenticatedUser, verify_firebase_token
from app.models.enums import UserRole
import app.models  # noqa: F401

from tests.factories import TEST_USER_HEADER, add_member, create_org, create_user


# ---------------------------------------------------------
# Database
# ---------------------------------------------------------
@pytest_asyncio.fixture()
async def engine():
    """Fresh schema per test; in-memory SQLite unless TEST_DATABASE_URL is set."""
    url = os.getenv("TEST_DATABASE_URL", "sqlite+aiosqlite://")
    kwargs = {}
    if url.startswith("sqlite"):
        kwargs = {"poolclass": StaticPool, "connect_args": {"check_same_thread": False}}
    engine = create_async_engine(url, echo=False, **kwargs)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture()
def sessionmaker(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture()
async def db(sessionmaker):
    """Session for test setup & assertions ONLY."""
    async with sessionmaker() as session:
        yield session


# ---------------------------------------------------------
# Identity fakes
# ---------------------------------------------------------
class FakeIdentityClient:
    """In-memory stand-in for the Firebase password API."""

    def __init__(self):
        self.accounts: dict[str, tuple[str, str]] = {}
        self.revoked: list[str] = []

    async def sign_up(self, email: str, password: str) -> IdentitySession:
        if email in self.accounts:
            raise IdentityError("User already registered", status_code=400)
        uid = f"uid-{len(self.accounts) + 1}"
        self.accounts[email] = (uid, password)
        return IdentitySession(uid=uid, email=email, id_token=f"token-{uid}")

    async def sign_in(self, email: str, password: str) -> IdentitySession:
        account = self.accounts.get(email)
        if not account or account[1] != password:
            raise IdentityError("Invalid login credentials", status_code=401)
        return IdentitySession(uid=account[0], email=email, id_token=f"token-{account[0]}")

    def create_session_cookie(self, id_token: str) -> str:
        return f"session-{id_token}"

    def uid_for(self, token: str, session: bool = True) -> str | None:
        prefix = "session-token-" if session else "token-"
        return token[len(prefix):] if token.startswith(prefix) else None

    def revoke(self, uid: str) -> None:
        self.revoked.append(uid)


async def fake_verify_firebase_token(request: Request) -> AuthenticatedUser:
    uid = request.headers.get(TEST_USER_HEADER)
    if not uid:
        raise HTTPException(status_code=401, detail="Not authenticated")
    return AuthenticatedUser(uid=uid, email=f"{uid}@example.com", email_verified=True)


@pytest.fixture()
def identity():
    return FakeIdentityClient()


# ---------------------------------------------------------
# FastAPI app + dependency override
# ---------------------------------------------------------
@pytest.fixture()
def app(sessionmaker, identity):
    from app.main import app as fastapi_app

    async def _override_get_db():
        async with sessionmaker() as session:
            yield session

    fastapi_app.dependency_overrides[get_db] = _override_get_db
    fastapi_app.dependency_overrides[verify_firebase_token] = fake_verify_firebase_token
    fastapi_app.dependency_overrides[get_identity_client] = lambda: identity
    yield fastapi_app
    fastapi_app.dependency_overrides.clear()


@pytest_asyncio.fixture()
async def client(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


# ---------------------------------------------------------
# Common data
# ---------------------------------------------------------
@pytest_asyncio.fixture()
async def org(db):
    """An organisation with an ``admin`` and a ``viewer`` member."""
    org = await create_org(db)
    admin = await create_user(db, "admin")
    viewer = await create_user(db, "viewer")
    await add_member(db, admin, org, UserRole.ADMIN)
    await add_member(db, viewer, org, UserRole.VIEWER)
    await db.commit()
    return org
