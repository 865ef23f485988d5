"""Row builders and request helpers shared by the API tests."""

from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from httpx import AsyncClient

from app.core.security import ORGANISATION_COOKIE
from app.models.enums import UserRole
from app.models.organisation import Organisation, UserOrganisation
from app.models.property import Property, PropertyValuation
from app.models.tenant import Tenant
from app.models.user import User

TEST_USER_HEADER = "X-Test-User"


def act_as(client: AsyncClient, uid: str, organisation_id=None) -> None:
    """Authenticate subsequent requests as ``uid``, optionally in ``organisation_id``."""
    client.headers[TEST_USER_HEADER] = uid
    client.cookies.clear()
    if organisation_id is not None:
        client.cookies.set(ORGANISATION_COOKIE, str(organisation_id))


def set_cookies(response) -> dict[str, str]:
    """Cookies set by a response, parsed from its Set-Cookie headers."""
    cookies = {}
    for header in response.headers.get_list("set-cookie"):
        name, _, rest = header.partition("=")
        cookies[name] = rest.split(";", 1)[0].strip('"')
    return cookies


async def create_user(db, uid: str) -> User:
    user = User(firebase_uid=uid, email=f"{uid}@example.com")
    db.add(user)
    await db.flush()
    return user


async def create_org(db, name: str = "Thames Valley Housing") -> Organisation:
    org = Organisation(name=name)
    db.add(org)
    await db.flush()
    return org


async def add_member(
    db,
    user: User,
    org: Organisation,
    role: UserRole = UserRole.ADMIN,
    created_at: Optional[datetime] = None,
) -> UserOrganisation:
    membership = UserOrganisation(
        user_id=user.id,
        organisation_id=org.id,
        role=role,
        created_at=created_at or datetime.utcnow(),
    )
    db.add(membership)
    await db.flush()
    return membership


async def create_property(
    db,
    org: Organisation,
    address: str = "12 Riverside Walk, Reading",
    postcode: str = "RG1 8DB",
    value: float = 300_000.0,
) -> Property:
    prop = Property(organisation_id=org.id, address=address, postcode=postcode, property_value=value)
    db.add(prop)
    await db.flush()
    return prop


async def add_valuation(
    db,
    prop: Property,
    on: date,
    value: float,
    change: Optional[float] = None,
    hpi: Optional[float] = None,
) -> PropertyValuation:
    valuation = PropertyValuation(
        organisation_id=prop.organisation_id,
        property_id=prop.id,
        valuation_date=on,
        estimated_value=value,
        value_change_percent=change,
        hpi_index=hpi,
    )
    db.add(valuation)
    await db.flush()
    return valuation


async def create_tenant(
    db,
    prop: Property,
    first_name: str = "Amelia",
    last_name: str = "Hughes",
    equity: float = 25.0,
    move_in: date = date(2020, 3, 1),
    rent: float = 650.0,
    mortgage: float = 700.0,
    service_charge: float = 100.0,
) -> Tenant:
    tenant = Tenant(
        organisation_id=prop.organisation_id,
        property_id=prop.id,
        first_name=first_name,
        last_name=last_name,
        email=f"{first_name.lower()}.{last_name.lower()}@example.com",
        move_in_date=move_in,
        current_equity_percentage=equity,
        monthly_rent=rent,
        monthly_mortgage=mortgage,
        monthly_service_charge=service_charge,
    )
    db.add(tenant)
    await db.flush()
    return tenant
