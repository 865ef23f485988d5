"""Organisation membership, switching and the request-scoped organisation context."""

from datetime import datetime, timedelta

from app.models.enums import UserRole
from tests.factories import act_as, add_member, create_org, create_property, create_user, set_cookies

API = "/v1"


async def test_list_my_organisations_in_membership_order(client, db):
    user = await create_user(db, "multi")
    first = await create_org(db, "London Quadrant")
    second = await create_org(db, "Clarion")
    await create_org(db, "Somebody Else")
    now = datetime.utcnow()
    await add_member(db, user, first, UserRole.ADMIN, created_at=now - timedelta(days=2))
    await add_member(db, user, second, UserRole.VIEWER, created_at=now)
    await db.commit()

    act_as(client, "multi")
    response = await client.get(f"{API}/organisations")

    assert response.status_code == 200
    assert response.json() == [
        {"id": str(first.id), "name": "London Quadrant", "role": "admin"},
        {"id": str(second.id), "name": "Clarion", "role": "viewer"},
    ]


async def test_switch_requires_organisation_id(client, org):
    act_as(client, "admin")
    response = await client.post(f"{API}/organisations/switch", json={})

    assert response.status_code == 400
    assert response.json()["detail"] == "Organisation ID is required"


async def test_switch_denied_for_non_member(client, db, org):
    other = await create_org(db, "Not Yours")
    await db.commit()

    act_as(client, "admin")
    response = await client.post(f"{API}/organisations/switch", json={"organisation_id": str(other.id)})

    assert response.status_code == 403
    assert response.json()["detail"] == "Access denied"
    assert "current_organisation_id" not in set_cookies(response)


async def test_switch_sets_cookie(client, db, org):
    switcher = await create_user(db, "switcher")
    second = await create_org(db, "Second Org")
    await add_member(db, switcher, org, UserRole.VIEWER)
    await add_member(db, switcher, second, UserRole.ADMIN)
    await db.commit()

    act_as(client, "switcher", org.id)
    response = await client.post(f"{API}/organisations/switch", json={"organisation_id": str(second.id)})

    assert response.status_code == 200
    assert response.json() == {"success": True, "data": None}
    assert set_cookies(response)["current_organisation_id"] == str(second.id)
    header = [h for h in response.headers.get_list("set-cookie") if h.startswith("current_organisation_id=")][0]
    assert "HttpOnly" in header
    assert "Max-Age=2592000" in header
    assert "samesite=lax" in header.lower()


async def test_switch_link_redirects_for_member(client, org):
    act_as(client, "admin")
    response = await client.get(
        f"{API}/organisations/switch",
        params={"organisation_id": str(org.id), "return_url": "/properties"},
    )

    assert response.status_code == 303
    assert response.headers["location"] == "/properties"
    assert set_cookies(response)["current_organisation_id"] == str(org.id)


async def test_switch_link_ignores_external_return_url(client, org):
    act_as(client, "admin")
    response = await client.get(
        f"{API}/organisations/switch",
        params={"organisation_id": str(org.id), "return_url": "//evil.example.com/"},
    )

    assert response.status_code == 303
    assert response.headers["location"] == "/dashboard"


async def test_switch_link_without_id_reports_current(client, org):
    act_as(client, "admin", org.id)
    response = await client.get(f"{API}/organisations/switch")

    assert response.status_code == 200
    assert response.json() == {"organisation_id": str(org.id)}


async def test_switch_link_with_malformed_id_reports_current(client, org):
    act_as(client, "admin", org.id)
    response = await client.get(f"{API}/organisations/switch", params={"organisation_id": "not-a-uuid"})

    assert response.status_code == 200
    assert response.json() == {"organisation_id": str(org.id)}
    assert "current_organisation_id" not in set_cookies(response)


async def test_switch_link_for_foreign_org_does_not_redirect(client, db, org):
    other = await create_org(db, "Not Yours")
    await db.commit()

    act_as(client, "admin")
    response = await client.get(f"{API}/organisations/switch", params={"organisation_id": str(other.id)})

    assert response.status_code == 200
    assert response.json() == {"organisation_id": None}


async def test_missing_cookie_falls_back_to_first_membership(client, org):
    act_as(client, "viewer")
    response = await client.get(f"{API}/dashboard/stats")

    assert response.status_code == 200
    assert set_cookies(response)["current_organisation_id"] == str(org.id)


async def test_foreign_cookie_falls_back_and_hides_foreign_data(client, db, org):
    other = await create_org(db, "Not Yours")
    await create_property(db, other, address="1 Secret Lane, Slough")
    await create_property(db, org, address="2 Visible Road, Reading")
    await db.commit()

    act_as(client, "admin", other.id)
    response = await client.get(f"{API}/properties")

    assert response.status_code == 200
    assert [p["address"] for p in response.json()["properties"]] == ["2 Visible Road, Reading"]
    assert set_cookies(response)["current_organisation_id"] == str(org.id)


async def test_valid_cookie_is_not_reissued(client, org):
    act_as(client, "admin", org.id)
    response = await client.get(f"{API}/dashboard/stats")

    assert response.status_code == 200
    assert "current_organisation_id" not in set_cookies(response)


async def test_user_without_membership_is_forbidden(client, db):
    await create_user(db, "loner")
    await db.commit()

    act_as(client, "loner")
    response = await client.get(f"{API}/properties")

    assert response.status_code == 403
    assert response.json()["detail"] == "Organisation membership required"


async def test_create_organisation_makes_caller_admin(client, org):
    act_as(client, "viewer")
    response = await client.post(f"{API}/organisations", json={"name": "Viewer Homes"})

    assert response.status_code == 201
    created = response.json()
    assert created["name"] == "Viewer Homes"

    listing = await client.get(f"{API}/organisations")
    roles = {o["name"]: o["role"] for o in listing.json()}
    assert roles == {"Thames Valley Housing": "viewer", "Viewer Homes": "admin"}


async def test_invite_by_admin(client, org):
    act_as(client, "admin", org.id)
    response = await client.post(
        f"{API}/organisations/invite",
        json={"email": "new.officer@example.com", "role": "viewer"},
    )

    assert response.status_code == 200
    assert response.json() == {
        "success": True,
        "data": {"message": "Invitation sent to new.officer@example.com"},
    }


async def test_invite_rejects_existing_member(client, org):
    act_as(client, "admin", org.id)
    response = await client.post(f"{API}/organisations/invite", json={"email": "viewer@example.com"})

    assert response.status_code == 400


async def test_invite_requires_admin(client, org):
    act_as(client, "viewer", org.id)
    response = await client.post(f"{API}/organisations/invite", json={"email": "someone@example.com"})

    assert response.status_code == 403
    assert response.json()["detail"] == "Admin privileges required"


async def test_invite_validates_role_and_email(client, org):
    act_as(client, "admin", org.id)

    bad_email = await client.post(f"{API}/organisations/invite", json={"email": "not-an-email"})
    bad_role = await client.post(
        f"{API}/organisations/invite",
        json={"email": "someone@example.com", "role": "owner"},
    )

    assert bad_email.status_code == 422
    assert bad_role.status_code == 422
