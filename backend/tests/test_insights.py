"""Staircasing readiness insights."""

from datetime import date

from sqlalchemy import select

from app.models.insight import FinancialInsight
from tests.factories import act_as, create_org, create_property, create_tenant

API = "/v1"


async def test_recalculate_single_tenant(client, db, org):
    prop = await create_property(db, org, value=300_000)
    tenant = await create_tenant(db, prop, equity=55, move_in=date(2015, 4, 1), rent=650)
    await db.commit()

    act_as(client, "admin", org.id)
    response = await client.post(f"{API}/insights/tenants/{tenant.id}")

    assert response.status_code == 200
    body = response.json()
    assert body["readiness_score"] == 95
    assert body["recommended_action"] == "staircase_now"
    assert body["equity_growth_potential"] == 50_000
    assert body["estimated_monthly_savings"] == 650
    assert body["factors"]["equity_score"] == 30
    assert body["factors"]["current_equity"] == 55


async def test_recalculate_replaces_previous_insight(client, db, org):
    tenant = await create_tenant(db, await create_property(db, org))
    await db.commit()

    act_as(client, "admin", org.id)
    await client.post(f"{API}/insights/tenants/{tenant.id}")
    await client.post(f"{API}/insights/tenants/{tenant.id}")

    insights = (await db.execute(select(FinancialInsight))).scalars().all()
    assert len(insights) == 1


async def test_recalculate_all_and_list(client, db, org):
    prop = await create_property(db, org)
    await create_tenant(db, prop, first_name="Stretched", last_name="Baker", rent=1200, mortgage=800)
    await create_tenant(db, prop, first_name="Ready", last_name="Clarke", equity=55, move_in=date(2015, 4, 1))
    await create_tenant(db, prop, first_name="Steady", last_name="Adams")
    await create_tenant(db, await create_property(db, await create_org(db, "Not Yours")))
    await db.commit()

    act_as(client, "admin", org.id)
    recalculated = await client.post(f"{API}/insights/recalculate")

    assert recalculated.status_code == 200
    assert recalculated.json() == {"success": True, "calculated": 3}

    listing = await client.get(f"{API}/insights")
    rows = [(i["tenant_last_name"], i["readiness_score"], i["recommended_action"]) for i in listing.json()]
    assert rows == [
        ("Clarke", 95, "staircase_now"),
        ("Adams", 75, "staircase_now"),
        ("Baker", 60, "save_more"),
    ]


async def test_viewer_cannot_recalculate(client, org):
    act_as(client, "viewer", org.id)
    response = await client.post(f"{API}/insights/recalculate")

    assert response.status_code == 403


async def test_insight_for_foreign_tenant(client, db, org):
    tenant = await create_tenant(db, await create_property(db, await create_org(db, "Not Yours")))
    await db.commit()

    act_as(client, "admin", org.id)
    response = await client.post(f"{API}/insights/tenants/{tenant.id}")

    assert response.status_code == 404
