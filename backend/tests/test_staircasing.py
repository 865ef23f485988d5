"""Staircasing application workflow."""

from datetime import datetime

from sqlalchemy import select

from app.models.enums import StaircasingStatus
from app.models.staircasing import StaircasingApplication
from tests.factories import act_as, create_org, create_property, create_tenant

API = "/v1"


async def _application(db, tenant, status=StaircasingStatus.PENDING, requested=10.0, applied=None):
    application = StaircasingApplication(
        organisation_id=tenant.organisation_id,
        tenant_id=tenant.id,
        property_id=tenant.property_id,
        equity_percentage_requested=requested,
        estimated_cost=30_000,
        status=status,
        application_date=applied or datetime.utcnow(),
    )
    db.add(application)
    await db.flush()
    return application


async def test_create_application_estimates_cost(client, db, org):
    tenant = await create_tenant(db, await create_property(db, org, value=320_000), equity=25)
    await db.commit()

    act_as(client, "admin", org.id)
    response = await client.post(
        f"{API}/staircasing",
        json={"tenant_id": str(tenant.id), "equity_percentage_requested": 25},
    )

    assert response.status_code == 201
    body = response.json()
    assert body["status"] == "pending"
    assert body["estimated_cost"] == 80_000
    assert body["property_id"] == str(tenant.property_id)
    assert body["approved_date"] is None


async def test_create_application_keeps_given_cost(client, db, org):
    tenant = await create_tenant(db, await create_property(db, org))
    await db.commit()

    act_as(client, "admin", org.id)
    response = await client.post(
        f"{API}/staircasing",
        json={"tenant_id": str(tenant.id), "equity_percentage_requested": 10, "estimated_cost": 31_500},
    )

    assert response.json()["estimated_cost"] == 31_500


async def test_cannot_request_beyond_full_ownership(client, db, org):
    tenant = await create_tenant(db, await create_property(db, org), equity=75)
    await db.commit()

    act_as(client, "admin", org.id)
    response = await client.post(
        f"{API}/staircasing",
        json={"tenant_id": str(tenant.id), "equity_percentage_requested": 30},
    )

    assert response.status_code == 400
    assert "exceeds remaining equity" in response.json()["detail"]


async def test_application_for_foreign_tenant(client, db, org):
    tenant = await create_tenant(db, await create_property(db, await create_org(db, "Not Yours")))
    await db.commit()

    act_as(client, "admin", org.id)
    response = await client.post(
        f"{API}/staircasing",
        json={"tenant_id": str(tenant.id), "equity_percentage_requested": 10},
    )

    assert response.status_code == 404


async def test_approve_then_complete_transfers_equity(client, db, org):
    tenant = await create_tenant(db, await create_property(db, org), equity=25)
    application = await _application(db, tenant, requested=15)
    await db.commit()

    act_as(client, "admin", org.id)
    approved = await client.patch(
        f"{API}/staircasing/{application.id}/status",
        json={"status": "approved", "notes": "Valuation booked"},
    )
    assert approved.status_code == 200
    assert approved.json()["status"] == "approved"
    assert approved.json()["approved_date"] is not None
    assert approved.json()["notes"] == "Valuation booked"

    completed = await client.patch(
        f"{API}/staircasing/{application.id}/status",
        json={"status": "completed"},
    )
    assert completed.status_code == 200
    assert completed.json()["completed_date"] is not None
    assert completed.json()["notes"] == "Valuation booked"

    await db.refresh(tenant)
    assert tenant.current_equity_percentage == 40


async def test_invalid_transition_is_rejected(client, db, org):
    tenant = await create_tenant(db, await create_property(db, org))
    application = await _application(db, tenant)
    await db.commit()

    act_as(client, "admin", org.id)
    response = await client.patch(
        f"{API}/staircasing/{application.id}/status",
        json={"status": "completed"},
    )

    assert response.status_code == 400
    assert response.json()["detail"] == "Cannot change status from pending to completed"


async def test_viewer_cannot_change_status(client, db, org):
    tenant = await create_tenant(db, await create_property(db, org))
    application = await _application(db, tenant)
    await db.commit()

    act_as(client, "viewer", org.id)
    response = await client.patch(
        f"{API}/staircasing/{application.id}/status",
        json={"status": "approved"},
    )

    assert response.status_code == 403


async def test_list_applications_with_status_filter(client, db, org):
    prop = await create_property(db, org, address="7 Queens Walk, Reading")
    tenant = await create_tenant(db, prop)
    await _application(db, tenant, StaircasingStatus.REJECTED, applied=datetime(2023, 5, 1))
    await _application(db, tenant, StaircasingStatus.PENDING, applied=datetime(2024, 5, 1))
    await _application(db, tenant, StaircasingStatus.PENDING, applied=datetime(2024, 6, 1))
    await db.commit()

    act_as(client, "viewer", org.id)
    everything = await client.get(f"{API}/staircasing")
    pending = await client.get(f"{API}/staircasing", params={"status": "pending"})

    assert [a["status"] for a in everything.json()] == ["pending", "pending", "rejected"]
    first = everything.json()[0]
    assert first["tenant_first_name"] == "Amelia"
    assert first["tenant_email"] == "amelia.hughes@example.com"
    assert first["property_address"] == "7 Queens Walk, Reading"

    assert [a["application_date"][:10] for a in pending.json()] == ["2024-06-01", "2024-05-01"]


async def test_delete_pending_application(client, db, org):
    tenant = await create_tenant(db, await create_property(db, org))
    application = await _application(db, tenant)
    await db.commit()

    act_as(client, "admin", org.id)
    response = await client.delete(f"{API}/staircasing/{application.id}")

    assert response.status_code == 204
    assert (await db.execute(select(StaircasingApplication))).scalars().all() == []


async def test_cannot_delete_approved_application(client, db, org):
    tenant = await create_tenant(db, await create_property(db, org))
    application = await _application(db, tenant, StaircasingStatus.APPROVED)
    await db.commit()

    act_as(client, "admin", org.id)
    response = await client.delete(f"{API}/staircasing/{application.id}")

    assert response.status_code == 400
    assert response.json()["detail"] == "Cannot delete an application that is approved"
