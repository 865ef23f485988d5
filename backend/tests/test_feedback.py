"""Resident feedback and NPS metrics."""

from datetime import datetime

from app.models.enums import Sentiment
from app.models.feedback import ResidentFeedback
from tests.factories import act_as, create_org, create_property, create_tenant

API = "/v1"


async def _feedback(db, tenant, nps=None, satisfaction=None, category=None, sentiment=None, submitted=None):
    feedback = ResidentFeedback(
        organisation_id=tenant.organisation_id,
        tenant_id=tenant.id,
        nps_score=nps,
        satisfaction_score=satisfaction,
        category=category,
        sentiment=sentiment,
        submitted_at=submitted or datetime.utcnow(),
    )
    db.add(feedback)
    await db.flush()
    return feedback


async def test_list_feedback_newest_first(client, db, org):
    tenant = await create_tenant(db, await create_property(db, org))
    await _feedback(db, tenant, nps=9, submitted=datetime(2024, 1, 10))
    await _feedback(db, tenant, nps=4, submitted=datetime(2024, 3, 10))
    await db.commit()

    act_as(client, "viewer", org.id)
    response = await client.get(f"{API}/feedback")

    assert response.status_code == 200
    body = response.json()
    assert [f["nps_score"] for f in body] == [4, 9]
    assert body[0]["tenant_first_name"] == "Amelia"
    assert body[0]["tenant_email"] == "amelia.hughes@example.com"


async def test_feedback_metrics(client, db, org):
    tenant = await create_tenant(db, await create_property(db, org))
    await _feedback(db, tenant, 10, 5, "customer_service", Sentiment.POSITIVE)
    await _feedback(db, tenant, 9, 4, "customer_service", Sentiment.POSITIVE)
    await _feedback(db, tenant, 7, 3, "communication", Sentiment.NEUTRAL)
    await _feedback(db, tenant, 2, 1, None, Sentiment.NEGATIVE)
    await db.commit()

    act_as(client, "viewer", org.id)
    response = await client.get(f"{API}/feedback/metrics")

    assert response.status_code == 200
    assert response.json() == {
        "total_responses": 4,
        "average_nps": 7.0,
        "average_satisfaction": 3.2,
        "promoters": 2,
        "passives": 1,
        "detractors": 1,
        "nps": 25.0,
        "sentiment": {"positive": 2, "neutral": 1, "negative": 1},
        "categories": {
            "customer_service": {"count": 2, "average_satisfaction": 4.5},
            "communication": {"count": 1, "average_satisfaction": 3.0},
            "other": {"count": 1, "average_satisfaction": 1.0},
        },
    }


async def test_metrics_without_feedback(client, org):
    act_as(client, "viewer", org.id)
    response = await client.get(f"{API}/feedback/metrics")

    body = response.json()
    assert body["total_responses"] == 0
    assert body["nps"] == 0.0
    assert body["categories"] == {}


async def test_create_feedback(client, db, org):
    tenant = await create_tenant(db, await create_property(db, org))
    await db.commit()

    act_as(client, "admin", org.id)
    response = await client.post(
        f"{API}/feedback",
        json={
            "tenant_id": str(tenant.id),
            "nps_score": 8,
            "satisfaction_score": 4,
            "category": "staircasing_process",
            "sentiment": "positive",
            "feedback_text": "Quick turnaround on the valuation.",
        },
    )

    assert response.status_code == 201
    body = response.json()
    assert body["category"] == "staircasing_process"
    assert body["sentiment"] == "positive"
    assert body["submitted_at"] is not None


async def test_create_feedback_validation(client, db, org):
    tenant = await create_tenant(db, await create_property(db, org))
    await db.commit()

    act_as(client, "admin", org.id)
    for override in ({"nps_score": 11}, {"satisfaction_score": 0}, {"category": "parking"}):
        response = await client.post(f"{API}/feedback", json={"tenant_id": str(tenant.id), **override})
        assert response.status_code == 422, override


async def test_feedback_for_foreign_tenant(client, db, org):
    tenant = await create_tenant(db, await create_property(db, await create_org(db, "Not Yours")))
    await db.commit()

    act_as(client, "admin", org.id)
    response = await client.post(f"{API}/feedback", json={"tenant_id": str(tenant.id), "nps_score": 9})

    assert response.status_code == 404
