"""Portfolio valuation report and recording valuations."""

from datetime import date

from tests.factories import act_as, add_valuation, create_org, create_property

API = "/v1"


async def test_valuation_report(client, db, org):
    reading = await create_property(db, org, address="1 Abbey Square, Reading", value=290_000)
    await add_valuation(db, reading, date(2024, 1, 1), 300_000, hpi=151.2)
    await add_valuation(db, reading, date(2024, 12, 1), 315_000, change=1.0, hpi=158.4)
    slough = await create_property(db, org, address="5 Bath Road, Slough", value=200_000)
    await add_valuation(db, slough, date(2024, 12, 1), 210_000, change=0.5)
    await db.commit()

    act_as(client, "viewer", org.id)
    response = await client.get(f"{API}/valuations")

    assert response.status_code == 200
    body = response.json()
    first, second = body["properties"]

    assert first["address"] == "1 Abbey Square, Reading"
    assert first["hpi_index"] == 158.4
    assert first["yearly_change"] == 5.0
    assert [v["valuation_date"] for v in first["valuation_history"]] == ["2024-12-01", "2024-01-01"]

    assert second["yearly_change"] == 0.0
    assert second["monthly_change"] == 0.5

    assert body["total_value"] == 525_000
    assert body["average_monthly_change"] == 0.75
    assert body["average_yearly_change"] == 2.5


async def test_create_valuation_derives_change(client, db, org):
    prop = await create_property(db, org)
    await add_valuation(db, prop, date(2024, 1, 1), 300_000)
    await db.commit()

    act_as(client, "admin", org.id)
    response = await client.post(
        f"{API}/valuations",
        json={
            "property_id": str(prop.id),
            "valuation_date": "2024-02-01",
            "estimated_value": 303000,
            "hpi_index": 152.0,
        },
    )

    assert response.status_code == 201
    created = response.json()
    assert created["property_id"] == str(prop.id)
    assert created["value_change_percent"] == 1.0
    assert created["hpi_index"] == 152.0


async def test_first_valuation_has_no_change(client, db, org):
    prop = await create_property(db, org)
    await db.commit()

    act_as(client, "admin", org.id)
    response = await client.post(
        f"{API}/valuations",
        json={"property_id": str(prop.id), "valuation_date": "2024-02-01", "estimated_value": 303000},
    )

    assert response.status_code == 201
    assert response.json()["value_change_percent"] is None


async def test_explicit_change_is_kept(client, db, org):
    prop = await create_property(db, org)
    await add_valuation(db, prop, date(2024, 1, 1), 300_000)
    await db.commit()

    act_as(client, "admin", org.id)
    response = await client.post(
        f"{API}/valuations",
        json={
            "property_id": str(prop.id),
            "valuation_date": "2024-02-01",
            "estimated_value": 303000,
            "value_change_percent": 0.9,
        },
    )

    assert response.json()["value_change_percent"] == 0.9


async def test_valuation_for_foreign_property(client, db, org):
    other = await create_org(db, "Not Yours")
    prop = await create_property(db, other)
    await db.commit()

    act_as(client, "admin", org.id)
    response = await client.post(
        f"{API}/valuations",
        json={"property_id": str(prop.id), "valuation_date": "2024-02-01", "estimated_value": 303000},
    )

    assert response.status_code == 404


async def test_valuation_requires_positive_value(client, db, org):
    prop = await create_property(db, org)
    await db.commit()

    act_as(client, "admin", org.id)
    response = await client.post(
        f"{API}/valuations",
        json={"property_id": str(prop.id), "valuation_date": "2024-02-01", "estimated_value": -1},
    )

    assert response.status_code == 422
