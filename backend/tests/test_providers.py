"""Service provider directory."""

from app.models.enums import ProviderType
from app.models.provider import ServiceProvider
from tests.factories import act_as, create_org

API = "/v1"


async def _provider(db, org, company, provider_type=ProviderType.BROKER, preferred=False, rating=None, referrals=0):
    provider = ServiceProvider(
        organisation_id=org.id,
        provider_type=provider_type,
        company_name=company,
        contact_name="Priya Shah",
        email="hello@example.com",
        phone="0118 496 0001",
        is_preferred=preferred,
        average_rating=rating,
        total_referrals=referrals,
    )
    db.add(provider)
    await db.flush()
    return provider


async def test_list_providers_sorted_grouped_and_summarised(client, db, org):
    await _provider(db, org, "Berkshire Surveys", ProviderType.SURVEYOR, rating=4.9, referrals=3)
    await _provider(db, org, "Castle Mortgages", preferred=True, rating=4.2, referrals=5)
    await _provider(db, org, "Abbey Brokers", preferred=True, rating=4.2)
    await _provider(db, org, "New Valuers", ProviderType.VALUER)
    await _provider(db, await create_org(db, "Not Yours"), "Hidden Ltd")
    await db.commit()

    act_as(client, "viewer", org.id)
    response = await client.get(f"{API}/providers")

    assert response.status_code == 200
    body = response.json()
    assert [p["company_name"] for p in body["providers"]] == [
        "Abbey Brokers",
        "Castle Mortgages",
        "Berkshire Surveys",
        "New Valuers",
    ]
    assert {k: [p["company_name"] for p in v] for k, v in body["by_type"].items()} == {
        "broker": ["Abbey Brokers", "Castle Mortgages"],
        "surveyor": ["Berkshire Surveys"],
        "valuer": ["New Valuers"],
    }
    assert body["summary"] == {
        "total": 4,
        "preferred": 2,
        "average_rating": 3.3,
        "total_referrals": 8,
    }


async def test_create_provider(client, org):
    act_as(client, "admin", org.id)
    response = await client.post(
        f"{API}/providers",
        json={
            "provider_type": "conveyancer",
            "company_name": "Kennet Conveyancing",
            "contact_name": "Tom Reed",
            "email": "tom@kennet.example.com",
            "phone": "0118 496 0002",
            "specializations": ["shared ownership", "leasehold"],
        },
    )

    assert response.status_code == 201
    body = response.json()
    assert body["specializations"] == ["shared ownership", "leasehold"]
    assert body["total_referrals"] == 0
    assert body["is_preferred"] is False


async def test_create_provider_validation(client, org):
    act_as(client, "admin", org.id)
    base = {
        "provider_type": "broker",
        "company_name": "Kennet Mortgages",
        "contact_name": "Tom Reed",
        "email": "tom@kennet.example.com",
        "phone": "0118 496 0002",
    }

    assert (await client.post(f"{API}/providers", json={**base, "provider_type": "plumber"})).status_code == 422
    assert (await client.post(f"{API}/providers", json={**base, "average_rating": 6})).status_code == 422
    assert (await client.post(f"{API}/providers", json={**base, "email": "tom"})).status_code == 422


async def test_update_and_delete_provider(client, db, org):
    provider = await _provider(db, org, "Castle Mortgages")
    await db.commit()

    act_as(client, "admin", org.id)
    updated = await client.patch(f"{API}/providers/{provider.id}", json={"is_preferred": True, "average_rating": 4.5})
    assert updated.status_code == 200
    assert updated.json()["is_preferred"] is True
    assert updated.json()["average_rating"] == 4.5

    deleted = await client.delete(f"{API}/providers/{provider.id}")
    assert deleted.status_code == 204
    assert (await client.get(f"{API}/providers")).json()["providers"] == []


async def test_update_provider_rejects_null_fields(client, db, org):
    provider = await _provider(db, org, "Castle Mortgages")
    await db.commit()

    act_as(client, "admin", org.id)
    for payload in ({"company_name": None}, {"provider_type": None}, {"is_preferred": None}):
        response = await client.patch(f"{API}/providers/{provider.id}", json=payload)
        assert response.status_code == 422, payload

    cleared = await client.patch(f"{API}/providers/{provider.id}", json={"average_rating": None})
    assert cleared.status_code == 200
    assert cleared.json()["average_rating"] is None


async def test_record_referral(client, db, org):
    provider = await _provider(db, org, "Castle Mortgages", referrals=2)
    await db.commit()

    act_as(client, "admin", org.id)
    response = await client.post(f"{API}/providers/{provider.id}/referrals")

    assert response.status_code == 200
    assert response.json()["total_referrals"] == 3


async def test_provider_of_other_organisation_is_not_found(client, db, org):
    provider = await _provider(db, await create_org(db, "Not Yours"), "Hidden Ltd")
    await db.commit()

    act_as(client, "admin", org.id)
    assert (await client.patch(f"{API}/providers/{provider.id}", json={"phone": "1"})).status_code == 404
    assert (await client.post(f"{API}/providers/{provider.id}/referrals")).status_code == 404
