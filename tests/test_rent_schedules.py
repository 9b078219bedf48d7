"""Rent schedule endpoints."""

from decimal import Decimal

import pytest
from conftest import API


async def test_owner_creates_schedule(headers, users, leased, create_schedule):
    data = await create_schedule(
        headers.landlord, leased["id"], users.tenant, late_fee=50, notes="January"
    )
    assert data["status"] == "pending"
    assert data["due_date"] == "2025-01-01"
    assert data["payment_method"] == "online"
    assert data["frequency"] == "monthly"
    assert data["recurring"] is True
    assert Decimal(data["late_fee"]) == Decimal("50")
    assert data["property"]["id"] == leased["id"]
    assert data["tenant"]["id"] == users.tenant


async def test_schedule_creation_rules(client, headers, users, leased):
    def payload(**overrides):
        return {
            "property_id": leased["id"],
            "tenant_id": users.tenant,
            "amount": 1200,
            "due_date": "2025-01-01",
            **overrides,
        }

    url = f"{API}/rent-schedules"
    assert (await client.post(url, json=payload(), headers=headers.tenant)).status_code == 403
    assert (
        await client.post(url, json=payload(), headers=headers.other_landlord)
    ).status_code == 403
    assert (
        await client.post(url, json=payload(property_id=9999), headers=headers.landlord)
    ).status_code == 404
    assert (
        await client.post(
            url, json=payload(tenant_id=users.landlord), headers=headers.landlord
        )
    ).status_code == 404

    response = await client.post(url, json=payload(amount=-1), headers=headers.landlord)
    assert response.status_code == 422
    assert response.json()["error"]["kind"] == "validation_failed"

    response = await client.get(url, headers=headers.admin)
    assert response.json()["data"]["total"] == 0


async def test_bulk_generation(client, headers, users, leased):
    response = await client.post(
        f"{API}/rent-schedules/bulk",
        json={
            "property_id": leased["id"],
            "tenant_id": users.tenant,
            "amount": 1200,
            "start_date": "2025-01-31",
            "end_date": "2025-03-31",
            "frequency": "monthly",
        },
        headers=headers.landlord,
    )
    assert response.status_code == 201, response.text
    body = response.json()["data"]
    assert body["count"] == 3
    assert [s["due_date"] for s in body["schedules"]] == [
        "2025-01-31",
        "2025-02-28",
        "2025-03-31",
    ]
    assert {s["status"] for s in body["schedules"]} == {"pending"}


async def test_bulk_generation_edges(client, headers, users, leased):
    base = {
        "property_id": leased["id"],
        "tenant_id": users.tenant,
        "amount": 1200,
        "frequency": "monthly",
    }
    response = await client.post(
        f"{API}/rent-schedules/bulk",
        json={**base, "start_date": "2025-06-01", "end_date": "2025-01-01"},
        headers=headers.landlord,
    )
    assert response.status_code == 201
    assert response.json()["data"]["count"] == 0

    # the test settings cap a batch at 24 schedules
    response = await client.post(
        f"{API}/rent-schedules/bulk",
        json={**base, "start_date": "2025-01-01", "end_date": "2030-01-01"},
        headers=headers.landlord,
    )
    assert response.status_code == 422

    response = await client.get(f"{API}/rent-schedules", headers=headers.landlord)
    assert response.json()["data"]["total"] == 0


async def test_tenant_may_only_edit_notes_and_method(
    client, headers, users, leased, create_schedule
):
    schedule = await create_schedule(headers.landlord, leased["id"], users.tenant)
    url = f"{API}/rent-schedules/{schedule['id']}"

    response = await client.put(
        url, json={"notes": "Paying by check", "payment_method": "check"},
        headers=headers.tenant,
    )
    assert response.status_code == 200
    assert response.json()["data"]["payment_method"] == "check"

    response = await client.put(
        url, json={"amount": 1, "notes": "discount"}, headers=headers.tenant
    )
    assert response.status_code == 403

    response = await client.put(url, json={"status": "paid"}, headers=headers.tenant)
    assert response.status_code == 403

    response = await client.put(url, json={"notes": "x"}, headers=headers.other_tenant)
    assert response.status_code == 403

    response = await client.get(url, headers=headers.tenant)
    data = response.json()["data"]
    assert Decimal(data["amount"]) == Decimal("1200")
    assert data["status"] == "pending"
    assert data["notes"] == "Paying by check"


async def test_landlord_edits_schedule(client, headers, users, leased, create_schedule):
    schedule = await create_schedule(headers.landlord, leased["id"], users.tenant)
    url = f"{API}/rent-schedules/{schedule['id']}"

    response = await client.put(
        url, json={"amount": 1300, "status": "overdue"}, headers=headers.landlord
    )
    assert response.status_code == 200
    assert Decimal(response.json()["data"]["amount"]) == Decimal("1300")
    assert response.json()["data"]["status"] == "overdue"

    response = await client.put(url, json={"late_fee": -5}, headers=headers.landlord)
    assert response.status_code == 422

    response = await client.put(url, json={"amount": None}, headers=headers.landlord)
    assert response.status_code == 422


@pytest.mark.parametrize(
    "field", ["due_date", "status", "payment_method", "recurring", "frequency"]
)
async def test_required_schedule_fields_reject_null(
    client, headers, users, leased, create_schedule, field
):
    schedule = await create_schedule(headers.landlord, leased["id"], users.tenant)
    url = f"{API}/rent-schedules/{schedule['id']}"

    response = await client.put(url, json={field: None}, headers=headers.landlord)
    assert response.status_code == 422
    assert response.json()["error"]["kind"] == "validation_failed"

    response = await client.get(url, headers=headers.landlord)
    assert response.json()["data"][field] == schedule[field]


async def test_schedule_lists_are_scoped(
    client, headers, users, create_property, assign_tenant, create_schedule, leased
):
    await create_schedule(headers.landlord, leased["id"], users.tenant)
    other = await create_property(headers.other_landlord, name="Other")
    await assign_tenant(headers.other_landlord, users.other_tenant, other["id"])
    await create_schedule(headers.other_landlord, other["id"], users.other_tenant)

    async def tenant_ids(h, **params):
        response = await client.get(f"{API}/rent-schedules", headers=h, params=params)
        return [s["tenant_id"] for s in response.json()["data"]["items"]]

    assert sorted(await tenant_ids(headers.admin)) == sorted(
        [users.tenant, users.other_tenant]
    )
    assert await tenant_ids(headers.admin, tenant_id=users.other_tenant) == [
        users.other_tenant
    ]
    assert await tenant_ids(headers.landlord) == [users.tenant]
    assert await tenant_ids(headers.tenant) == [users.tenant]
    # a tenant filter from a non-admin does not widen or redirect the scope
    assert await tenant_ids(headers.tenant, tenant_id=users.other_tenant) == [
        users.tenant
    ]
    assert await tenant_ids(headers.other_landlord) == [users.other_tenant]

    response = await client.get(
        f"{API}/rent-schedules",
        headers=headers.admin,
        params={"due_date_from": "2025-02-01"},
    )
    assert response.json()["data"]["total"] == 0


async def test_schedule_read_scope(client, headers, users, leased, create_schedule):
    schedule = await create_schedule(headers.landlord, leased["id"], users.tenant)
    url = f"{API}/rent-schedules/{schedule['id']}"
    assert (await client.get(url, headers=headers.tenant)).status_code == 200
    assert (await client.get(url, headers=headers.other_tenant)).status_code == 403
    assert (await client.get(url, headers=headers.other_landlord)).status_code == 403
    assert (
        await client.get(f"{API}/rent-schedules/9999", headers=headers.admin)
    ).status_code == 404


async def test_delete_schedule(client, headers, users, leased, create_schedule, pay):
    paid = await create_schedule(headers.landlord, leased["id"], users.tenant)
    assert (await pay(headers.tenant, paid["id"], 1200)).status_code == 201
    response = await client.delete(
        f"{API}/rent-schedules/{paid['id']}", headers=headers.landlord
    )
    assert response.status_code == 409

    unpaid = await create_schedule(
        headers.landlord, leased["id"], users.tenant, due_date="2025-02-01"
    )
    response = await client.delete(
        f"{API}/rent-schedules/{unpaid['id']}", headers=headers.tenant
    )
    assert response.status_code == 403
    response = await client.delete(
        f"{API}/rent-schedules/{unpaid['id']}", headers=headers.landlord
    )
    assert response.status_code == 200
    response = await client.get(
        f"{API}/rent-schedules/{unpaid['id']}", headers=headers.landlord
    )
    assert response.status_code == 404
