"""Property endpoints: ownership, scoping, status rules and maintenance."""

from decimal import Decimal

from conftest import API


async def test_landlord_creates_own_property(client, headers, users, create_property):
    data = await create_property(headers.landlord)
    assert data["landlord_id"] == users.landlord
    assert data["status"] == "available"
    assert data["current_tenant_id"] is None
    assert data["landlord"]["email"] == "lena@example.com"
    assert data["amenities"] == ["parking", "laundry"]
    assert Decimal(data["monthly_rent"]) == Decimal("1200")


async def test_admin_must_name_landlord(client, headers):
    response = await client.post(
        f"{API}/properties",
        json={"name": "No Owner", "street": "1 A St", "city": "X", "state": "Y",
              "zip_code": "1", "property_type": "house", "monthly_rent": 900},
        headers=headers.admin,
    )
    assert response.status_code == 422
    assert response.json()["error"]["kind"] == "validation_failed"


async def test_admin_creates_for_landlord(headers, users, create_property):
    data = await create_property(headers.admin, landlord_id=users.other_landlord)
    assert data["landlord_id"] == users.other_landlord


async def test_landlord_id_must_be_a_landlord(client, headers, users):
    response = await client.post(
        f"{API}/properties",
        json={"name": "Odd", "street": "1 A St", "city": "X", "state": "Y",
              "zip_code": "1", "property_type": "house", "monthly_rent": 900,
              "landlord_id": users.tenant},
        headers=headers.admin,
    )
    assert response.status_code == 404


async def test_landlord_cannot_create_for_another(client, headers, users):
    response = await client.post(
        f"{API}/properties",
        json={"name": "Odd", "street": "1 A St", "city": "X", "state": "Y",
              "zip_code": "1", "property_type": "house", "monthly_rent": 900,
              "landlord_id": users.other_landlord},
        headers=headers.landlord,
    )
    assert response.status_code == 403


async def test_tenant_cannot_create_property(client, headers):
    response = await client.post(
        f"{API}/properties",
        json={"name": "Mine", "street": "1 A St", "city": "X", "state": "Y",
              "zip_code": "1", "property_type": "house", "monthly_rent": 900},
        headers=headers.tenant,
    )
    assert response.status_code == 403


async def test_new_property_cannot_start_occupied(client, headers):
    response = await client.post(
        f"{API}/properties",
        json={"name": "Busy", "street": "1 A St", "city": "X", "state": "Y",
              "zip_code": "1", "property_type": "house", "monthly_rent": 900,
              "status": "occupied"},
        headers=headers.landlord,
    )
    assert response.status_code == 409
    assert response.json()["error"]["kind"] == "invalid_state"


async def test_lists_are_scoped_by_role(
    client, headers, users, create_property, assign_tenant
):
    own = await create_property(headers.landlord, name="Own")
    await create_property(headers.landlord, name="Own Vacant")
    await create_property(headers.other_landlord, name="Foreign")
    await assign_tenant(headers.landlord, users.tenant, own["id"])

    async def names(h):
        response = await client.get(f"{API}/properties", headers=h)
        assert response.status_code == 200
        body = response.json()["data"]
        return {p["name"] for p in body["items"]}, body["total"]

    assert await names(headers.admin) == ({"Own", "Own Vacant", "Foreign"}, 3)
    assert await names(headers.landlord) == ({"Own", "Own Vacant"}, 2)
    assert await names(headers.other_landlord) == ({"Foreign"}, 1)
    assert await names(headers.tenant) == ({"Own"}, 1)
    assert await names(headers.other_tenant) == (set(), 0)


async def test_list_filters(client, headers, create_property):
    await create_property(headers.landlord, name="Cheap", monthly_rent=800, city="Austin")
    await create_property(headers.landlord, name="Mid", monthly_rent=1500, city="Boston")
    await create_property(
        headers.landlord, name="Dear", monthly_rent=3000, property_type="house"
    )

    response = await client.get(
        f"{API}/properties",
        params={"min_rent": 1000, "max_rent": 2000},
        headers=headers.landlord,
    )
    assert [p["name"] for p in response.json()["data"]["items"]] == ["Mid"]

    response = await client.get(
        f"{API}/properties", params={"city": "aust"}, headers=headers.landlord
    )
    assert [p["name"] for p in response.json()["data"]["items"]] == ["Cheap"]

    response = await client.get(
        f"{API}/properties", params={"property_type": "house"}, headers=headers.landlord
    )
    assert [p["name"] for p in response.json()["data"]["items"]] == ["Dear"]

    response = await client.get(
        f"{API}/properties", params={"search": "Che"}, headers=headers.landlord
    )
    assert response.json()["data"]["total"] == 1


async def test_foreign_read_is_forbidden(client, headers, create_property):
    prop = await create_property(headers.landlord)
    response = await client.get(
        f"{API}/properties/{prop['id']}", headers=headers.other_landlord
    )
    assert response.status_code == 403
    response = await client.get(f"{API}/properties/{prop['id']}", headers=headers.tenant)
    assert response.status_code == 403


async def test_missing_property_is_not_found(client, headers, users):
    response = await client.get(f"{API}/properties/9999", headers=headers.admin)
    assert response.status_code == 404
    assert response.json()["error"]["kind"] == "not_found"


async def test_foreign_update_is_forbidden_and_changes_nothing(
    client, headers, create_property
):
    prop = await create_property(headers.landlord)
    response = await client.put(
        f"{API}/properties/{prop['id']}",
        json={"name": "Hijacked", "monthly_rent": 1},
        headers=headers.other_landlord,
    )
    assert response.status_code == 403

    response = await client.get(f"{API}/properties/{prop['id']}", headers=headers.landlord)
    data = response.json()["data"]
    assert data["name"] == prop["name"]
    assert Decimal(data["monthly_rent"]) == Decimal("1200")


async def test_owner_updates_fields(client, headers, create_property):
    prop = await create_property(headers.landlord)
    response = await client.put(
        f"{API}/properties/{prop['id']}",
        json={"name": "Maple Court 1B", "amenities": ["pool"]},
        headers=headers.landlord,
    )
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["name"] == "Maple Court 1B"
    assert data["amenities"] == ["pool"]
    assert data["street"] == prop["street"]


async def test_null_for_required_field_is_rejected(client, headers, create_property):
    prop = await create_property(headers.landlord)
    response = await client.put(
        f"{API}/properties/{prop['id']}", json={"name": None}, headers=headers.landlord
    )
    assert response.status_code == 422


async def test_status_edits_between_vacant_states(client, headers, create_property):
    prop = await create_property(headers.landlord)
    response = await client.put(
        f"{API}/properties/{prop['id']}",
        json={"status": "maintenance"},
        headers=headers.landlord,
    )
    assert response.status_code == 200
    assert response.json()["data"]["status"] == "maintenance"

    response = await client.put(
        f"{API}/properties/{prop['id']}",
        json={"status": "occupied"},
        headers=headers.landlord,
    )
    assert response.status_code == 409
    assert response.json()["error"]["kind"] == "invalid_state"


async def test_status_edit_on_occupied_property_is_rejected(client, headers, leased):
    response = await client.put(
        f"{API}/properties/{leased['id']}",
        json={"status": "available", "name": "Renamed"},
        headers=headers.landlord,
    )
    assert response.status_code == 409

    response = await client.get(f"{API}/properties/{leased['id']}", headers=headers.landlord)
    data = response.json()["data"]
    assert data["status"] == "occupied"
    assert data["name"] == leased["name"]


async def test_delete_rules(client, headers, users, create_property, create_schedule, leased):
    response = await client.delete(
        f"{API}/properties/{leased['id']}", headers=headers.landlord
    )
    assert response.status_code == 409

    scheduled = await create_property(headers.landlord, name="Scheduled")
    await create_schedule(headers.landlord, scheduled["id"], users.tenant)
    response = await client.delete(
        f"{API}/properties/{scheduled['id']}", headers=headers.landlord
    )
    assert response.status_code == 409

    vacant = await create_property(headers.landlord, name="Vacant")
    response = await client.delete(
        f"{API}/properties/{vacant['id']}", headers=headers.other_landlord
    )
    assert response.status_code == 403
    response = await client.delete(
        f"{API}/properties/{vacant['id']}", headers=headers.landlord
    )
    assert response.status_code == 200
    response = await client.get(f"{API}/properties/{vacant['id']}", headers=headers.landlord)
    assert response.status_code == 404


async def test_maintenance_lifecycle(client, headers, users, leased):
    response = await client.post(
        f"{API}/properties/{leased['id']}/maintenance",
        json={"issue": "Leaking tap", "description": "Kitchen sink"},
        headers=headers.tenant,
    )
    assert response.status_code == 201, response.text
    record = response.json()["data"]
    assert record["status"] == "pending"
    assert record["reported_by_id"] == users.tenant

    url = f"{API}/properties/{leased['id']}/maintenance/{record['id']}"
    response = await client.patch(url, json={"status": "completed"}, headers=headers.tenant)
    assert response.status_code == 403

    response = await client.patch(
        url, json={"status": "in-progress"}, headers=headers.landlord
    )
    assert response.json()["data"]["status"] == "in-progress"
    assert response.json()["data"]["completed_at"] is None

    response = await client.patch(
        url, json={"status": "completed", "cost": 85.5}, headers=headers.landlord
    )
    data = response.json()["data"]
    assert data["status"] == "completed"
    assert data["completed_at"] is not None
    assert Decimal(data["cost"]) == Decimal("85.5")

    response = await client.patch(url, json={"status": "pending"}, headers=headers.landlord)
    assert response.status_code == 409

    response = await client.get(f"{API}/properties/{leased['id']}", headers=headers.tenant)
    records = response.json()["data"]["maintenance_records"]
    assert [r["issue"] for r in records] == ["Leaking tap"]


async def test_non_occupant_cannot_report_maintenance(client, headers, leased):
    response = await client.post(
        f"{API}/properties/{leased['id']}/maintenance",
        json={"issue": "Noise"},
        headers=headers.other_tenant,
    )
    assert response.status_code == 403


async def test_unknown_maintenance_record(client, headers, leased):
    response = await client.patch(
        f"{API}/properties/{leased['id']}/maintenance/999",
        json={"status": "completed"},
        headers=headers.landlord,
    )
    assert response.status_code == 404
