"""User endpoints, authentication and the error envelope."""

from datetime import date, timedelta

from conftest import API, auth_headers

from rentroll_backend.modules.auth.crud import user_crud
from rentroll_backend.modules.auth.jwt_service import create_access_token
from rentroll_backend.modules.auth.models import LandlordUser, TenantUser


async def test_health_echoes_request_id(client):
    response = await client.get(f"{API}/health", headers={"x-request-id": "abc123"})
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
    assert response.headers["x-request-id"] == "abc123"


async def test_request_id_is_generated_when_missing(client):
    response = await client.get(f"{API}/health")
    assert response.headers["x-request-id"]


async def test_admin_creates_landlord(client, headers):
    response = await client.post(
        f"{API}/users",
        json={
            "email": "new.landlord@example.com",
            "first_name": "Nina",
            "role": "landlord",
            "company_name": "Nina Estates",
        },
        headers=headers.admin,
    )
    assert response.status_code == 201, response.text
    data = response.json()["data"]
    assert data["role"] == "landlord"
    assert data["company_name"] == "Nina Estates"
    assert data["is_active"] is True


async def test_admin_creates_tenant_with_tenant_fields(client, headers):
    response = await client.post(
        f"{API}/users",
        json={
            "email": "new.tenant@example.com",
            "first_name": "Theo",
            "role": "tenant",
            "emergency_contact_name": "Mia",
        },
        headers=headers.admin,
    )
    assert response.status_code == 201, response.text
    data = response.json()["data"]
    assert data["role"] == "tenant"
    assert data["emergency_contact_name"] == "Mia"


async def test_duplicate_email_conflicts(client, headers):
    response = await client.post(
        f"{API}/users",
        json={"email": "tom@example.com", "first_name": "Tom", "role": "tenant"},
        headers=headers.admin,
    )
    assert response.status_code == 409
    body = response.json()
    assert body["success"] is False
    assert body["error"]["kind"] == "conflict"


async def test_only_admin_creates_users(client, headers):
    response = await client.post(
        f"{API}/users",
        json={"email": "x@example.com", "first_name": "X", "role": "tenant"},
        headers=headers.landlord,
    )
    assert response.status_code == 403
    assert response.json()["error"]["kind"] == "forbidden"


async def test_unknown_role_fails_validation(client, headers):
    response = await client.post(
        f"{API}/users",
        json={"email": "x@example.com", "first_name": "X", "role": "janitor"},
        headers=headers.admin,
    )
    assert response.status_code == 422
    assert response.json()["error"]["kind"] == "validation_failed"


async def test_me_returns_role_specific_profile(client, headers):
    response = await client.get(f"{API}/users/me", headers=headers.landlord)
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["role"] == "landlord"
    assert data["company_name"] == "Lord Holdings"


async def test_me_returns_tenant_fields(client, session_factory, headers, users):
    async with session_factory() as session:
        tenant = await session.get(TenantUser, users.tenant)
        tenant.emergency_contact_name = "Mia"
        tenant.move_in_date = date(2025, 1, 1)
        await session.commit()

    response = await client.get(f"{API}/users/me", headers=headers.tenant)
    assert response.status_code == 200, response.text
    data = response.json()["data"]
    assert data["role"] == "tenant"
    assert data["emergency_contact_name"] == "Mia"
    assert data["move_in_date"] == "2025-01-01"
    assert "company_name" not in data


async def test_user_lookup_loads_role_columns(session_factory, users):
    async with session_factory() as session:
        user = await user_crud.get(session, users.landlord)
        await session.commit()

    # Role columns are loaded up front; the session is already closed here
    assert isinstance(user, LandlordUser)
    assert user.company_name == "Lord Holdings"


async def test_missing_token_is_unauthorized(client, users):
    response = await client.get(f"{API}/users/me")
    assert response.status_code == 401
    body = response.json()
    assert body["success"] is False
    assert body["data"] is None
    assert body["error"]["kind"] == "unauthorized"


async def test_garbage_token_is_unauthorized(client, users):
    response = await client.get(
        f"{API}/properties", headers={"Authorization": "Bearer not-a-jwt"}
    )
    assert response.status_code == 401


async def test_expired_token_is_unauthorized(client, users):
    token = create_access_token(
        users.tenant, "tenant", expires_delta=timedelta(minutes=-5)
    )
    response = await client.get(
        f"{API}/users/me", headers={"Authorization": f"Bearer {token}"}
    )
    assert response.status_code == 401


async def test_unknown_role_in_token_is_unauthorized(client, users):
    response = await client.get(
        f"{API}/users/me", headers=auth_headers(users.tenant, "superuser")
    )
    assert response.status_code == 401
