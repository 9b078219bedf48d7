"""
Test fixtures for the RentRoll backend.

Every test gets its own SQLite database file with the full schema and a
small cast of users (one admin, two landlords, two tenants). The app's
database dependency is overridden so requests never touch MySQL.
"""

import os
from pathlib import Path
from types import SimpleNamespace

os.environ.setdefault("CONFIG", str(Path(__file__).parent / "config.yaml"))

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy import event  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from rentroll_backend.database import Base, get_db  # noqa: E402
from rentroll_backend.main import app  # noqa: E402
from rentroll_backend.modules.auth.jwt_service import (  # noqa: E402
    create_access_token,
)
from rentroll_backend.modules.auth.models import (  # noqa: E402
    AdminUser,
    LandlordUser,
    TenantUser,
)

API = "/api"

PROPERTY_PAYLOAD = {
    "name": "Maple Court 1A",
    "street": "12 Maple Street",
    "city": "Springfield",
    "state": "IL",
    "zip_code": "62701",
    "property_type": "apartment",
    "bedrooms": 2,
    "bathrooms": 1.5,
    "monthly_rent": 1200,
    "security_deposit": 1200,
    "amenities": ["parking", "laundry"],
}


def auth_headers(user_id: int, role: str) -> dict[str, str]:
    token = create_access_token(user_id, role)
    return {"Authorization": f"Bearer {token}"}


# ── Database ───────────────────────────────────────────────────────────


@pytest.fixture
async def engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'rentroll.db'}")

    # Take the write lock when a transaction starts so concurrent sessions
    # queue behind each other instead of failing on lock upgrade.
    @event.listens_for(engine.sync_engine, "connect")
    def _disable_pysqlite_transactions(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, "begin")
    def _begin_immediate(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def users(session_factory):
    """Seed users; returns their IDs."""
    async with session_factory() as session:
        admin = AdminUser(email="admin@example.com", first_name="Ada")
        landlord = LandlordUser(
            email="lena@example.com",
            first_name="Lena",
            last_name="Lord",
            company_name="Lord Holdings",
        )
        other_landlord = LandlordUser(email="oscar@example.com", first_name="Oscar")
        tenant = TenantUser(
            email="tom@example.com", first_name="Tom", last_name="Tenant"
        )
        other_tenant = TenantUser(email="tara@example.com", first_name="Tara")
        session.add_all([admin, landlord, other_landlord, tenant, other_tenant])
        await session.commit()

        return SimpleNamespace(
            admin=admin.id,
            landlord=landlord.id,
            other_landlord=other_landlord.id,
            tenant=tenant.id,
            other_tenant=other_tenant.id,
        )


@pytest.fixture
def headers(users):
    return SimpleNamespace(
        admin=auth_headers(users.admin, "admin"),
        landlord=auth_headers(users.landlord, "landlord"),
        other_landlord=auth_headers(users.other_landlord, "landlord"),
        tenant=auth_headers(users.tenant, "tenant"),
        other_tenant=auth_headers(users.other_tenant, "tenant"),
    )


@pytest.fixture
async def client(session_factory):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test"
    ) as ac:
        yield ac
    app.dependency_overrides.clear()


# ── API helpers ────────────────────────────────────────────────────────


@pytest.fixture
def create_property(client):
    async def _create(owner_headers, **overrides):
        payload = {**PROPERTY_PAYLOAD, **overrides}
        response = await client.post(
            f"{API}/properties", json=payload, headers=owner_headers
        )
        assert response.status_code == 201, response.text
        return response.json()["data"]

    return _create


@pytest.fixture
def assign_tenant(client):
    async def _assign(manager_headers, tenant_id, property_id, **dates):
        response = await client.post(
            f"{API}/tenants/{tenant_id}/assign-property",
            json={"property_id": property_id, **dates},
            headers=manager_headers,
        )
        assert response.status_code == 200, response.text
        return response.json()["data"]

    return _assign


@pytest.fixture
def create_schedule(client):
    async def _create(manager_headers, property_id, tenant_id, **overrides):
        payload = {
            "property_id": property_id,
            "tenant_id": tenant_id,
            "amount": 1200,
            "due_date": "2025-01-01",
            **overrides,
        }
        response = await client.post(
            f"{API}/rent-schedules", json=payload, headers=manager_headers
        )
        assert response.status_code == 201, response.text
        return response.json()["data"]

    return _create


@pytest.fixture
def pay(client):
    async def _pay(payer_headers, schedule_id, amount, **extra):
        return await client.post(
            f"{API}/payments",
            json={
                "rent_schedule_id": schedule_id,
                "amount": amount,
                "payment_method": "online",
                **extra,
            },
            headers=payer_headers,
        )

    return _pay


@pytest.fixture
async def leased(users, headers, create_property, assign_tenant):
    """A property of ``landlord`` occupied by ``tenant``."""
    property_data = await create_property(headers.landlord)
    return await assign_tenant(headers.landlord, users.tenant, property_data["id"])
