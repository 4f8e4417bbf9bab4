"""
Shared test fixtures

Each test gets a fresh in-memory SQLite database and an httpx client bound to
the ASGI app. The app lifespan does not run under ASGITransport, so tables
and seasons are created here.
"""

import os

os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("LOG_TO_FILE", "false")
os.environ.setdefault("BCRYPT_ROUNDS", "4")

from typing import Dict, Optional

import httpx
import pytest_asyncio

from config.settings import DatabaseConfig
from app.api.main import app
from app.api.services.catalog import ensure_seasons
from app.api.services.user_manager import UserManager
from app.core.async_database import (
    AsyncDatabaseManager,
    reset_async_db_manager,
    set_async_db_manager,
)
from app.core.security import get_credential_service
from app.models import UserRole

PASSWORD = "secret-pass-123"


class ApiHelper:
    """Shortcuts for the calls most tests need"""

    def __init__(self, client: httpx.AsyncClient, db_manager: AsyncDatabaseManager):
        self.client = client
        self.db_manager = db_manager
        self._counter = 0

    def _next(self) -> int:
        self._counter += 1
        return self._counter

    async def register(self, role: Optional[str] = None, email: Optional[str] = None) -> Dict:
        n = self._next()
        payload = {
            "email": email or f"user{n}@example.com",
            "password": PASSWORD,
            "displayName": f"user_{n}",
        }
        if role:
            payload["role"] = role
        response = await self.client.post("/auth/register", json=payload)
        assert response.status_code == 201, response.text
        return response.json()

    async def headers_for(self, role: Optional[str] = None) -> Dict[str, str]:
        body = await self.register(role=role)
        return {"Authorization": f"Bearer {body['token']}"}

    async def admin_headers(self) -> Dict[str, str]:
        n = self._next()
        async with self.db_manager.get_session() as session:
            user = await UserManager().create_user(
                session, f"admin{n}@example.com", PASSWORD, UserRole.ADMIN
            )
        token = get_credential_service().issue_token(user.id, user.role, user.email)
        return {"Authorization": f"Bearer {token}"}

    async def create_location(self, headers: Dict[str, str], **overrides) -> Dict:
        payload = {
            "title": "Quiet bay",
            "description": "Shallow bay with reeds",
            "region": "KYIV",
            "waterType": "LAKE",
            "lat": 50.45,
            "lng": 30.52,
            "contactInfo": "+380 44 000 0000",
        }
        payload.update(overrides)
        response = await self.client.post("/locations", json=payload, headers=headers)
        assert response.status_code == 201, response.text
        return response.json()

    async def set_status(self, admin: Dict[str, str], location_id: int, status: str):
        return await self.client.patch(
            f"/admin/locations/{location_id}/status", json={"status": status}, headers=admin
        )

    async def approved_location(self, owner: Dict[str, str], admin: Dict[str, str], **overrides) -> Dict:
        location = await self.create_location(owner, **overrides)
        response = await self.set_status(admin, location["id"], "APPROVED")
        assert response.status_code == 200, response.text
        return response.json()


@pytest_asyncio.fixture
async def db_manager():
    manager = AsyncDatabaseManager(DatabaseConfig(url="sqlite+aiosqlite:///:memory:"))
    await manager.create_all()
    async with manager.get_session() as session:
        await ensure_seasons(session)
    set_async_db_manager(manager)
    yield manager
    reset_async_db_manager()
    await manager.close()


@pytest_asyncio.fixture
async def client(db_manager):
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as test_client:
        yield test_client


@pytest_asyncio.fixture
async def api(client, db_manager):
    return ApiHelper(client, db_manager)


@pytest_asyncio.fixture
async def owner(api):
    return await api.headers_for("OWNER")


@pytest_asyncio.fixture
async def user(api):
    return await api.headers_for()


@pytest_asyncio.fixture
async def admin(api):
    return await api.admin_headers()
