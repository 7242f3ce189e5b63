"""
Pytest configuration and shared fixtures.

Provides reusable test fixtures for the in-memory database, HTTP clients,
users and permission items.
"""

from collections.abc import AsyncGenerator
from typing import Any

import pytest
from httpx import ASGITransport, AsyncClient
from mongomock_motor import AsyncMongoMockClient

from src.core.config import settings
from src.core.database import get_database
from src.core.sse import SseConnectionManager
from src.main import app
from src.modules.auth.schemas import UserCreate
from src.modules.auth.security import create_access_token
from src.modules.auth.services import USERS_COLLECTION, create_user
from src.modules.content import store
from src.modules.content.definitions import new_content_item
from src.modules.content.models import ContentItem


@pytest.fixture
async def mongo_db() -> Any:
    """In-memory MongoDB test database, fresh for every test."""
    client = AsyncMongoMockClient()
    return client[f"{settings.MONGODB_DATABASE}_test"]


@pytest.fixture
async def async_client(mongo_db) -> AsyncGenerator[AsyncClient, None]:
    """
    Async HTTP client for testing FastAPI endpoints.

    Usage:
        async def test_endpoint(async_client):
            response = await async_client.get("/health")
            assert response.status_code == 200
    """
    transport = ASGITransport(app=app)
    # Override database dependency to use the test database
    app.dependency_overrides[get_database] = lambda: mongo_db
    app.state.sse_connections = SseConnectionManager()
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()


@pytest.fixture
def insert_content(mongo_db):
    """Store a content item directly and return it in its stored shape.

    Usage:
        pet = await insert_content("Pet", {"Name": {"Text": "Rex"}}, DisplayText="Rex")
    """

    async def _insert(content_type: str, section: dict | None = None, **header) -> dict:
        data = new_content_item(content_type).to_raw()
        data[content_type] = section or {}
        data.update(header)
        item = await store.insert_item(mongo_db, ContentItem.model_validate(data))
        return item.to_raw()

    return _insert


@pytest.fixture
def grant(insert_content):
    """Store a permission item granting ``methods`` on ``content_types`` to ``roles``."""

    async def _grant(roles: str, content_types: str, methods: list[str]) -> dict:
        return await insert_content(
            settings.PERMISSIONS_CONTENT_TYPE,
            {
                "Roles": {"Text": roles},
                "ContentTypes": {"Text": content_types},
                "RestMethods": {"Values": methods},
            },
            DisplayText=f"{roles} on {content_types}",
        )

    return _grant


@pytest.fixture
def test_user_data() -> dict:
    """Test user data."""
    return {
        "email": "test@example.com",
        "username": "testuser",
        "password": "testpassword123",
        "firstName": "Test",
        "lastName": "User",
        "phone": "555-0100",
    }


@pytest.fixture
async def test_user(mongo_db, test_user_data):
    """A registered user with the default role."""
    return await create_user(mongo_db, UserCreate(**test_user_data))


@pytest.fixture
def auth_headers(test_user) -> dict:
    """Bearer headers for ``test_user``."""
    token = create_access_token(subject=test_user.user_id, roles=test_user.roles)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
async def admin_headers(mongo_db) -> dict:
    """Bearer headers for a user holding the administrator role."""
    admin = await create_user(
        mongo_db,
        UserCreate(username="admin", email="admin@example.com", password="adminpassword"),
    )
    await mongo_db[USERS_COLLECTION].update_one(
        {"user_id": admin.user_id}, {"$set": {"roles": [settings.ADMIN_ROLE]}}
    )
    token = create_access_token(subject=admin.user_id, roles=[settings.ADMIN_ROLE])
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def anyio_backend() -> str:
    """Backend for anyio (used by httpx)."""
    return "asyncio"
