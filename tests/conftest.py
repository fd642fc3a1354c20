"""Shared test fixtures for Storefront-Engine."""

import os

import pytest
from httpx import ASGITransport, AsyncClient

SECRET_KEY = "test-secret-key"

APPAREL_SCHEMA = [
    {"name": "size", "type": "string", "required": True},
    {"name": "color", "type": "string", "required": False},
    {"name": "qty", "type": "number", "required": False},
]


def make_settings(**overrides):
    from storefront_engine.common.config import StorefrontSettings

    defaults = {"secret_key": SECRET_KEY, "db_url": "sqlite+aiosqlite://"}
    defaults.update(overrides)
    return StorefrontSettings(**defaults)


@pytest.fixture
def settings():
    return make_settings()


@pytest.fixture
async def db(settings):
    from storefront_engine.common.database import DatabaseManager

    manager = DatabaseManager(settings)
    await manager.init()
    await manager.create_all()
    yield manager
    await manager.close()


@pytest.fixture
def app():
    """Create a test app with in-memory DB and the local identity provider."""
    os.environ["STOREFRONT_DB_URL"] = "sqlite+aiosqlite://"
    os.environ["STOREFRONT_SECRET_KEY"] = SECRET_KEY
    os.environ["STOREFRONT_IDENTITY_BACKEND"] = "local"

    # Clear caches and singletons so new env vars take effect
    from storefront_engine.common.config import get_settings
    get_settings.cache_clear()

    from storefront_engine.deps import reset_singletons
    reset_singletons()

    from storefront_engine.app import create_app
    return create_app()


@pytest.fixture
async def client(app):
    # Manually init DB since ASGITransport doesn't run lifespan
    from storefront_engine.deps import get_db
    db = get_db()
    await db.init()
    await db.create_all()

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    await db.close()


async def insert_category(name="Apparel", slug=None, attribute_schema=None, is_active=True):
    """Insert a category straight through the privileged store."""
    from storefront_engine.deps import get_category_service, get_db

    async with get_db().admin_store() as store:
        category = await get_category_service().create_category(
            store,
            name=name,
            slug=slug,
            created_by=None,
            is_active=is_active,
            attribute_schema=APPAREL_SCHEMA if attribute_schema is None else attribute_schema,
        )
        return category.id


async def signup(client, email, subdomain, category_id, password="secret123"):
    resp = await client.post("/auth/signup", json={
        "email": email,
        "password": password,
        "full_name": email.split("@")[0].title(),
        "business_name": f"{subdomain.title()} Shop",
        "subdomain": subdomain,
        "category_id": category_id,
    })
    assert resp.status_code == 201, resp.text
    return resp.json()


async def login_headers(client, email, password="secret123"):
    resp = await client.post("/auth/login", json={"email": email, "password": password})
    assert resp.status_code == 200, resp.text
    return {"Authorization": f"Bearer {resp.json()['access_token']}"}


async def set_role(user_id, role):
    from storefront_engine.deps import get_db
    from storefront_engine.identity.models import ProfileModel

    async with get_db().admin_store() as store:
        profile = await store.get(ProfileModel, id=user_id)
        await store.update(profile, role=role)


@pytest.fixture
async def category_id(client):
    return await insert_category()


@pytest.fixture
async def merchant(client, category_id):
    """A registered merchant: signup payload plus bearer headers."""
    data = await signup(client, "owner@example.com", "acme", category_id)
    data["headers"] = await login_headers(client, "owner@example.com")
    return data


@pytest.fixture
async def admin_headers(client, category_id):
    data = await signup(client, "admin@example.com", "platform", category_id)
    await set_role(data["user_id"], "super_admin")
    return await login_headers(client, "admin@example.com")

