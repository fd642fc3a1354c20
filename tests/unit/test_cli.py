"""Tests for the storefront CLI."""

import asyncio

import pytest
from typer.testing import CliRunner

from storefront_engine.cli import app
from storefront_engine.common.config import get_settings
from storefront_engine.common.database import DatabaseManager
from storefront_engine.identity.models import ProfileModel
from tests.conftest import SECRET_KEY

runner = CliRunner()


@pytest.fixture
def db_url(tmp_path, monkeypatch):
    url = f"sqlite+aiosqlite:///{tmp_path / 'cli.db'}"
    monkeypatch.setenv("STOREFRONT_DB_URL", url)
    monkeypatch.setenv("STOREFRONT_SECRET_KEY", SECRET_KEY)
    get_settings.cache_clear()
    yield url
    get_settings.cache_clear()


def _seed_profile():
    async def seed():
        db = DatabaseManager(get_settings())
        await db.init()
        await db.create_all()
        async with db.admin_store() as store:
            await store.insert(ProfileModel, id="u-1", email="jo@example.com", full_name="Jo")
        await db.close()

    asyncio.run(seed())


def _role_of(email):
    async def read():
        db = DatabaseManager(get_settings())
        await db.init()
        async with db.admin_store() as store:
            role = (await store.get(ProfileModel, email=email)).role
        await db.close()
        return role

    return asyncio.run(read())


class TestPromote:
    def test_promote(self, db_url):
        _seed_profile()
        result = runner.invoke(app, ["promote", "jo@example.com"])
        assert result.exit_code == 0
        assert _role_of("jo@example.com") == "super_admin"

    def test_promote_explicit_role(self, db_url):
        _seed_profile()
        result = runner.invoke(app, ["promote", "jo@example.com", "--role", "admin"])
        assert result.exit_code == 0
        assert _role_of("jo@example.com") == "admin"

    def test_unknown_email(self, db_url):
        result = runner.invoke(app, ["promote", "ghost@example.com"])
        assert result.exit_code == 1
        assert "No profile found" in result.output
