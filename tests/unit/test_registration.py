"""Tests for registration: identity, profile and tenant created together."""

import pytest

from storefront_engine.categories.models import CategoryModel
from storefront_engine.common.exceptions import ConflictError, ValidationFailure
from storefront_engine.identity.models import IdentityModel, ProfileModel
from storefront_engine.identity.provider import LocalIdentityProvider
from storefront_engine.identity.service import IdentityService
from storefront_engine.tenants.models import TenantModel
from storefront_engine.tenants.service import TenantService


class CountingProvider(LocalIdentityProvider):
    def __init__(self, settings, db):
        super().__init__(settings, db)
        self.deleted = []

    async def delete_user(self, user_id):
        self.deleted.append(user_id)
        await super().delete_user(user_id)


@pytest.fixture
def provider(settings, db):
    return CountingProvider(settings, db)


@pytest.fixture
def svc(provider):
    return IdentityService(provider, TenantService())


@pytest.fixture
async def category_id(db):
    async with db.admin_store() as store:
        category = await store.insert(CategoryModel, name="Apparel", slug="apparel")
        return category.id


async def register(db, svc, email, subdomain, category_id):
    return await svc.register(
        db, email=email, password="secret123", full_name="Jo",
        business_name="Jo's", subdomain=subdomain, category_id=category_id,
    )


class TestRegister:
    async def test_creates_everything(self, db, svc, category_id):
        reg = await register(db, svc, "jo@example.com", "jos", category_id)
        assert reg.api_key.startswith("os_live_")
        async with db.admin_store() as store:
            profile = await store.get(ProfileModel, id=reg.identity.id)
            tenant = await store.get(TenantModel, id=reg.tenant.id)
        assert profile.role == "merchant"
        assert profile.full_name == "Jo"
        assert tenant.owner_id == reg.identity.id
        assert tenant.category_id == category_id

    async def test_taken_subdomain_creates_no_identity(self, db, svc, provider, category_id):
        await register(db, svc, "jo@example.com", "jos", category_id)
        with pytest.raises(ConflictError, match="Subdomain is already taken"):
            await register(db, svc, "sam@example.com", "jos", category_id)
        async with db.admin_store() as store:
            assert await store.count(IdentityModel) == 1
        assert provider.deleted == []

    async def test_bad_category_creates_no_identity(self, db, svc, category_id):
        with pytest.raises(ValidationFailure, match="Invalid category selected"):
            await register(db, svc, "jo@example.com", "jos", "nope")
        async with db.admin_store() as store:
            assert await store.count(IdentityModel) == 0

    async def test_late_failure_discards_identity(self, db, svc, provider, category_id):
        class FailingTenants(TenantService):
            async def create_tenant(self, store, *args, **kwargs):
                raise ConflictError("Subdomain is already taken")

        svc.tenants = FailingTenants()
        with pytest.raises(ConflictError):
            await register(db, svc, "jo@example.com", "jos", category_id)
        assert len(provider.deleted) == 1
        async with db.admin_store() as store:
            assert await store.count(IdentityModel) == 0
            assert await store.count(ProfileModel) == 0

    async def test_duplicate_email(self, db, svc, category_id):
        await register(db, svc, "jo@example.com", "jos", category_id)
        with pytest.raises(ConflictError, match="already registered"):
            await register(db, svc, "jo@example.com", "jos2", category_id)
