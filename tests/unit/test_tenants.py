"""Tests for the tenant service."""

import pytest

from storefront_engine.catalog.models import ProductModel
from storefront_engine.categories.models import CategoryModel
from storefront_engine.common.exceptions import ConflictError, ValidationFailure
from storefront_engine.tenants.keys import API_KEY_PATTERN, hash_api_key
from storefront_engine.tenants.models import TenantModel
from storefront_engine.tenants.service import TenantService


@pytest.fixture
def svc():
    return TenantService()


@pytest.fixture
async def categories(db):
    async with db.admin_store() as store:
        active = await store.insert(CategoryModel, name="Apparel", slug="apparel")
        retired = await store.insert(
            CategoryModel, name="Retired", slug="retired", is_active=False
        )
        return {"active": active.id, "retired": retired.id}


class TestCreateTenant:
    async def test_create(self, db, svc, categories):
        async with db.store() as store:
            tenant, raw_key = await svc.create_tenant(
                store, "owner-1", "Acme", "acme", categories["active"]
            )
        assert API_KEY_PATTERN.match(raw_key)
        assert tenant.api_key_hash == hash_api_key(raw_key)
        assert tenant.is_active is True
        assert tenant.category_id == categories["active"]

    async def test_without_category(self, db, svc):
        async with db.store() as store:
            tenant, _ = await svc.create_tenant(store, "owner-1", "Acme", "acme")
        assert tenant.category_id is None

    async def test_duplicate_subdomain(self, db, svc):
        async with db.store() as store:
            await svc.create_tenant(store, "owner-1", "Acme", "acme")
        async with db.store() as store:
            with pytest.raises(ConflictError, match="Subdomain is already taken"):
                await svc.create_tenant(store, "owner-2", "Other", "acme")

    async def test_subdomain_match_is_case_sensitive(self, db, svc):
        async with db.store() as store:
            await svc.create_tenant(store, "owner-1", "Acme", "acme")
            tenant, _ = await svc.create_tenant(store, "owner-2", "Acme Upper", "Acme")
        assert tenant.subdomain == "Acme"

    async def test_unknown_category(self, db, svc):
        async with db.store() as store:
            with pytest.raises(ValidationFailure, match="Invalid category selected"):
                await svc.create_tenant(store, "owner-1", "Acme", "acme", "nope")

    async def test_inactive_category(self, db, svc, categories):
        async with db.store() as store:
            with pytest.raises(ValidationFailure, match="not active"):
                await svc.create_tenant(store, "owner-1", "Acme", "acme", categories["retired"])


class TestUpdateTenant:
    async def test_rename_keeps_own_subdomain(self, db, svc):
        async with db.store() as store:
            tenant, _ = await svc.create_tenant(store, "owner-1", "Acme", "acme")
            tenant = await svc.update_tenant(store, tenant, business_name="Acme Ltd", subdomain="acme")
        assert tenant.business_name == "Acme Ltd"

    async def test_subdomain_taken_by_other(self, db, svc):
        async with db.store() as store:
            await svc.create_tenant(store, "owner-1", "Acme", "acme")
            other, _ = await svc.create_tenant(store, "owner-2", "Other", "other")
            with pytest.raises(ConflictError):
                await svc.update_tenant(store, other, subdomain="acme")

    async def test_change_category(self, db, svc, categories):
        async with db.store() as store:
            tenant, _ = await svc.create_tenant(store, "owner-1", "Acme", "acme")
            tenant = await svc.update_tenant(store, tenant, category_id=categories["active"])
        assert tenant.category_id == categories["active"]

    async def test_noop(self, db, svc):
        async with db.store() as store:
            tenant, _ = await svc.create_tenant(store, "owner-1", "Acme", "acme")
            same = await svc.update_tenant(store, tenant)
        assert same is tenant


class TestApiKeyRotation:
    async def test_old_key_stops_matching(self, db, svc):
        async with db.store() as store:
            tenant, old_key = await svc.create_tenant(store, "owner-1", "Acme", "acme")
            new_key = await svc.regenerate_api_key(store, tenant)
        assert new_key != old_key
        async with db.store() as store:
            assert await store.get(TenantModel, api_key_hash=hash_api_key(old_key)) is None
            found = await store.get(TenantModel, api_key_hash=hash_api_key(new_key))
        assert found.id == tenant.id


class TestListAndDelete:
    async def test_list_for_owner(self, db, svc):
        async with db.store() as store:
            await svc.create_tenant(store, "owner-1", "A", "aaa")
            await svc.create_tenant(store, "owner-1", "B", "bbb")
            await svc.create_tenant(store, "owner-2", "C", "ccc")
        async with db.store() as store:
            tenants = await svc.list_for_owner(store, "owner-1")
        assert {t.subdomain for t in tenants} == {"aaa", "bbb"}

    async def test_delete_removes_products(self, db, svc, categories):
        async with db.store() as store:
            tenant, _ = await svc.create_tenant(
                store, "owner-1", "Acme", "acme", categories["active"]
            )
            await store.insert(
                ProductModel, tenant_id=tenant.id, category_id=categories["active"],
                name="Shirt", base_price=10.0, stock_level=1,
            )
        async with db.store() as store:
            tenant = await svc.get_by_id(store, tenant.id)
            await svc.delete_tenant(store, tenant)
        async with db.store() as store:
            assert await store.count(ProductModel) == 0
            assert await store.count(TenantModel) == 0
