"""Tests for the scoped and privileged store handles."""

import pytest

from storefront_engine.categories.models import CategoryModel
from storefront_engine.common.exceptions import ConflictError, StoreCapabilityError
from storefront_engine.identity.models import ProfileModel


@pytest.fixture
async def profile_id(db):
    async with db.admin_store() as store:
        profile = await store.insert(
            ProfileModel, id="user-1", email="u@example.com", full_name="U"
        )
        return profile.id


class TestScopedStore:
    async def test_point_lookup_of_privileged_row(self, db, profile_id):
        async with db.store() as store:
            profile = await store.get(ProfileModel, id=profile_id)
        assert profile.email == "u@example.com"

    async def test_cannot_scan_privileged_table(self, db, profile_id):
        async with db.store() as store:
            with pytest.raises(StoreCapabilityError):
                await store.list(ProfileModel)

    async def test_cannot_filter_privileged_table(self, db, profile_id):
        async with db.store() as store:
            with pytest.raises(StoreCapabilityError):
                await store.get(ProfileModel, email="u@example.com")

    async def test_cannot_check_existence_in_privileged_table(self, db, profile_id):
        async with db.store() as store:
            with pytest.raises(StoreCapabilityError):
                await store.exists(ProfileModel, email="u@example.com")

    async def test_cannot_mutate_privileged_table(self, db, profile_id):
        async with db.store() as store:
            profile = await store.get(ProfileModel, id=profile_id)
            with pytest.raises(StoreCapabilityError):
                await store.update(profile, role="super_admin")
        async with db.admin_store() as store:
            assert (await store.get(ProfileModel, id=profile_id)).role == "merchant"

    async def test_cannot_insert_privileged_row(self, db):
        async with db.store() as store:
            with pytest.raises(StoreCapabilityError):
                await store.insert(ProfileModel, id="x", email="x@example.com")

    async def test_ordinary_tables_are_writable(self, db):
        async with db.store() as store:
            await store.insert(CategoryModel, name="Books", slug="books")
        async with db.store() as store:
            rows, total = await store.list(CategoryModel)
        assert total == 1
        assert rows[0].slug == "books"


class TestAdminStore:
    async def test_scans_privileged_table(self, db, profile_id):
        async with db.admin_store() as store:
            rows, total = await store.list(ProfileModel)
        assert total == 1

    async def test_count_and_exists(self, db, profile_id):
        async with db.admin_store() as store:
            assert await store.count(ProfileModel) == 1
            assert await store.exists(ProfileModel, email="u@example.com")
            assert not await store.exists(ProfileModel, email="nobody@example.com")

    async def test_duplicate_is_conflict(self, db):
        async with db.admin_store() as store:
            await store.insert(CategoryModel, name="Books", slug="books")
        with pytest.raises(ConflictError):
            async with db.admin_store() as store:
                await store.insert(CategoryModel, name="Books 2", slug="books")

    async def test_list_pages_and_totals(self, db):
        async with db.admin_store() as store:
            for i in range(5):
                await store.insert(CategoryModel, name=f"C{i}", slug=f"c{i}", sort_order=i)
        async with db.admin_store() as store:
            rows, total = await store.list(
                CategoryModel, order_by=(CategoryModel.sort_order,), offset=2, limit=2
            )
        assert total == 5
        assert [r.slug for r in rows] == ["c2", "c3"]

    async def test_delete_where(self, db):
        async with db.admin_store() as store:
            await store.insert(CategoryModel, name="A", slug="a", is_active=False)
            await store.insert(CategoryModel, name="B", slug="b", is_active=False)
            await store.insert(CategoryModel, name="C", slug="c")
        async with db.admin_store() as store:
            assert await store.delete_where(CategoryModel, is_active=False) == 2
            assert await store.count(CategoryModel) == 1
