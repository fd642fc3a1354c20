"""Tenant lifecycle service: registration, updates, key rotation, deletion."""

import logging

from storefront_engine.catalog.models import ProductModel
from storefront_engine.categories.models import CategoryModel
from storefront_engine.common.exceptions import ConflictError, ValidationFailure
from storefront_engine.common.store import RowStore
from storefront_engine.tenants.keys import generate_api_key, hash_api_key
from storefront_engine.tenants.models import TenantModel

logger = logging.getLogger(__name__)

_MAX_KEY_ATTEMPTS = 3


class TenantService:
    """Tenant management operations."""

    async def ensure_subdomain_available(
        self, store: RowStore, subdomain: str, exclude_id: str | None = None
    ) -> None:
        """Exact, case-sensitive match. ``exclude_id`` lets a rename keep its own value."""
        where = [TenantModel.id != exclude_id] if exclude_id else []
        if await store.exists(TenantModel, *where, subdomain=subdomain):
            raise ConflictError("Subdomain is already taken")

    async def resolve_assignable_category(
        self, store: RowStore, category_id: str
    ) -> CategoryModel:
        category = await store.get(CategoryModel, id=category_id)
        if category is None:
            raise ValidationFailure("Invalid category selected")
        if not category.is_active:
            raise ValidationFailure("Selected category is not active")
        return category

    async def _unused_api_key(self, store: RowStore, current_hash: str | None = None) -> str:
        for _ in range(_MAX_KEY_ATTEMPTS):
            raw_key = generate_api_key()
            key_hash = hash_api_key(raw_key)
            if key_hash != current_hash and not await store.exists(
                TenantModel, api_key_hash=key_hash
            ):
                return raw_key
        raise ConflictError("Could not allocate a unique API key")

    async def create_tenant(
        self,
        store: RowStore,
        owner_id: str,
        business_name: str,
        subdomain: str,
        category_id: str | None = None,
    ) -> tuple[TenantModel, str]:
        """Create a tenant and generate its API key. Returns (model, raw_api_key)."""
        await self.ensure_subdomain_available(store, subdomain)
        if category_id:
            await self.resolve_assignable_category(store, category_id)

        raw_key = await self._unused_api_key(store)
        tenant = await store.insert(
            TenantModel,
            owner_id=owner_id,
            business_name=business_name,
            subdomain=subdomain,
            api_key_hash=hash_api_key(raw_key),
            category_id=category_id or None,
            is_active=True,
        )
        logger.info("Tenant created: %s (%s)", tenant.id, subdomain)
        return tenant, raw_key

    async def get_by_id(self, store: RowStore, tenant_id: str) -> TenantModel | None:
        return await store.get(TenantModel, id=tenant_id)

    async def list_for_owner(self, store: RowStore, owner_id: str) -> list[TenantModel]:
        tenants, _ = await store.list(
            TenantModel,
            filters={"owner_id": owner_id},
            order_by=(TenantModel.created_at.desc(),),
        )
        return tenants

    async def update_tenant(
        self,
        store: RowStore,
        tenant: TenantModel,
        business_name: str | None = None,
        subdomain: str | None = None,
        category_id: str | None = None,
    ) -> TenantModel:
        updates = {}
        if business_name:
            updates["business_name"] = business_name
        if subdomain:
            await self.ensure_subdomain_available(store, subdomain, exclude_id=tenant.id)
            updates["subdomain"] = subdomain
        if category_id:
            await self.resolve_assignable_category(store, category_id)
            updates["category_id"] = category_id
        if not updates:
            return tenant
        return await store.update(tenant, **updates)

    async def regenerate_api_key(self, store: RowStore, tenant: TenantModel) -> str:
        """Replace the key; the previous one stops working immediately."""
        raw_key = await self._unused_api_key(store, current_hash=tenant.api_key_hash)
        await store.update(tenant, api_key_hash=hash_api_key(raw_key))
        logger.info("API key rotated for tenant %s", tenant.id)
        return raw_key

    async def set_active(self, store: RowStore, tenant: TenantModel, is_active: bool) -> TenantModel:
        return await store.update(tenant, is_active=is_active)

    async def delete_tenant(self, store: RowStore, tenant: TenantModel) -> None:
        removed = await store.delete_where(ProductModel, tenant_id=tenant.id)
        await store.delete(tenant)
        logger.info("Tenant deleted: %s (%d products removed)", tenant.id, removed)
