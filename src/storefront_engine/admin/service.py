"""Platform administration: tenants, users, categories, statistics, health."""

import logging
from datetime import datetime, timedelta, timezone

from sqlalchemy import or_

from storefront_engine.auth.roles import Role
from storefront_engine.catalog.models import ProductModel
from storefront_engine.categories.models import CategoryModel
from storefront_engine.common.exceptions import ConflictError, NotFoundError
from storefront_engine.common.schemas import PaginationParams
from storefront_engine.common.store import AdminRowStore
from storefront_engine.identity.models import ProfileModel
from storefront_engine.identity.provider import IdentityProvider
from storefront_engine.tenants.models import TenantModel
from storefront_engine.tenants.service import TenantService

logger = logging.getLogger(__name__)

RECENT_DAYS = 30


class AdminService:
    """Super-admin operations. Every method takes the privileged store."""

    def __init__(self, tenant_service: TenantService, provider: IdentityProvider):
        self.tenants = tenant_service
        self.provider = provider

    # ── Tenants ──

    async def list_tenants(
        self, store: AdminRowStore, params: PaginationParams, search: str | None = None
    ) -> tuple[list[TenantModel], int]:
        where = []
        if search:
            pattern = f"%{search}%"
            where.append(
                or_(
                    TenantModel.business_name.ilike(pattern),
                    TenantModel.subdomain.ilike(pattern),
                )
            )
        return await store.list(
            TenantModel,
            where=where,
            order_by=(TenantModel.created_at.desc(),),
            offset=params.offset,
            limit=params.limit,
        )

    async def get_tenant(self, store: AdminRowStore, tenant_id: str) -> TenantModel:
        tenant = await self.tenants.get_by_id(store, tenant_id)
        if tenant is None:
            raise NotFoundError("Tenant not found")
        return tenant

    async def set_tenant_status(
        self, store: AdminRowStore, tenant_id: str, is_active: bool
    ) -> TenantModel:
        tenant = await self.get_tenant(store, tenant_id)
        logger.info("Tenant %s set active=%s", tenant_id, is_active)
        return await self.tenants.set_active(store, tenant, is_active)

    async def delete_tenant(self, store: AdminRowStore, tenant_id: str) -> None:
        tenant = await self.get_tenant(store, tenant_id)
        await self.tenants.delete_tenant(store, tenant)

    # ── Users ──

    async def list_users(
        self, store: AdminRowStore, params: PaginationParams, search: str | None = None
    ) -> tuple[list[ProfileModel], int]:
        where = []
        if search:
            pattern = f"%{search}%"
            where.append(
                or_(ProfileModel.email.ilike(pattern), ProfileModel.full_name.ilike(pattern))
            )
        return await store.list(
            ProfileModel,
            where=where,
            order_by=(ProfileModel.created_at.desc(),),
            offset=params.offset,
            limit=params.limit,
        )

    async def get_user(self, store: AdminRowStore, user_id: str) -> ProfileModel:
        profile = await store.get(ProfileModel, id=user_id)
        if profile is None:
            raise NotFoundError("User not found")
        return profile

    async def update_user_role(
        self, store: AdminRowStore, user_id: str, role: Role
    ) -> ProfileModel:
        profile = await self.get_user(store, user_id)
        logger.info("User %s role %s -> %s", user_id, profile.role, role.value)
        return await store.update(profile, role=role.value)

    async def delete_user(self, db, user_id: str) -> None:
        """Remove a user with no tenants: provider identity first, then profile."""
        async with db.admin_store() as store:
            await self.get_user(store, user_id)
            if await store.exists(TenantModel, owner_id=user_id):
                raise ConflictError("Cannot delete user: they still own one or more tenants")

        try:
            await self.provider.delete_user(user_id)
        except NotFoundError:
            logger.warning("Identity %s already absent at provider", user_id)

        async with db.admin_store() as store:
            await store.delete_where(ProfileModel, id=user_id)

    # ── Statistics & health ──

    async def get_system_stats(self, store: AdminRowStore) -> dict:
        cutoff = datetime.now(timezone.utc) - timedelta(days=RECENT_DAYS)

        total_users = await store.count(ProfileModel)
        recent_users = await store.count(ProfileModel, ProfileModel.updated_at >= cutoff)
        total_tenants = await store.count(TenantModel)
        active_tenants = await store.count(TenantModel, is_active=True)
        recent_tenants = await store.count(TenantModel, TenantModel.created_at >= cutoff)
        total_categories = await store.count(CategoryModel)
        total_products = await store.count(ProductModel)

        return {
            "users": {"total": total_users, "recent": recent_users},
            "tenants": {
                "total": total_tenants,
                "active": active_tenants,
                "inactive": total_tenants - active_tenants,
                "recent": recent_tenants,
            },
            "categories": {"total": total_categories},
            "products": {"total": total_products},
            "timestamp": datetime.now(timezone.utc),
        }

    async def get_system_health(self, db) -> dict:
        database = "healthy" if await db.ping() else "unhealthy"

        auth = "healthy"
        try:
            if not await self.provider.ping():
                auth = "unhealthy"
        except Exception:
            logger.exception("Identity provider health check failed")
            auth = "unhealthy"

        status = "healthy" if database == auth == "healthy" else "unhealthy"
        return {
            "status": status,
            "database": database,
            "auth": auth,
            "timestamp": datetime.now(timezone.utc),
        }
