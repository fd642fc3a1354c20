"""Registration, login and profile operations."""

import logging
from dataclasses import dataclass

from storefront_engine.auth.roles import Role
from storefront_engine.common.exceptions import NotFoundError, StorefrontError
from storefront_engine.identity.models import ProfileModel
from storefront_engine.identity.provider import Identity, IdentityProvider, Session
from storefront_engine.tenants.models import TenantModel
from storefront_engine.tenants.service import TenantService

logger = logging.getLogger(__name__)


@dataclass
class Registration:
    identity: Identity
    tenant: TenantModel
    api_key: str


class IdentityService:
    """Couples the identity provider with profiles and tenant creation."""

    def __init__(self, provider: IdentityProvider, tenant_service: TenantService):
        self.provider = provider
        self.tenants = tenant_service

    async def register(
        self,
        db,
        email: str,
        password: str,
        full_name: str,
        business_name: str,
        subdomain: str,
        category_id: str | None = None,
    ) -> Registration:
        """Create identity, profile and tenant as one unit.

        Subdomain and category are checked before the identity exists; if the
        tenant write still fails, the new identity is deleted again.
        """
        async with db.store() as store:
            await self.tenants.ensure_subdomain_available(store, subdomain)
            if category_id:
                await self.tenants.resolve_assignable_category(store, category_id)

        identity = await self.provider.sign_up(email, password, {"full_name": full_name})

        try:
            async with db.admin_store() as store:
                await store.insert(
                    ProfileModel,
                    id=identity.id,
                    email=identity.email or email,
                    full_name=full_name,
                    role=Role.MERCHANT.value,
                )
                tenant, raw_key = await self.tenants.create_tenant(
                    store,
                    owner_id=identity.id,
                    business_name=business_name,
                    subdomain=subdomain,
                    category_id=category_id,
                )
        except StorefrontError:
            await self._discard_identity(identity)
            raise

        logger.info("Registered user %s with tenant %s", identity.id, tenant.id)
        return Registration(identity=identity, tenant=tenant, api_key=raw_key)

    async def _discard_identity(self, identity: Identity) -> None:
        try:
            await self.provider.delete_user(identity.id)
        except StorefrontError:
            logger.exception("Failed to roll back identity %s after registration error", identity.id)

    async def login(self, email: str, password: str) -> Session:
        return await self.provider.sign_in(email, password)

    async def refresh(self, refresh_token: str) -> Session:
        return await self.provider.refresh(refresh_token)

    async def get_profile(self, store, user_id: str) -> ProfileModel:
        profile = await store.get(ProfileModel, id=user_id)
        if profile is None:
            raise NotFoundError("User profile not found")
        return profile
