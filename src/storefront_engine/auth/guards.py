"""
Authorization guard chain.

Each guard inspects a ``GuardContext`` and returns an outcome: allow with
context to attach, or deny with a failure. ``GuardChain`` runs guards in
order, stops at the first denial and only attaches context from guards
that allowed, so a denied request never carries partial state.

Denials keep "not authenticated" (``AuthenticationFailure``) apart from
"authenticated but forbidden" (``AuthorizationFailure``).
"""

import dataclasses
import logging
from dataclasses import dataclass, field
from typing import Any, Mapping, Sequence

from sqlalchemy.exc import SQLAlchemyError

from storefront_engine.auth.roles import Capability, Role, has_capability, parse_role
from storefront_engine.common.exceptions import (
    AuthenticationFailure,
    AuthorizationFailure,
    NotFoundError,
    StorefrontError,
    UpstreamError,
)
from storefront_engine.identity.models import ProfileModel
from storefront_engine.identity.provider import INVALID_TOKEN, Identity, IdentityProvider
from storefront_engine.tenants.keys import API_KEY_PREFIX, hash_api_key
from storefront_engine.tenants.models import TenantModel

logger = logging.getLogger(__name__)

API_KEY_HEADER = "x-api-key"
TENANT_ID_HEADER = "x-tenant-id"


@dataclass(frozen=True)
class GuardContext:
    """Everything a guard may look at, plus what earlier guards attached."""

    headers: Mapping[str, str] = field(default_factory=dict)
    path_params: Mapping[str, Any] = field(default_factory=dict)
    query_params: Mapping[str, Any] = field(default_factory=dict)
    body: Mapping[str, Any] | None = None
    identity: Identity | None = None
    tenant: TenantModel | None = None
    role: Role | None = None
    is_super_admin: bool = False

    def header(self, name: str) -> str | None:
        name = name.lower()
        for key, value in self.headers.items():
            if key.lower() == name:
                return value
        return None


@dataclass(frozen=True)
class GuardOutcome:
    allowed: bool
    attach: Mapping[str, Any] = field(default_factory=dict)
    failure: StorefrontError | None = None

    @classmethod
    def allow(cls, **attach: Any) -> "GuardOutcome":
        return cls(True, attach)

    @classmethod
    def deny(cls, failure: StorefrontError) -> "GuardOutcome":
        return cls(False, failure=failure)


class Guard:
    """Base class: one authorization predicate."""

    name = "guard"

    async def evaluate(self, ctx: GuardContext) -> GuardOutcome:
        raise NotImplementedError


class GuardChain:
    """Runs guards in a fixed order; the first denial is terminal."""

    def __init__(self, *guards: Guard):
        self.guards = guards

    async def run(self, ctx: GuardContext) -> GuardContext:
        for guard in self.guards:
            outcome = await guard.evaluate(ctx)
            if not outcome.allowed:
                logger.debug("Guard %s denied: %s", guard.name, outcome.failure)
                raise outcome.failure
            ctx = dataclasses.replace(ctx, **outcome.attach)
        return ctx


# ── Bearer token ──


class BearerAuth(Guard):
    name = "bearer_auth"

    def __init__(self, provider: IdentityProvider):
        self.provider = provider

    async def evaluate(self, ctx: GuardContext) -> GuardOutcome:
        header = ctx.header("authorization")
        if not header or not header.startswith("Bearer ") or not header[7:].strip():
            return GuardOutcome.deny(
                AuthenticationFailure("Missing or invalid authorization header")
            )
        try:
            identity = await self.provider.resolve(header[7:].strip())
        except AuthenticationFailure as exc:
            return GuardOutcome.deny(exc)
        except UpstreamError as exc:
            # Logged as an outage, reported to the caller as a bad token.
            logger.error("Identity provider unavailable during bearer auth: %s", exc.message)
            return GuardOutcome.deny(AuthenticationFailure(INVALID_TOKEN))
        return GuardOutcome.allow(identity=identity)


# ── Machine-to-machine API key ──


class ApiKeyAuth(Guard):
    name = "api_key_auth"

    def __init__(self, db):
        self.db = db

    async def evaluate(self, ctx: GuardContext) -> GuardOutcome:
        api_key = ctx.header(API_KEY_HEADER)
        if not api_key:
            return GuardOutcome.deny(AuthenticationFailure("API key is required"))
        if not api_key.startswith(API_KEY_PREFIX):
            return GuardOutcome.deny(AuthenticationFailure("Invalid API key format"))
        try:
            async with self.db.store() as store:
                tenant = await store.get(TenantModel, api_key_hash=hash_api_key(api_key))
        except SQLAlchemyError:
            logger.exception("API key lookup failed", extra={"guard": self.name})
            return GuardOutcome.deny(AuthenticationFailure("API key validation failed"))
        if tenant is None:
            return GuardOutcome.deny(AuthenticationFailure("Invalid API key"))
        if not tenant.is_active:
            return GuardOutcome.deny(AuthenticationFailure("Tenant account is inactive"))
        return GuardOutcome.allow(tenant=tenant)


# ── Tenant ownership ──


@dataclass(frozen=True)
class PathParam:
    key: str

    def __call__(self, ctx: GuardContext) -> Any:
        return ctx.path_params.get(self.key)


@dataclass(frozen=True)
class QueryParam:
    key: str

    def __call__(self, ctx: GuardContext) -> Any:
        return ctx.query_params.get(self.key)


@dataclass(frozen=True)
class BodyField:
    key: str

    def __call__(self, ctx: GuardContext) -> Any:
        return (ctx.body or {}).get(self.key)


@dataclass(frozen=True)
class HeaderValue:
    key: str

    def __call__(self, ctx: GuardContext) -> Any:
        return ctx.header(self.key)


# First non-empty value wins.
TENANT_ID_SOURCES = (
    PathParam("tenant_id"),
    PathParam("id"),
    QueryParam("tenant_id"),
    BodyField("tenant_id"),
    HeaderValue(TENANT_ID_HEADER),
)


def extract_tenant_id(ctx: GuardContext, sources: Sequence = TENANT_ID_SOURCES) -> str | None:
    for source in sources:
        value = source(ctx)
        if value:
            return str(value)
    return None


class TenantOwnership(Guard):
    name = "tenant_ownership"

    def __init__(self, db, sources: Sequence = TENANT_ID_SOURCES):
        self.db = db
        self.sources = tuple(sources)

    async def evaluate(self, ctx: GuardContext) -> GuardOutcome:
        if ctx.identity is None:
            return GuardOutcome.deny(AuthenticationFailure("User not authenticated"))
        tenant_id = extract_tenant_id(ctx, self.sources)
        if not tenant_id:
            return GuardOutcome.deny(AuthorizationFailure("Tenant ID is required"))
        try:
            async with self.db.store() as store:
                tenant = await store.get(TenantModel, id=tenant_id)
        except SQLAlchemyError:
            logger.exception(
                "Tenant lookup failed",
                extra={"guard": self.name, "tenant_id": tenant_id, "user_id": ctx.identity.id},
            )
            return GuardOutcome.deny(AuthorizationFailure("Tenant validation failed"))
        if tenant is None:
            return GuardOutcome.deny(NotFoundError("Tenant not found"))
        if tenant.owner_id != ctx.identity.id:
            logger.info(
                "Tenant ownership denied",
                extra={"guard": self.name, "tenant_id": tenant_id, "user_id": ctx.identity.id},
            )
            return GuardOutcome.deny(AuthorizationFailure("Access denied to this tenant"))
        return GuardOutcome.allow(tenant=tenant)


# ── Super-admin role ──


class SuperAdminRole(Guard):
    name = "super_admin_role"

    def __init__(self, db):
        self.db = db

    async def evaluate(self, ctx: GuardContext) -> GuardOutcome:
        if ctx.identity is None:
            return GuardOutcome.deny(AuthenticationFailure("User not authenticated"))
        try:
            async with self.db.store() as store:
                profile = await store.get(ProfileModel, id=ctx.identity.id)
        except SQLAlchemyError:
            logger.exception(
                "Profile lookup failed", extra={"guard": self.name, "user_id": ctx.identity.id}
            )
            return GuardOutcome.deny(AuthorizationFailure("Role validation failed"))
        if profile is None:
            return GuardOutcome.deny(AuthorizationFailure("User profile not found"))
        role = parse_role(profile.role)
        if not has_capability(role, Capability.MANAGE_PLATFORM):
            return GuardOutcome.deny(
                AuthorizationFailure("Access denied. Super admin privileges required.")
            )
        return GuardOutcome.allow(role=role, is_super_admin=True)
