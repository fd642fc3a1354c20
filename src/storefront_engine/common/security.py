"""FastAPI dependencies that run the guard chains, and error translation."""

import json
import logging
from typing import Callable

from fastapi import HTTPException, Request

from storefront_engine.auth.guards import (
    ApiKeyAuth,
    BearerAuth,
    GuardChain,
    GuardContext,
    SuperAdminRole,
    TenantOwnership,
)
from storefront_engine.common.exceptions import (
    AuthenticationFailure,
    StorefrontError,
    UpstreamError,
)

logger = logging.getLogger(__name__)


def http_error(exc: StorefrontError) -> HTTPException:
    """Translate a domain failure into the HTTP response the caller sees."""
    if isinstance(exc, UpstreamError):
        logger.error("Upstream failure: %s", exc.message)
        return HTTPException(status_code=exc.status_code, detail=exc.public_message)
    headers = None
    if isinstance(exc, AuthenticationFailure):
        headers = {"WWW-Authenticate": "Bearer"}
    return HTTPException(status_code=exc.status_code, detail=exc.message, headers=headers)


async def context_from_request(request: Request) -> GuardContext:
    body = None
    if "application/json" in request.headers.get("content-type", ""):
        try:
            body = await request.json()
        except (json.JSONDecodeError, UnicodeDecodeError):
            body = None
    return GuardContext(
        headers=dict(request.headers),
        path_params=dict(request.path_params),
        query_params=dict(request.query_params),
        body=body if isinstance(body, dict) else None,
    )


def _guarded(build_chain: Callable[[], GuardChain]):
    async def dependency(request: Request) -> GuardContext:
        ctx = await context_from_request(request)
        try:
            return await build_chain().run(ctx)
        except StorefrontError as e:
            raise http_error(e)
    return dependency


def _bearer() -> BearerAuth:
    from storefront_engine.deps import get_identity_provider
    return BearerAuth(get_identity_provider())


def _db():
    from storefront_engine.deps import get_db
    return get_db()


require_identity = _guarded(lambda: GuardChain(_bearer()))
require_tenant_owner = _guarded(lambda: GuardChain(_bearer(), TenantOwnership(_db())))
require_super_admin = _guarded(lambda: GuardChain(_bearer(), SuperAdminRole(_db())))
require_api_key = _guarded(lambda: GuardChain(ApiKeyAuth(_db())))
