"""Tenant API router — owner-scoped CRUD and API key rotation."""

from fastapi import APIRouter, Depends

from storefront_engine.auth.guards import GuardContext
from storefront_engine.common.exceptions import NotFoundError, StorefrontError
from storefront_engine.common.security import http_error, require_identity, require_tenant_owner
from storefront_engine.tenants.schemas import (
    ApiKeyResponse,
    TenantCreate,
    TenantCreateResponse,
    TenantResponse,
    TenantUpdate,
)

router = APIRouter(prefix="/tenants", tags=["tenants"])


def _get_service():
    from storefront_engine.deps import get_tenant_service
    return get_tenant_service()


def _get_db():
    from storefront_engine.deps import get_db
    return get_db()


async def _reload(svc, store, ctx: GuardContext):
    tenant = await svc.get_by_id(store, ctx.tenant.id)
    if tenant is None:
        raise NotFoundError("Tenant not found")
    return tenant


@router.post("", response_model=TenantCreateResponse, status_code=201)
async def create_tenant(body: TenantCreate, ctx: GuardContext = Depends(require_identity)):
    svc = _get_service()
    db = _get_db()
    try:
        async with db.store() as store:
            tenant, raw_key = await svc.create_tenant(
                store,
                owner_id=ctx.identity.id,
                business_name=body.business_name,
                subdomain=body.subdomain,
                category_id=body.category_id,
            )
            return TenantCreateResponse(
                **TenantResponse.model_validate(tenant).model_dump(),
                api_key=raw_key,
            )
    except StorefrontError as e:
        raise http_error(e)


@router.get("", response_model=list[TenantResponse])
async def list_tenants(ctx: GuardContext = Depends(require_identity)):
    svc = _get_service()
    db = _get_db()
    async with db.store() as store:
        tenants = await svc.list_for_owner(store, ctx.identity.id)
        return [TenantResponse.model_validate(t) for t in tenants]


@router.get("/{id}", response_model=TenantResponse)
async def get_tenant(ctx: GuardContext = Depends(require_tenant_owner)):
    return TenantResponse.model_validate(ctx.tenant)


@router.patch("/{id}", response_model=TenantResponse)
async def update_tenant(body: TenantUpdate, ctx: GuardContext = Depends(require_tenant_owner)):
    svc = _get_service()
    db = _get_db()
    try:
        async with db.store() as store:
            tenant = await _reload(svc, store, ctx)
            tenant = await svc.update_tenant(
                store, tenant, **body.model_dump(exclude_none=True)
            )
            return TenantResponse.model_validate(tenant)
    except StorefrontError as e:
        raise http_error(e)


@router.delete("/{id}", status_code=204)
async def delete_tenant(ctx: GuardContext = Depends(require_tenant_owner)):
    svc = _get_service()
    db = _get_db()
    try:
        async with db.store() as store:
            tenant = await _reload(svc, store, ctx)
            await svc.delete_tenant(store, tenant)
    except StorefrontError as e:
        raise http_error(e)


@router.post("/{id}/regenerate-api-key", response_model=ApiKeyResponse)
async def regenerate_api_key(ctx: GuardContext = Depends(require_tenant_owner)):
    svc = _get_service()
    db = _get_db()
    try:
        async with db.store() as store:
            tenant = await _reload(svc, store, ctx)
            raw_key = await svc.regenerate_api_key(store, tenant)
            return ApiKeyResponse(api_key=raw_key)
    except StorefrontError as e:
        raise http_error(e)
