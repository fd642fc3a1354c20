"""Admin API router — requires a super-admin bearer token; uses the privileged store."""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from storefront_engine.admin.schemas import (
    AdminTenantList,
    AdminUserList,
    SystemHealth,
    SystemStats,
    TenantStatusUpdate,
    UserRoleUpdate,
)
from storefront_engine.auth.guards import GuardContext
from storefront_engine.categories.schemas import (
    CategoryCreate,
    CategoryListResponse,
    CategoryResponse,
    CategoryUpdate,
)
from storefront_engine.common.exceptions import StorefrontError
from storefront_engine.common.schemas import MessageResponse, Pagination, PaginationParams
from storefront_engine.common.security import http_error, require_super_admin
from storefront_engine.identity.schemas import ProfileResponse
from storefront_engine.tenants.schemas import TenantResponse

router = APIRouter(prefix="/admin", tags=["admin"])


def _get_service():
    from storefront_engine.deps import get_admin_service
    return get_admin_service()


def _get_categories():
    from storefront_engine.deps import get_category_service
    return get_category_service()


def _get_db():
    from storefront_engine.deps import get_db
    return get_db()


# ── System ──

@router.get("/stats", response_model=SystemStats)
async def get_system_stats(_=Depends(require_super_admin)):
    async with _get_db().admin_store() as store:
        return await _get_service().get_system_stats(store)


@router.get("/health", response_model=SystemHealth)
async def get_system_health(_=Depends(require_super_admin)):
    return await _get_service().get_system_health(_get_db())


# ── Tenants ──

@router.get("/tenants", response_model=AdminTenantList)
async def list_tenants(
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=100),
    search: Optional[str] = Query(None),
    _=Depends(require_super_admin),
):
    params = PaginationParams(page=page, limit=limit)
    async with _get_db().admin_store() as store:
        tenants, total = await _get_service().list_tenants(store, params, search)
        return AdminTenantList(
            data=[TenantResponse.model_validate(t) for t in tenants],
            pagination=Pagination.build(params, total),
        )


@router.get("/tenants/{tenant_id}", response_model=TenantResponse)
async def get_tenant(tenant_id: str, _=Depends(require_super_admin)):
    try:
        async with _get_db().admin_store() as store:
            tenant = await _get_service().get_tenant(store, tenant_id)
            return TenantResponse.model_validate(tenant)
    except StorefrontError as e:
        raise http_error(e)


@router.patch("/tenants/{tenant_id}/status", response_model=TenantResponse)
async def update_tenant_status(
    tenant_id: str, body: TenantStatusUpdate, _=Depends(require_super_admin)
):
    try:
        async with _get_db().admin_store() as store:
            tenant = await _get_service().set_tenant_status(store, tenant_id, body.is_active)
            return TenantResponse.model_validate(tenant)
    except StorefrontError as e:
        raise http_error(e)


@router.delete("/tenants/{tenant_id}", response_model=MessageResponse)
async def delete_tenant(tenant_id: str, _=Depends(require_super_admin)):
    try:
        async with _get_db().admin_store() as store:
            await _get_service().delete_tenant(store, tenant_id)
    except StorefrontError as e:
        raise http_error(e)
    return MessageResponse(message="Tenant deleted successfully")


# ── Users ──

@router.get("/users", response_model=AdminUserList)
async def list_users(
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=100),
    search: Optional[str] = Query(None),
    _=Depends(require_super_admin),
):
    params = PaginationParams(page=page, limit=limit)
    async with _get_db().admin_store() as store:
        users, total = await _get_service().list_users(store, params, search)
        return AdminUserList(
            data=[ProfileResponse.model_validate(u) for u in users],
            pagination=Pagination.build(params, total),
        )


@router.get("/users/{user_id}", response_model=ProfileResponse)
async def get_user(user_id: str, _=Depends(require_super_admin)):
    try:
        async with _get_db().admin_store() as store:
            return ProfileResponse.model_validate(
                await _get_service().get_user(store, user_id)
            )
    except StorefrontError as e:
        raise http_error(e)


@router.patch("/users/{user_id}/role", response_model=ProfileResponse)
async def update_user_role(
    user_id: str, body: UserRoleUpdate, _=Depends(require_super_admin)
):
    try:
        async with _get_db().admin_store() as store:
            profile = await _get_service().update_user_role(store, user_id, body.role)
            return ProfileResponse.model_validate(profile)
    except StorefrontError as e:
        raise http_error(e)


@router.delete("/users/{user_id}", response_model=MessageResponse)
async def delete_user(user_id: str, _=Depends(require_super_admin)):
    try:
        await _get_service().delete_user(_get_db(), user_id)
    except StorefrontError as e:
        raise http_error(e)
    return MessageResponse(message="User deleted successfully")


# ── Categories ──

@router.post("/categories", response_model=CategoryResponse, status_code=201)
async def create_category(
    body: CategoryCreate, ctx: GuardContext = Depends(require_super_admin)
):
    data = body.model_dump()
    try:
        async with _get_db().admin_store() as store:
            category = await _get_categories().create_category(
                store, created_by=ctx.identity.id, **data
            )
            return CategoryResponse.model_validate(category)
    except StorefrontError as e:
        raise http_error(e)


@router.get("/categories", response_model=CategoryListResponse)
async def list_categories(
    include_inactive: bool = Query(False),
    _=Depends(require_super_admin),
):
    async with _get_db().admin_store() as store:
        categories, total = await _get_categories().list_all(store, include_inactive)
        return CategoryListResponse(
            data=[CategoryResponse.model_validate(c) for c in categories],
            total=total,
        )


@router.get("/categories/{category_id}", response_model=CategoryResponse)
async def get_category(category_id: str, _=Depends(require_super_admin)):
    try:
        async with _get_db().admin_store() as store:
            category = await _get_categories().get_by_id(store, category_id)
            return CategoryResponse.model_validate(category)
    except StorefrontError as e:
        raise http_error(e)


@router.patch("/categories/{category_id}", response_model=CategoryResponse)
async def update_category(
    category_id: str, body: CategoryUpdate, _=Depends(require_super_admin)
):
    updates = body.model_dump(exclude_unset=True)
    try:
        async with _get_db().admin_store() as store:
            category = await _get_categories().update_category(store, category_id, **updates)
            return CategoryResponse.model_validate(category)
    except StorefrontError as e:
        raise http_error(e)


@router.delete("/categories/{category_id}", response_model=MessageResponse)
async def delete_category(category_id: str, _=Depends(require_super_admin)):
    try:
        async with _get_db().admin_store() as store:
            await _get_categories().delete_category(store, category_id)
    except StorefrontError as e:
        raise http_error(e)
    return MessageResponse(message="Category deleted successfully")
