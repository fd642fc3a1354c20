"""Product API router: owner-scoped, schema-validated catalog writes.

The tenant comes from the ownership guard: ``tenant_id`` in the path,
query string or JSON body, or the ``x-tenant-id`` header.
"""

from fastapi import APIRouter, Depends, Query

from storefront_engine.auth.guards import GuardContext
from storefront_engine.catalog.schemas import (
    ProductCreate,
    ProductListResponse,
    ProductResponse,
    ProductUpdate,
)
from storefront_engine.common.exceptions import StorefrontError
from storefront_engine.common.schemas import Pagination, PaginationParams
from storefront_engine.common.security import http_error, require_tenant_owner

router = APIRouter(tags=["products"])


def _get_service():
    from storefront_engine.deps import get_product_service
    return get_product_service()


def _get_db():
    from storefront_engine.deps import get_db
    return get_db()


async def _create(body: ProductCreate, ctx: GuardContext) -> ProductResponse:
    svc = _get_service()
    db = _get_db()
    try:
        async with db.store() as store:
            product = await svc.create_product(
                store,
                ctx.tenant.id,
                name=body.name,
                description=body.description,
                base_price=body.base_price,
                stock_level=body.stock_level,
                attributes=body.attributes,
                image_urls=body.image_urls,
            )
            return ProductResponse.model_validate(product)
    except StorefrontError as e:
        raise http_error(e)


async def _list(ctx: GuardContext, page: int, limit: int) -> ProductListResponse:
    svc = _get_service()
    db = _get_db()
    params = PaginationParams(page=page, limit=limit)
    async with db.store() as store:
        products, total = await svc.list_products(
            store, ctx.tenant.id, offset=params.offset, limit=params.limit
        )
        return ProductListResponse(
            data=[ProductResponse.model_validate(p) for p in products],
            pagination=Pagination.build(params, total),
        )


@router.post("/products", response_model=ProductResponse, status_code=201)
async def create_product(body: ProductCreate, ctx: GuardContext = Depends(require_tenant_owner)):
    return await _create(body, ctx)


@router.post(
    "/tenants/{tenant_id}/products", response_model=ProductResponse, status_code=201
)
async def create_tenant_product(
    body: ProductCreate, ctx: GuardContext = Depends(require_tenant_owner)
):
    return await _create(body, ctx)


@router.get("/products", response_model=ProductListResponse)
async def list_products(
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=100),
    ctx: GuardContext = Depends(require_tenant_owner),
):
    return await _list(ctx, page, limit)


@router.get("/tenants/{tenant_id}/products", response_model=ProductListResponse)
async def list_tenant_products(
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=100),
    ctx: GuardContext = Depends(require_tenant_owner),
):
    return await _list(ctx, page, limit)


@router.get("/products/{product_id}", response_model=ProductResponse)
async def get_product(product_id: str, ctx: GuardContext = Depends(require_tenant_owner)):
    svc = _get_service()
    db = _get_db()
    try:
        async with db.store() as store:
            product = await svc.get_product(store, ctx.tenant.id, product_id)
            return ProductResponse.model_validate(product)
    except StorefrontError as e:
        raise http_error(e)


@router.patch("/products/{product_id}", response_model=ProductResponse)
async def update_product(
    product_id: str, body: ProductUpdate, ctx: GuardContext = Depends(require_tenant_owner)
):
    svc = _get_service()
    db = _get_db()
    try:
        async with db.store() as store:
            product = await svc.update_product(
                store, ctx.tenant.id, product_id,
                **body.model_dump(exclude_unset=True, exclude={"tenant_id"}),
            )
            return ProductResponse.model_validate(product)
    except StorefrontError as e:
        raise http_error(e)


@router.delete("/products/{product_id}", status_code=204)
async def delete_product(product_id: str, ctx: GuardContext = Depends(require_tenant_owner)):
    svc = _get_service()
    db = _get_db()
    try:
        async with db.store() as store:
            await svc.delete_product(store, ctx.tenant.id, product_id)
    except StorefrontError as e:
        raise http_error(e)
