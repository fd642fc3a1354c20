"""Storefront API router — machine-to-machine reads authenticated by tenant API key."""

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel

from storefront_engine.auth.guards import GuardContext
from storefront_engine.catalog.schemas import ProductListResponse, ProductResponse
from storefront_engine.common.exceptions import StorefrontError
from storefront_engine.common.schemas import Pagination, PaginationParams
from storefront_engine.common.security import http_error, require_api_key

router = APIRouter(prefix="/storefront", tags=["storefront"])


class StorefrontInfo(BaseModel):
    id: str
    business_name: str
    subdomain: str
    category_id: str | None = None


def _get_service():
    from storefront_engine.deps import get_product_service
    return get_product_service()


def _get_db():
    from storefront_engine.deps import get_db
    return get_db()


@router.get("", response_model=StorefrontInfo)
async def get_storefront(ctx: GuardContext = Depends(require_api_key)):
    tenant = ctx.tenant
    return StorefrontInfo(
        id=tenant.id,
        business_name=tenant.business_name,
        subdomain=tenant.subdomain,
        category_id=tenant.category_id,
    )


@router.get("/products", response_model=ProductListResponse)
async def list_products(
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=100),
    ctx: GuardContext = Depends(require_api_key),
):
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


@router.get("/products/{product_id}", response_model=ProductResponse)
async def get_product(product_id: str, ctx: GuardContext = Depends(require_api_key)):
    svc = _get_service()
    db = _get_db()
    try:
        async with db.store() as store:
            product = await svc.get_product(store, ctx.tenant.id, product_id)
            return ProductResponse.model_validate(product)
    except StorefrontError as e:
        raise http_error(e)
