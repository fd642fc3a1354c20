"""Public category API router — active categories only, no authentication."""

from fastapi import APIRouter, HTTPException

from storefront_engine.categories.schemas import CategoryResponse
from storefront_engine.common.exceptions import NotFoundError

router = APIRouter(prefix="/categories", tags=["categories"])


def _get_service():
    from storefront_engine.deps import get_category_service
    return get_category_service()


def _get_db():
    from storefront_engine.deps import get_db
    return get_db()


@router.get("", response_model=list[CategoryResponse])
async def list_categories():
    svc = _get_service()
    db = _get_db()
    async with db.store() as store:
        categories = await svc.list_active(store)
        return [CategoryResponse.model_validate(c) for c in categories]


@router.get("/{category_id}", response_model=CategoryResponse)
async def get_category(category_id: str):
    svc = _get_service()
    db = _get_db()
    try:
        async with db.store() as store:
            category = await svc.get_active(store, category_id)
            return CategoryResponse.model_validate(category)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Category not found")
