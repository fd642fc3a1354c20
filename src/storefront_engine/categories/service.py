"""Global category service and the attribute schema store."""

import logging
import re
from typing import Any

from storefront_engine.catalog.attributes import AttributeDefinition, load_schema
from storefront_engine.catalog.models import ProductModel
from storefront_engine.categories.models import CategoryModel
from storefront_engine.common.exceptions import ConflictError, NotFoundError, ValidationFailure
from storefront_engine.common.store import RowStore
from storefront_engine.tenants.models import TenantModel

logger = logging.getLogger(__name__)

_ORDER = (CategoryModel.sort_order.asc(), CategoryModel.name.asc())


def slugify(name: str) -> str:
    slug = re.sub(r"[^a-z0-9\s-]", "", name.lower())
    slug = re.sub(r"\s+", "-", slug)
    slug = re.sub(r"-+", "-", slug)
    return slug.strip("-")


class CategoryService:
    """Category CRUD. Reads are public; writes are super-admin only."""

    # ── Public ──

    async def list_active(self, store: RowStore) -> list[CategoryModel]:
        rows, _ = await store.list(
            CategoryModel, filters={"is_active": True}, order_by=_ORDER
        )
        return rows

    async def get_active(self, store: RowStore, category_id: str) -> CategoryModel:
        category = await store.get(CategoryModel, id=category_id)
        if category is None or not category.is_active:
            raise NotFoundError("Category not found")
        return category

    async def get_attribute_schema(
        self, store: RowStore, category_id: str
    ) -> list[AttributeDefinition]:
        """Ordered attribute definitions for a category, active or not."""
        category = await store.get(CategoryModel, id=category_id)
        if category is None:
            raise NotFoundError("Category not found")
        return load_schema(category.attribute_schema)

    # ── Admin ──

    async def _ensure_slug_available(
        self, store: RowStore, slug: str, exclude_id: str | None = None
    ) -> None:
        where = [CategoryModel.id != exclude_id] if exclude_id else []
        if await store.exists(CategoryModel, *where, slug=slug):
            raise ConflictError(f'Category with slug "{slug}" already exists')

    async def create_category(
        self,
        store: RowStore,
        name: str,
        created_by: str | None,
        slug: str | None = None,
        description: str | None = None,
        parent_id: str | None = None,
        image_url: str | None = None,
        is_active: bool = True,
        sort_order: int = 0,
        attribute_schema: list[dict[str, Any]] | None = None,
    ) -> CategoryModel:
        slug = slug or slugify(name)
        if not slug:
            raise ValidationFailure("Category slug cannot be empty")
        await self._ensure_slug_available(store, slug)
        if parent_id and await store.get(CategoryModel, id=parent_id) is None:
            raise ValidationFailure("Parent category not found")

        category = await store.insert(
            CategoryModel,
            name=name,
            slug=slug,
            description=description or None,
            parent_id=parent_id or None,
            image_url=image_url or None,
            is_active=is_active,
            sort_order=sort_order,
            attribute_schema=attribute_schema or [],
            created_by=created_by,
        )
        logger.info("Category created: %s (%s)", category.id, slug)
        return category

    async def list_all(
        self, store: RowStore, include_inactive: bool = False
    ) -> tuple[list[CategoryModel], int]:
        filters = {} if include_inactive else {"is_active": True}
        return await store.list(CategoryModel, filters=filters, order_by=_ORDER)

    async def get_by_id(self, store: RowStore, category_id: str) -> CategoryModel:
        category = await store.get(CategoryModel, id=category_id)
        if category is None:
            raise NotFoundError("Category not found")
        return category

    async def update_category(
        self, store: RowStore, category_id: str, **updates: Any
    ) -> CategoryModel:
        """Apply explicit updates. The parent link is fixed at creation."""
        category = await self.get_by_id(store, category_id)
        fields: dict[str, Any] = {}
        if updates.get("name"):
            fields["name"] = updates["name"]
        if updates.get("slug"):
            await self._ensure_slug_available(store, updates["slug"], exclude_id=category.id)
            fields["slug"] = updates["slug"]
        for key in ("description", "image_url"):
            if key in updates:
                fields[key] = updates[key] or None
        for key in ("is_active", "sort_order", "attribute_schema"):
            if updates.get(key) is not None:
                fields[key] = updates[key]
        if not fields:
            return category
        return await store.update(category, **fields)

    async def delete_category(self, store: RowStore, category_id: str) -> None:
        category = await self.get_by_id(store, category_id)
        if await store.exists(TenantModel, category_id=category.id):
            raise ConflictError(
                "Cannot delete category: it is assigned to one or more tenants"
            )
        # Products keep their creation-time category even after the tenant moves on.
        if await store.exists(ProductModel, category_id=category.id):
            raise ConflictError(
                "Cannot delete category: products are still bound to it"
            )
        if await store.exists(CategoryModel, parent_id=category.id):
            raise ConflictError("Cannot delete category: it has child categories")
        await store.delete(category)
        logger.info("Category deleted: %s", category_id)
