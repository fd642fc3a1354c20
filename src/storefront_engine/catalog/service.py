"""Product catalog service: schema-validated product writes scoped to a tenant."""

import logging
from typing import Any

from storefront_engine.catalog.attributes import merge_attributes, validate_attributes
from storefront_engine.catalog.models import ProductModel
from storefront_engine.categories.service import CategoryService
from storefront_engine.common.config import StorefrontSettings
from storefront_engine.common.exceptions import NotFoundError, ValidationFailure
from storefront_engine.common.store import RowStore
from storefront_engine.tenants.models import TenantModel

logger = logging.getLogger(__name__)

_UPDATABLE = ("name", "description", "base_price", "stock_level", "image_urls")


class ProductService:
    """Product CRUD. Every lookup is filtered by the owning tenant."""

    def __init__(self, settings: StorefrontSettings, category_service: CategoryService):
        self.settings = settings
        self.categories = category_service

    async def create_product(
        self,
        store: RowStore,
        tenant_id: str,
        name: str,
        base_price: float,
        stock_level: int,
        attributes: dict[str, Any] | None = None,
        description: str | None = None,
        image_urls: list[str] | None = None,
    ) -> ProductModel:
        tenant = await store.get(TenantModel, id=tenant_id)
        if tenant is None:
            raise NotFoundError("Tenant not found")
        if not tenant.category_id:
            raise ValidationFailure("Tenant does not have a category assigned")

        # Schema fetch and validation finish before the single insert.
        attributes = attributes or {}
        schema = await self.categories.get_attribute_schema(store, tenant.category_id)
        validate_attributes(schema, attributes, strict=self.settings.strict_attributes)

        product = await store.insert(
            ProductModel,
            tenant_id=tenant.id,
            category_id=tenant.category_id,
            name=name,
            description=description,
            base_price=base_price,
            stock_level=stock_level,
            attributes=attributes,
            image_urls=image_urls or [],
        )
        logger.info("Product created: %s (tenant %s)", product.id, tenant.id)
        return product

    async def list_products(
        self, store: RowStore, tenant_id: str, offset: int = 0, limit: int | None = None
    ) -> tuple[list[ProductModel], int]:
        return await store.list(
            ProductModel,
            filters={"tenant_id": tenant_id},
            order_by=(ProductModel.created_at.desc(),),
            offset=offset,
            limit=limit,
        )

    async def get_product(
        self, store: RowStore, tenant_id: str, product_id: str
    ) -> ProductModel:
        product = await store.get(ProductModel, id=product_id, tenant_id=tenant_id)
        if product is None:
            raise NotFoundError("Product not found")
        return product

    async def update_product(
        self, store: RowStore, tenant_id: str, product_id: str, **updates: Any
    ) -> ProductModel:
        """Apply updates; incoming attributes are merged onto the stored map.

        The merged map is validated against the schema of the product's own
        category, not the tenant's current one.
        """
        product = await self.get_product(store, tenant_id, product_id)
        fields = {k: updates[k] for k in _UPDATABLE if updates.get(k) is not None}

        incoming = updates.get("attributes")
        if incoming is not None:
            merged = merge_attributes(product.attributes, incoming)
            schema = await self.categories.get_attribute_schema(store, product.category_id)
            validate_attributes(schema, merged, strict=self.settings.strict_attributes)
            fields["attributes"] = merged

        if not fields:
            return product
        return await store.update(product, **fields)

    async def delete_product(self, store: RowStore, tenant_id: str, product_id: str) -> None:
        product = await self.get_product(store, tenant_id, product_id)
        await store.delete(product)
        logger.info("Product deleted: %s (tenant %s)", product_id, tenant_id)
