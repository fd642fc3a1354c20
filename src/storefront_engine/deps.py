"""Dependency injection singletons for Storefront-Engine."""

from storefront_engine.admin.service import AdminService
from storefront_engine.catalog.service import ProductService
from storefront_engine.categories.service import CategoryService
from storefront_engine.common.config import get_settings
from storefront_engine.common.database import DatabaseManager
from storefront_engine.identity.provider import (
    IdentityProvider,
    LocalIdentityProvider,
    RemoteIdentityProvider,
)
from storefront_engine.identity.service import IdentityService
from storefront_engine.tenants.service import TenantService

_db: DatabaseManager | None = None
_identity_provider: IdentityProvider | None = None
_identity: IdentityService | None = None
_tenants: TenantService | None = None
_categories: CategoryService | None = None
_products: ProductService | None = None
_admin: AdminService | None = None


def get_db() -> DatabaseManager:
    global _db
    if _db is None:
        _db = DatabaseManager(get_settings())
    return _db


def get_identity_provider() -> IdentityProvider:
    global _identity_provider
    if _identity_provider is None:
        settings = get_settings()
        if settings.identity_backend == "remote":
            _identity_provider = RemoteIdentityProvider(
                settings.identity_url,
                settings.identity_anon_key,
                service_key=settings.identity_service_key,
                timeout=settings.identity_timeout,
            )
        else:
            _identity_provider = LocalIdentityProvider(settings, get_db())
    return _identity_provider


def get_tenant_service() -> TenantService:
    global _tenants
    if _tenants is None:
        _tenants = TenantService()
    return _tenants


def get_category_service() -> CategoryService:
    global _categories
    if _categories is None:
        _categories = CategoryService()
    return _categories


def get_product_service() -> ProductService:
    global _products
    if _products is None:
        _products = ProductService(get_settings(), get_category_service())
    return _products


def get_identity_service() -> IdentityService:
    global _identity
    if _identity is None:
        _identity = IdentityService(get_identity_provider(), get_tenant_service())
    return _identity


def get_admin_service() -> AdminService:
    global _admin
    if _admin is None:
        _admin = AdminService(get_tenant_service(), get_identity_provider())
    return _admin


def reset_singletons() -> None:
    """Reset all singletons (for testing)."""
    global _db, _identity_provider, _identity, _tenants, _categories, _products, _admin
    _db = None
    _identity_provider = None
    _identity = None
    _tenants = None
    _categories = None
    _products = None
    _admin = None
