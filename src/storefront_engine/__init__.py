"""Storefront-Engine: multi-tenant storefront and schema-validated catalog backend."""

from storefront_engine.catalog.attributes import (
    AttributeDefinition,
    merge_attributes,
    validate_attributes,
)
from storefront_engine.client import StorefrontClient

__all__ = [
    "AttributeDefinition",
    "StorefrontClient",
    "merge_attributes",
    "validate_attributes",
]
__version__ = "0.1.0"
