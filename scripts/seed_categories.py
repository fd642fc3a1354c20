#!/usr/bin/env python3
"""Seed the database with a starter set of global categories.

Usage:
    python scripts/seed_categories.py
"""

import asyncio
import sys
from pathlib import Path

# Ensure project root is on path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "src"))

from storefront_engine.categories.models import CategoryModel
from storefront_engine.categories.service import CategoryService
from storefront_engine.common.config import get_settings
from storefront_engine.common.database import DatabaseManager

CATEGORY_SEEDS = [
    {
        "name": "Apparel",
        "sort_order": 1,
        "attribute_schema": [
            {"name": "size", "type": "string", "required": True},
            {"name": "color", "type": "string", "required": False},
            {"name": "material", "type": "string", "required": False},
        ],
    },
    {
        "name": "Electronics",
        "sort_order": 2,
        "attribute_schema": [
            {"name": "sku", "type": "string", "required": True},
            {"name": "warranty_months", "type": "number", "required": False},
            {"name": "refurbished", "type": "boolean", "required": False},
        ],
    },
    {
        "name": "Groceries",
        "sort_order": 3,
        "attribute_schema": [
            {"name": "weight_grams", "type": "number", "required": True},
            {"name": "organic", "type": "boolean", "required": False},
        ],
    },
]


async def seed_categories() -> None:
    db = DatabaseManager(get_settings())
    await db.init()
    await db.create_all()

    svc = CategoryService()

    async with db.admin_store() as store:
        for seed in CATEGORY_SEEDS:
            if await store.get(CategoryModel, name=seed["name"]):
                print(f"  [skip] {seed['name']} already exists")
                continue
            await svc.create_category(store, created_by=None, **seed)
            print(f"  [created] {seed['name']}")

    await db.close()
    print(f"\nDone. {len(CATEGORY_SEEDS)} categories checked.")


if __name__ == "__main__":
    asyncio.run(seed_categories())
