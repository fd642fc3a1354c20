"""Pydantic schemas for product endpoints."""

from datetime import datetime
from typing import Optional, Union

from pydantic import BaseModel, Field, StrictBool, StrictFloat, StrictInt, StrictStr

from storefront_engine.common.schemas import Pagination

# Strict types keep JSON true/1/"1" distinct so the schema check sees them as sent.
AttributeValue = Union[StrictBool, StrictInt, StrictFloat, StrictStr, None]


class ProductCreate(BaseModel):
    name: str = Field(..., min_length=1)
    description: Optional[str] = None
    base_price: float = Field(..., ge=0)
    stock_level: int = Field(..., ge=0)
    attributes: dict[str, AttributeValue] = {}
    image_urls: list[str] = []
    tenant_id: Optional[str] = None


class ProductUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    base_price: Optional[float] = Field(None, ge=0)
    stock_level: Optional[int] = Field(None, ge=0)
    attributes: Optional[dict[str, AttributeValue]] = None
    image_urls: Optional[list[str]] = None
    tenant_id: Optional[str] = None


class ProductResponse(BaseModel):
    id: str
    tenant_id: str
    category_id: str
    name: str
    description: Optional[str] = None
    base_price: float
    stock_level: int
    attributes: dict[str, AttributeValue]
    image_urls: list[str]
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class ProductListResponse(BaseModel):
    data: list[ProductResponse]
    pagination: Pagination
