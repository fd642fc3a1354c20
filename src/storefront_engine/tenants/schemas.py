"""Pydantic schemas for tenant endpoints."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class TenantCreate(BaseModel):
    business_name: str = Field(..., min_length=2, max_length=255)
    subdomain: str = Field(..., min_length=3, max_length=100)
    category_id: Optional[str] = None


class TenantUpdate(BaseModel):
    business_name: Optional[str] = Field(None, min_length=2, max_length=255)
    subdomain: Optional[str] = Field(None, min_length=3, max_length=100)
    category_id: Optional[str] = None


class TenantResponse(BaseModel):
    id: str
    owner_id: str
    business_name: str
    subdomain: str
    category_id: Optional[str] = None
    is_active: bool
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class TenantCreateResponse(TenantResponse):
    """Includes the raw API key — only returned once at creation time."""
    api_key: str


class ApiKeyResponse(BaseModel):
    api_key: str
