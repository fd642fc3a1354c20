"""Pydantic schemas for category endpoints."""

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator


class AttributeDefinitionSchema(BaseModel):
    name: str = Field(..., min_length=1)
    type: Literal["string", "number", "boolean"] = "string"
    required: bool = False


def _unique_names(schema: Optional[list[AttributeDefinitionSchema]]):
    if schema is not None:
        names = [item.name for item in schema]
        if len(names) != len(set(names)):
            raise ValueError("attribute names must be unique")
    return schema


class CategoryCreate(BaseModel):
    name: str = Field(..., min_length=2)
    slug: Optional[str] = Field(None, min_length=2)
    description: Optional[str] = None
    parent_id: Optional[str] = None
    image_url: Optional[str] = None
    is_active: bool = True
    sort_order: int = Field(default=0, ge=0)
    attribute_schema: list[AttributeDefinitionSchema] = []

    @field_validator("attribute_schema")
    @classmethod
    def check_attribute_names(cls, value):
        return _unique_names(value)


class CategoryUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=2)
    slug: Optional[str] = Field(None, min_length=2)
    description: Optional[str] = None
    image_url: Optional[str] = None
    is_active: Optional[bool] = None
    sort_order: Optional[int] = Field(None, ge=0)
    attribute_schema: Optional[list[AttributeDefinitionSchema]] = None

    @field_validator("attribute_schema")
    @classmethod
    def check_attribute_names(cls, value):
        return _unique_names(value)


class AttributeDefinitionOut(BaseModel):
    name: str
    type: str = "string"
    required: bool = False


class CategoryResponse(BaseModel):
    id: str
    name: str
    slug: str
    description: Optional[str] = None
    parent_id: Optional[str] = None
    image_url: Optional[str] = None
    is_active: bool
    sort_order: int
    attribute_schema: list[AttributeDefinitionOut]
    created_by: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class CategoryListResponse(BaseModel):
    data: list[CategoryResponse]
    total: int
