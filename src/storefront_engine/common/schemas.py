"""Shared Pydantic schemas for Storefront-Engine."""

import math

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    status: str = "ok"
    version: str = "0.1.0"
    service: str = "storefront-engine"


class MessageResponse(BaseModel):
    message: str


class PaginationParams(BaseModel):
    page: int = Field(default=1, ge=1)
    limit: int = Field(default=50, ge=1, le=100)

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    total_pages: int

    @classmethod
    def build(cls, params: PaginationParams, total: int) -> "Pagination":
        return cls(
            page=params.page,
            limit=params.limit,
            total=total,
            total_pages=math.ceil(total / params.limit) if total else 0,
        )
