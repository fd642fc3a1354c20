"""Pydantic schemas for admin endpoints."""

from datetime import datetime

from pydantic import BaseModel

from storefront_engine.auth.roles import Role
from storefront_engine.common.schemas import Pagination
from storefront_engine.identity.schemas import ProfileResponse
from storefront_engine.tenants.schemas import TenantResponse


class TenantStatusUpdate(BaseModel):
    is_active: bool


class UserRoleUpdate(BaseModel):
    role: Role


class AdminTenantList(BaseModel):
    data: list[TenantResponse]
    pagination: Pagination


class AdminUserList(BaseModel):
    data: list[ProfileResponse]
    pagination: Pagination


class UserStats(BaseModel):
    total: int
    recent: int


class TenantStats(BaseModel):
    total: int
    active: int
    inactive: int
    recent: int


class CountStats(BaseModel):
    total: int


class SystemStats(BaseModel):
    users: UserStats
    tenants: TenantStats
    categories: CountStats
    products: CountStats
    timestamp: datetime


class SystemHealth(BaseModel):
    status: str
    database: str
    auth: str
    timestamp: datetime
