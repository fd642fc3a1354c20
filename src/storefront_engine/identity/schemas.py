"""Pydantic schemas for auth endpoints."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, EmailStr, Field


class SignUpRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=6)
    full_name: str = Field(..., min_length=1)
    business_name: str = Field(..., min_length=2)
    subdomain: str = Field(..., min_length=3, max_length=100)
    category_id: str = Field(..., min_length=1)


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class RefreshRequest(BaseModel):
    refresh_token: str = Field(..., min_length=1)


class UserSummary(BaseModel):
    id: str
    email: str
    full_name: Optional[str] = None


class RegisteredTenant(BaseModel):
    id: str
    business_name: str
    subdomain: str
    api_key: str
    category_id: Optional[str] = None


class SignUpResponse(BaseModel):
    message: str = "Registration successful! Please verify your email."
    user_id: str
    email: str
    tenant: RegisteredTenant


class SessionResponse(BaseModel):
    message: str = "Login successful"
    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    user: UserSummary


class ProfileResponse(BaseModel):
    id: str
    email: str
    full_name: str
    role: str
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
