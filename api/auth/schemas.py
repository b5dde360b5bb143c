"""
Auth API schemas (request/response models).
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class LoginRequest(BaseModel):
    email: str = Field(..., min_length=3, max_length=320)
    password: str = Field(..., min_length=1, max_length=128)


class AdminResponse(BaseModel):
    id: int
    email: str
    name: str | None = None
    is_active: bool
    created_at: datetime


class LoginResponse(BaseModel):
    admin: AdminResponse
    access_token: str
    token_type: str = "bearer"
