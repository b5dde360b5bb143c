"""
Company API schemas.
"""

from __future__ import annotations

from typing import Literal
from uuid import UUID

from pydantic import BaseModel, Field

CompanyStatus = Literal["researching", "article_draft", "published", "outreach", "engaged"]


class CompanyCreate(BaseModel):
    name: str = ""
    website: str | None = None
    domain: str | None = None
    description: str | None = None
    category: str | None = None
    status: CompanyStatus | None = None
    logo_url: str | None = None
    linkedin_url: str | None = None
    city: str | None = None
    state: str | None = None
    country: str | None = None


class CompanyUpdate(BaseModel):
    name: str | None = None
    slug: str | None = None
    website: str | None = None
    domain: str | None = None
    description: str | None = None
    category: str | None = None
    status: CompanyStatus | None = None
    logo_url: str | None = None
    linkedin_url: str | None = None
    city: str | None = None
    state: str | None = None
    country: str | None = None
    is_draft: bool | None = None
    is_featured: bool | None = None
    notes: str | None = None


class CompanyBulkUpdate(BaseModel):
    ids: list[UUID] = Field(default_factory=list)
    fields: CompanyUpdate


class CategoryCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
