"""
Article API schemas.
"""

from __future__ import annotations

from typing import Any, Literal
from uuid import UUID

from pydantic import BaseModel, Field

ArticleStatus = Literal["draft", "review", "published"]
EnhancementType = Literal["youtube", "scholar", "book", "image", "link"]


class ArticleCreate(BaseModel):
    company_id: UUID | None = None
    title: str = ""
    slug: str | None = None
    content: str | None = None
    excerpt: str | None = None
    featured_image_url: str | None = None
    status: ArticleStatus = "draft"


class ArticleUpdate(BaseModel):
    company_id: UUID | None = None
    title: str | None = None
    slug: str | None = None
    content: str | None = None
    excerpt: str | None = None
    featured_image_url: str | None = None
    status: ArticleStatus | None = None
    key_people: list[str] | None = None


class EnhancementCreate(BaseModel):
    type: str
    title: str | None = None
    url: str | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)
