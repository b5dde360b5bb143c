"""
Event API schemas.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Any, Literal
from uuid import UUID

from pydantic import BaseModel, Field

EventStatus = Literal["draft", "published", "completed", "archived"]


class EventCreate(BaseModel):
    name: str = ""
    slug: str = ""
    tagline: str | None = None
    description: str | None = None
    start_date: date | None = None
    end_date: date | None = None
    timezone: str | None = None
    venue_name: str | None = None
    venue_address: str | None = None
    city: str | None = None
    state: str | None = None
    country: str | None = None
    registration_url: str | None = None
    featured_image_url: str | None = None
    og_image_url: str | None = None
    logo_url: str | None = None
    status: EventStatus = "draft"


class EventUpdate(BaseModel):
    name: str | None = None
    slug: str | None = None
    tagline: str | None = None
    description: str | None = None
    extended_info: str | None = None
    start_date: date | None = None
    end_date: date | None = None
    timezone: str | None = None
    venue_name: str | None = None
    venue_address: str | None = None
    city: str | None = None
    state: str | None = None
    country: str | None = None
    registration_url: str | None = None
    featured_image_url: str | None = None
    og_image_url: str | None = None
    logo_url: str | None = None
    images: list[Any] | None = None
    landing_page_settings: dict[str, Any] | None = None
    section_colors: dict[str, Any] | None = None
    status: EventStatus | None = None


class EventDuplicate(BaseModel):
    newName: str = ""
    newSlug: str = ""


class EventCompanyLink(BaseModel):
    company_id: UUID
    role: str | None = None


class EventContactLink(BaseModel):
    contact_id: UUID
    role: str | None = None


class TicketTierCreate(BaseModel):
    name: str = ""
    price: Decimal | None = Field(default=None, ge=0)
    original_price: Decimal | None = Field(default=None, ge=0)
    currency: str = Field(default="USD", min_length=3, max_length=3)
    description: str | None = None
    purchase_url: str | None = None
    is_featured: bool = False
    position: int | None = Field(default=None, ge=0)


class TicketTierUpdate(BaseModel):
    name: str | None = None
    price: Decimal | None = Field(default=None, ge=0)
    original_price: Decimal | None = Field(default=None, ge=0)
    currency: str | None = Field(default=None, min_length=3, max_length=3)
    description: str | None = None
    purchase_url: str | None = None
    is_featured: bool | None = None
    position: int | None = Field(default=None, ge=0)


class TierFeatureCreate(BaseModel):
    feature_text: str = ""
    position: int | None = Field(default=None, ge=0)


class TierFeatureUpdate(BaseModel):
    feature_text: str | None = None
    position: int | None = Field(default=None, ge=0)
