"""
Contact API schemas.
"""

from __future__ import annotations

import datetime as dt
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, Field

OutreachStatus = Literal["not_contacted", "contacted", "responded", "converted"]


class ContactCreate(BaseModel):
    first_name: str = ""
    last_name: str = ""
    company_id: UUID | None = None
    email: str | None = None
    phone: str | None = None
    title: str | None = None
    linkedin_url: str | None = None
    source: str | None = None
    outreach_status: OutreachStatus = "not_contacted"
    show_on_articles: bool = False
    notes: str | None = None
    avatar_url: str | None = None
    bio: str | None = None


class ContactUpdate(BaseModel):
    company_id: UUID | None = None
    first_name: str | None = None
    last_name: str | None = None
    email: str | None = None
    phone: str | None = None
    title: str | None = None
    linkedin_url: str | None = None
    source: str | None = None
    outreach_status: OutreachStatus | None = None
    show_on_articles: bool | None = None
    notes: str | None = None
    avatar_url: str | None = None
    is_featured: bool | None = None
    slug: str | None = None
    bio: str | None = None
    address1: str | None = None
    address2: str | None = None
    city: str | None = None
    state: str | None = None
    zip: str | None = None
    country: str | None = None


class ContactAssign(BaseModel):
    company_id: UUID | None = None


class OutreachLogCreate(BaseModel):
    date: dt.date | None = None
    type: str = Field(default="email", max_length=50)
    notes: str | None = None
    response_received: bool = False
