"""
Campaign API schemas.
"""

from __future__ import annotations

from typing import Literal
from uuid import UUID

from pydantic import BaseModel, Field

CampaignStatus = Literal["draft", "generating", "ready", "sending", "paused", "completed"]
RecipientStatus = Literal[
    "pending",
    "generated",
    "approved",
    "queued",
    "sent",
    "delivered",
    "opened",
    "clicked",
    "bounced",
    "failed",
    "suppressed",
    "skipped",
]


class CampaignCreate(BaseModel):
    name: str = ""
    purpose: str = ""
    sender_profile_id: UUID | None = None
    reply_to: str | None = None
    tone: str | None = None
    prompt_context: str | None = None
    call_to_action: str | None = None
    must_include: str | None = None
    must_avoid: str | None = None
    max_words: int = Field(default=100, ge=20, le=1000)
    send_window_start: int = Field(default=9, ge=0, le=23)
    send_window_end: int = Field(default=17, ge=1, le=24)
    min_delay_seconds: int = Field(default=120, ge=0)
    max_delay_seconds: int = Field(default=300, ge=0)
    daily_send_limit: int = Field(default=50, ge=1)
    one_per_company: bool = True
    track_opens: bool = False
    track_clicks: bool = False
    company_cooldown_days: int = Field(default=30, ge=0)


class CampaignUpdate(BaseModel):
    name: str | None = None
    purpose: str | None = None
    status: CampaignStatus | None = None
    sender_profile_id: UUID | None = None
    reply_to: str | None = None
    tone: str | None = None
    prompt_context: str | None = None
    call_to_action: str | None = None
    must_include: str | None = None
    must_avoid: str | None = None
    max_words: int | None = Field(default=None, ge=20, le=1000)
    send_window_start: int | None = Field(default=None, ge=0, le=23)
    send_window_end: int | None = Field(default=None, ge=1, le=24)
    min_delay_seconds: int | None = Field(default=None, ge=0)
    max_delay_seconds: int | None = Field(default=None, ge=0)
    daily_send_limit: int | None = Field(default=None, ge=1)
    one_per_company: bool | None = None
    track_opens: bool | None = None
    track_clicks: bool | None = None
    company_cooldown_days: int | None = Field(default=None, ge=0)


class RecipientsAdd(BaseModel):
    contact_ids: list[UUID] = Field(default_factory=list)


class RecipientUpdate(BaseModel):
    subject: str | None = None
    body: str | None = None
    body_html: str | None = None
    status: RecipientStatus | None = None
    approved: bool | None = None
    suppression_reason: str | None = None


class RecipientsBulkStatus(BaseModel):
    ids: list[UUID] = Field(default_factory=list)
    status: RecipientStatus


class SuppressRequest(BaseModel):
    company_id: UUID | None = None
    contact_id: UUID | None = None


class SenderProfileCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    email: str = Field(..., min_length=3, max_length=320)
    title: str | None = None
    signature: str | None = None
    is_default: bool = False


class SenderProfileUpdate(BaseModel):
    name: str | None = None
    email: str | None = None
    title: str | None = None
    signature: str | None = None
    is_default: bool | None = None
