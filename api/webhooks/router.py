"""
Inbound webhook endpoints.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Header, HTTPException

from core import resend

from . import service

router = APIRouter()


@router.post("/webhooks/resend")
async def resend_webhook(
    payload: dict[str, Any] = Body(default_factory=dict),
    svix_signature: str | None = Header(default=None),
) -> dict:
    # TODO: verify the svix HMAC over the raw body instead of only requiring the header.
    if resend.webhook_secret() and not svix_signature:
        raise HTTPException(status_code=401, detail="Missing webhook signature")

    event_type = payload.get("type")
    data = payload.get("data")
    if not event_type or not isinstance(data, dict):
        raise HTTPException(status_code=400, detail="Invalid webhook payload")
    return await service.handle_email_event(str(event_type), data)
