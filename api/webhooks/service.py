"""
Email delivery webhook handling.

Resend posts {"type": "email.<event>", "data": {"email_id": ...}}; the
email id matches `campaign_recipients.resend_id`.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any

from campaigns import repository as campaigns_repository

logger = logging.getLogger(__name__)


def recipient_update_for_event(event_type: str, data: dict[str, Any], *, now: datetime | None = None) -> dict[str, Any] | None:
    """
    Column updates for one webhook event; None for events we only acknowledge.
    """
    now = now or datetime.now(timezone.utc)
    kind = event_type.removeprefix("email.")
    if kind == "delivered":
        return {"status": "delivered", "delivered_at": now}
    if kind == "opened":
        return {"status": "opened", "opened_at": now}
    if kind == "clicked":
        return {"status": "clicked", "clicked_at": now}
    if kind == "bounced":
        bounce_type = (data.get("bounce") or {}).get("type") or data.get("bounce_type")
        return {"status": "bounced", "error": f"Bounced: {bounce_type}" if bounce_type else "Email bounced"}
    if kind == "complained":
        return {"status": "failed", "error": "Spam complaint received"}
    return None


async def handle_email_event(event_type: str, data: dict[str, Any]) -> dict:
    email_id = data.get("email_id")
    if not email_id:
        logger.info("resend_webhook_no_email_id type=%s", event_type)
        return {"received": True}

    update = recipient_update_for_event(event_type, data)
    if update is None:
        logger.info("resend_webhook_ignored type=%s email_id=%s", event_type, email_id)
        return {"received": True}

    row = await campaigns_repository.update_recipient_by_resend_id(str(email_id), update)
    if row is None:
        logger.info("resend_webhook_unknown_email type=%s email_id=%s", event_type, email_id)
    else:
        logger.info("resend_webhook_applied type=%s recipient_id=%s status=%s", event_type, row["id"], row["status"])
    return {"received": True}
