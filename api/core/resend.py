"""
Resend transactional email client.

Used endpoint:
- POST /emails -> {"id": "..."}
"""

from __future__ import annotations

from typing import Any

import httpx

from core import settings

API_BASE_URL = "https://api.resend.com"


class ResendError(RuntimeError):
    pass


def api_key() -> str:
    return settings.env_str("RESEND_API_KEY")


def is_configured() -> bool:
    return bool(api_key())


def webhook_secret() -> str:
    return settings.env_str("RESEND_WEBHOOK_SECRET")


async def send_email(
    *,
    sender: str,
    to: str,
    subject: str,
    html: str,
    reply_to: str | None = None,
    timeout_s: float = 30.0,
    transport: httpx.AsyncBaseTransport | None = None,
) -> str:
    """
    Send one email and return the provider message id.
    """
    key = api_key()
    if not key:
        raise ResendError("RESEND_API_KEY is not configured.")

    payload: dict[str, Any] = {"from": sender, "to": [to], "subject": subject, "html": html}
    if reply_to:
        payload["reply_to"] = reply_to

    async with httpx.AsyncClient(base_url=API_BASE_URL, timeout=timeout_s, transport=transport) as client:
        resp = await client.post("/emails", json=payload, headers={"Authorization": f"Bearer {key}"})

    if resp.status_code not in (200, 201):
        raise ResendError(f"Resend send failed: {resp.status_code} {resp.text[:500]}")

    message_id = resp.json().get("id")
    if not message_id:
        raise ResendError("Resend returned no message id.")
    return str(message_id)
