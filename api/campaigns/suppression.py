"""
Response-driven suppression of pending campaign emails.

When anyone at a company responds, every approved/queued/generated email to
that company is cancelled so nobody else there gets a cold email.
"""

from __future__ import annotations

import logging
from datetime import date
from uuid import UUID

from . import repository

logger = logging.getLogger(__name__)


def build_reason(
    *,
    first_name: str | None,
    last_name: str | None,
    company_name: str | None,
    responded_on: date,
) -> str:
    who = " ".join(p for p in ((first_name or "").strip(), (last_name or "").strip()) if p) or "A contact"
    where = (company_name or "").strip() or "their company"
    return f"{who} at {where} responded on {responded_on.strftime('%b')} {responded_on.day}"


async def suppress_company_recipients(company_id: UUID, reason: str) -> int:
    """
    Suppress pending recipients at `company_id`; returns how many were updated.

    Database failures are logged and reported as zero suppressed.
    """
    try:
        count = await repository.suppress_company_recipients(company_id, reason)
    except Exception as exc:
        logger.error("suppress_recipients_failed company_id=%s error=%s", company_id, exc)
        return 0
    if count:
        logger.info("suppressed_recipients company_id=%s count=%s reason=%s", company_id, count, reason)
    return count


async def suppress_for_contact_response(contact: dict, *, responded_on: date | None = None) -> int:
    """Run the cascade for a contact row that just responded."""
    company_id = contact.get("company_id")
    if company_id is None:
        return 0
    company_name = contact.get("company_name")
    if company_name is None:
        try:
            company_name = await repository.get_company_name(company_id)
        except Exception as exc:
            logger.error("suppress_company_lookup_failed company_id=%s error=%s", company_id, exc)
    reason = build_reason(
        first_name=contact.get("first_name"),
        last_name=contact.get("last_name"),
        company_name=company_name,
        responded_on=responded_on or date.today(),
    )
    return await suppress_company_recipients(company_id, reason)
