"""
Contact business logic, including the response-triggered suppression.
"""

from __future__ import annotations

import logging
from datetime import date
from uuid import UUID

from fastapi import HTTPException

from campaigns import suppression
from core import text

from . import repository, schemas

logger = logging.getLogger(__name__)


async def _require_contact(contact_id: UUID) -> dict:
    row = await repository.get_contact(contact_id)
    if row is None:
        raise HTTPException(status_code=404, detail="Contact not found")
    return row


async def create_contact(payload: schemas.ContactCreate) -> dict:
    first = payload.first_name.strip()
    last = payload.last_name.strip()
    if not first or not last:
        raise HTTPException(status_code=400, detail="First name and last name are required")

    fields = payload.model_dump()
    fields.update(
        first_name=first,
        last_name=last,
        slug=text.slugify(f"{first} {last}"),
        email_domain=text.email_domain(payload.email),
    )
    row = await repository.insert_contact(fields)
    logger.info("contact_created id=%s company_id=%s", row["id"], row.get("company_id"))
    return row


async def get_contact(contact_id: UUID) -> dict:
    row = await _require_contact(contact_id)
    company_name = row.pop("company_name", None)
    company_slug = row.pop("company_slug", None)
    row["company"] = (
        {"id": row["company_id"], "name": company_name, "slug": company_slug} if row.get("company_id") else None
    )
    row["outreach_log"] = await repository.list_outreach_log(contact_id)
    return row


async def update_contact(contact_id: UUID, payload: schemas.ContactUpdate) -> dict:
    before = await _require_contact(contact_id)
    fields = payload.model_dump(exclude_unset=True)
    if "email" in fields:
        fields["email_domain"] = text.email_domain(fields["email"])

    row = await repository.update_contact(contact_id, fields)
    if row is None:
        raise HTTPException(status_code=404, detail="Contact not found")

    if fields.get("outreach_status") == "responded" and before.get("outreach_status") != "responded":
        row["suppressed"] = await suppression.suppress_for_contact_response(row)
    return row


async def assign_contact(contact_id: UUID, payload: schemas.ContactAssign) -> dict:
    row = await repository.update_contact(contact_id, {"company_id": payload.company_id})
    if row is None:
        raise HTTPException(status_code=404, detail="Contact not found")
    return row


async def delete_contact(contact_id: UUID) -> dict:
    if not await repository.delete_contact(contact_id):
        raise HTTPException(status_code=404, detail="Contact not found")
    return {"success": True}


async def log_outreach(contact_id: UUID, payload: schemas.OutreachLogCreate) -> dict:
    contact = await _require_contact(contact_id)
    entry = await repository.insert_outreach_log(
        contact_id=contact_id,
        log_date=payload.date or date.today(),
        log_type=payload.type,
        notes=payload.notes,
        response_received=payload.response_received,
    )

    suppressed = 0
    if payload.response_received:
        if contact.get("outreach_status") != "responded":
            await repository.update_contact(contact_id, {"outreach_status": "responded"})
        suppressed = await suppression.suppress_for_contact_response(contact, responded_on=entry["date"])
    return {"entry": entry, "suppressed": suppressed}
