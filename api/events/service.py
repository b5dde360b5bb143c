"""
Event business logic.
"""

from __future__ import annotations

import logging
from uuid import UUID

import asyncpg
from fastapi import HTTPException

from . import repository, schemas

logger = logging.getLogger(__name__)

DEFAULT_LANDING_PAGE_SETTINGS = {
    "show_speakers": True,
    "show_sponsors": True,
    "show_tickets": True,
    "show_venue": True,
}


async def _require_event(event_id: UUID) -> dict:
    row = await repository.get_event(event_id)
    if row is None:
        raise HTTPException(status_code=404, detail="Event not found")
    return row


async def create_event(payload: schemas.EventCreate) -> dict:
    name = payload.name.strip()
    slug = payload.slug.strip()
    if not name or not slug:
        raise HTTPException(status_code=400, detail="Name and slug are required")

    fields = payload.model_dump()
    fields.update(name=name, slug=slug, landing_page_settings=dict(DEFAULT_LANDING_PAGE_SETTINGS))
    try:
        row = await repository.insert_event(fields)
    except asyncpg.UniqueViolationError as exc:
        raise HTTPException(status_code=409, detail="An event with this slug already exists") from exc
    logger.info("event_created id=%s slug=%s", row["id"], slug)
    return row


async def get_event(event_id: UUID) -> dict:
    row = await _require_event(event_id)
    row["companies"] = await repository.list_event_companies(event_id)
    row["contacts"] = await repository.list_event_contacts(event_id)
    row["ticket_tiers"] = await repository.list_ticket_tiers(event_id)
    return row


async def update_event(event_id: UUID, payload: schemas.EventUpdate) -> dict:
    try:
        row = await repository.update_event(event_id, payload.model_dump(exclude_unset=True))
    except asyncpg.UniqueViolationError as exc:
        raise HTTPException(status_code=409, detail="An event with this slug already exists") from exc
    if row is None:
        raise HTTPException(status_code=404, detail="Event not found")
    return row


async def delete_event(event_id: UUID) -> dict:
    if not await repository.delete_event(event_id):
        raise HTTPException(status_code=404, detail="Event not found")
    return {"success": True}


async def duplicate_event(event_id: UUID, payload: schemas.EventDuplicate) -> dict:
    name = payload.newName.strip()
    slug = payload.newSlug.strip()
    if not name or not slug:
        raise HTTPException(status_code=400, detail="newSlug and newName are required")
    if await repository.slug_exists(slug):
        raise HTTPException(status_code=400, detail="An event with this slug already exists")

    source = await _require_event(event_id)
    event = await repository.copy_event(source, name=name, slug=slug)
    logger.info("event_duplicated source_id=%s new_id=%s", event_id, event["id"])
    return event


async def add_company(event_id: UUID, payload: schemas.EventCompanyLink) -> dict:
    await _require_event(event_id)
    try:
        return await repository.link_company(event_id, payload.company_id, payload.role)
    except asyncpg.ForeignKeyViolationError as exc:
        raise HTTPException(status_code=404, detail="Company not found") from exc


async def remove_company(event_id: UUID, company_id: UUID) -> dict:
    if not await repository.unlink_company(event_id, company_id):
        raise HTTPException(status_code=404, detail="Event company link not found")
    return {"success": True}


async def add_contact(event_id: UUID, payload: schemas.EventContactLink) -> dict:
    await _require_event(event_id)
    try:
        return await repository.link_contact(event_id, payload.contact_id, payload.role)
    except asyncpg.ForeignKeyViolationError as exc:
        raise HTTPException(status_code=404, detail="Contact not found") from exc


async def remove_contact(event_id: UUID, contact_id: UUID) -> dict:
    if not await repository.unlink_contact(event_id, contact_id):
        raise HTTPException(status_code=404, detail="Event contact link not found")
    return {"success": True}


# ---------------------------------------------------------------------------
# Ticket tiers
# ---------------------------------------------------------------------------


async def _require_tier(event_id: UUID, tier_id: UUID) -> dict:
    row = await repository.get_ticket_tier(event_id, tier_id)
    if row is None:
        raise HTTPException(status_code=404, detail="Ticket tier not found")
    return row


async def list_ticket_tiers(event_id: UUID) -> list[dict]:
    await _require_event(event_id)
    return await repository.list_ticket_tiers(event_id)


async def create_ticket_tier(event_id: UUID, payload: schemas.TicketTierCreate) -> dict:
    name = payload.name.strip()
    if not name or payload.price is None:
        raise HTTPException(status_code=400, detail="Name and price are required")
    await _require_event(event_id)

    fields = payload.model_dump()
    fields["name"] = name
    row = await repository.insert_ticket_tier(event_id, fields)
    logger.info("ticket_tier_created event_id=%s tier_id=%s", event_id, row["id"])
    return row


async def get_ticket_tier(event_id: UUID, tier_id: UUID) -> dict:
    return await _require_tier(event_id, tier_id)


async def update_ticket_tier(event_id: UUID, tier_id: UUID, payload: schemas.TicketTierUpdate) -> dict:
    fields = payload.model_dump(exclude_unset=True)
    if "name" in fields:
        fields["name"] = (fields["name"] or "").strip()
        if not fields["name"]:
            raise HTTPException(status_code=400, detail="Name cannot be empty")
    if "price" in fields and fields["price"] is None:
        raise HTTPException(status_code=400, detail="Price cannot be empty")
    if "currency" in fields and fields["currency"] is None:
        fields.pop("currency")

    row = await repository.update_ticket_tier(event_id, tier_id, fields)
    if row is None:
        raise HTTPException(status_code=404, detail="Ticket tier not found")
    return row


async def delete_ticket_tier(event_id: UUID, tier_id: UUID) -> dict:
    if not await repository.delete_ticket_tier(event_id, tier_id):
        raise HTTPException(status_code=404, detail="Ticket tier not found")
    return {"success": True}


async def create_tier_feature(event_id: UUID, tier_id: UUID, payload: schemas.TierFeatureCreate) -> dict:
    text = payload.feature_text.strip()
    if not text:
        raise HTTPException(status_code=400, detail="feature_text is required")
    await _require_tier(event_id, tier_id)
    return await repository.insert_tier_feature(tier_id, text, payload.position)


async def update_tier_feature(
    event_id: UUID,
    tier_id: UUID,
    feature_id: UUID,
    payload: schemas.TierFeatureUpdate,
) -> dict:
    fields = payload.model_dump(exclude_unset=True)
    if "feature_text" in fields:
        text = (fields.pop("feature_text") or "").strip()
        if not text:
            raise HTTPException(status_code=400, detail="feature_text cannot be empty")
        fields["feature"] = text
    await _require_tier(event_id, tier_id)

    row = await repository.update_tier_feature(tier_id, feature_id, fields)
    if row is None:
        raise HTTPException(status_code=404, detail="Feature not found")
    return row


async def delete_tier_feature(event_id: UUID, tier_id: UUID, feature_id: UUID) -> dict:
    await _require_tier(event_id, tier_id)
    if not await repository.delete_tier_feature(tier_id, feature_id):
        raise HTTPException(status_code=404, detail="Feature not found")
    return {"success": True}
