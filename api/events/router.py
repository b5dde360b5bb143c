"""
Event dashboard API endpoints.
"""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends

from auth import dependencies as auth_dependencies

from . import repository, schemas, service

router = APIRouter(dependencies=[Depends(auth_dependencies.get_current_admin)])


@router.get("/events")
async def list_events() -> list[dict]:
    return await repository.list_events()


@router.post("/events", status_code=201)
async def create_event(payload: schemas.EventCreate) -> dict:
    return await service.create_event(payload)


@router.get("/events/{event_id}")
async def get_event(event_id: UUID) -> dict:
    return await service.get_event(event_id)


@router.patch("/events/{event_id}")
async def update_event(event_id: UUID, payload: schemas.EventUpdate) -> dict:
    return await service.update_event(event_id, payload)


@router.delete("/events/{event_id}")
async def delete_event(event_id: UUID) -> dict:
    return await service.delete_event(event_id)


@router.post("/events/{event_id}/duplicate", status_code=201)
async def duplicate_event(event_id: UUID, payload: schemas.EventDuplicate) -> dict:
    return await service.duplicate_event(event_id, payload)


@router.post("/events/{event_id}/companies", status_code=201)
async def add_company(event_id: UUID, payload: schemas.EventCompanyLink) -> dict:
    return await service.add_company(event_id, payload)


@router.delete("/events/{event_id}/companies/{company_id}")
async def remove_company(event_id: UUID, company_id: UUID) -> dict:
    return await service.remove_company(event_id, company_id)


@router.post("/events/{event_id}/contacts", status_code=201)
async def add_contact(event_id: UUID, payload: schemas.EventContactLink) -> dict:
    return await service.add_contact(event_id, payload)


@router.delete("/events/{event_id}/contacts/{contact_id}")
async def remove_contact(event_id: UUID, contact_id: UUID) -> dict:
    return await service.remove_contact(event_id, contact_id)


@router.get("/events/{event_id}/ticket-tiers")
async def list_ticket_tiers(event_id: UUID) -> list[dict]:
    return await service.list_ticket_tiers(event_id)


@router.post("/events/{event_id}/ticket-tiers", status_code=201)
async def create_ticket_tier(event_id: UUID, payload: schemas.TicketTierCreate) -> dict:
    return await service.create_ticket_tier(event_id, payload)


@router.get("/events/{event_id}/ticket-tiers/{tier_id}")
async def get_ticket_tier(event_id: UUID, tier_id: UUID) -> dict:
    return await service.get_ticket_tier(event_id, tier_id)


@router.patch("/events/{event_id}/ticket-tiers/{tier_id}")
async def update_ticket_tier(event_id: UUID, tier_id: UUID, payload: schemas.TicketTierUpdate) -> dict:
    return await service.update_ticket_tier(event_id, tier_id, payload)


@router.delete("/events/{event_id}/ticket-tiers/{tier_id}")
async def delete_ticket_tier(event_id: UUID, tier_id: UUID) -> dict:
    return await service.delete_ticket_tier(event_id, tier_id)


@router.post("/events/{event_id}/ticket-tiers/{tier_id}/features", status_code=201)
async def create_tier_feature(event_id: UUID, tier_id: UUID, payload: schemas.TierFeatureCreate) -> dict:
    return await service.create_tier_feature(event_id, tier_id, payload)


@router.patch("/events/{event_id}/ticket-tiers/{tier_id}/features/{feature_id}")
async def update_tier_feature(
    event_id: UUID,
    tier_id: UUID,
    feature_id: UUID,
    payload: schemas.TierFeatureUpdate,
) -> dict:
    return await service.update_tier_feature(event_id, tier_id, feature_id, payload)


@router.delete("/events/{event_id}/ticket-tiers/{tier_id}/features/{feature_id}")
async def delete_tier_feature(event_id: UUID, tier_id: UUID, feature_id: UUID) -> dict:
    return await service.delete_tier_feature(event_id, tier_id, feature_id)
