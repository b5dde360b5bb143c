"""
Campaign dashboard API endpoints.
"""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, Query

from auth import dependencies as auth_dependencies

from . import repository, schemas, service

router = APIRouter(dependencies=[Depends(auth_dependencies.get_current_admin)])


@router.get("/campaigns")
async def list_campaigns(
    status: str | None = Query(default=None),
    search: str | None = Query(default=None, max_length=200),
) -> list[dict]:
    return await service.list_campaigns(status=status, search=search)


@router.post("/campaigns", status_code=201)
async def create_campaign(payload: schemas.CampaignCreate) -> dict:
    return await service.create_campaign(payload)


@router.post("/campaigns/suppress")
async def suppress(payload: schemas.SuppressRequest) -> dict:
    return await service.suppress(payload)


@router.get("/campaigns/sender-profiles")
async def list_sender_profiles() -> list[dict]:
    return await repository.list_sender_profiles()


@router.post("/campaigns/sender-profiles", status_code=201)
async def create_sender_profile(payload: schemas.SenderProfileCreate) -> dict:
    return await service.create_sender_profile(payload)


@router.patch("/campaigns/sender-profiles/{profile_id}")
async def update_sender_profile(profile_id: UUID, payload: schemas.SenderProfileUpdate) -> dict:
    return await service.update_sender_profile(profile_id, payload)


@router.delete("/campaigns/sender-profiles/{profile_id}")
async def delete_sender_profile(profile_id: UUID) -> dict:
    return await service.delete_sender_profile(profile_id)


@router.patch("/campaigns/recipients/bulk")
async def bulk_update_recipients(payload: schemas.RecipientsBulkStatus) -> dict:
    return await service.bulk_update_recipients(payload)


@router.get("/campaigns/{campaign_id}")
async def get_campaign(campaign_id: UUID) -> dict:
    return await service.get_campaign(campaign_id)


@router.patch("/campaigns/{campaign_id}")
async def update_campaign(campaign_id: UUID, payload: schemas.CampaignUpdate) -> dict:
    return await service.update_campaign(campaign_id, payload)


@router.delete("/campaigns/{campaign_id}")
async def delete_campaign(campaign_id: UUID) -> dict:
    return await service.delete_campaign(campaign_id)


@router.get("/campaigns/{campaign_id}/available-contacts")
async def available_contacts(
    campaign_id: UUID,
    search: str | None = Query(default=None, max_length=200),
    company_id: UUID | None = Query(default=None),
    category: str | None = Query(default=None),
    event_id: UUID | None = Query(default=None),
    status: str | None = Query(default=None),
    title_search: str | None = Query(default=None, max_length=200),
    has_email: bool = Query(default=True),
    not_contacted_days: int | None = Query(default=None, ge=1),
) -> dict:
    return await service.available_contacts(
        campaign_id,
        search=search,
        company_id=company_id,
        category=category,
        event_id=event_id,
        status=status,
        title_search=title_search,
        has_email=has_email,
        not_contacted_days=not_contacted_days,
    )


@router.get("/campaigns/{campaign_id}/recipients")
async def list_recipients(campaign_id: UUID, status: str | None = Query(default=None)) -> list[dict]:
    return await service.list_recipients(campaign_id, status=status)


@router.post("/campaigns/{campaign_id}/recipients", status_code=201)
async def add_recipients(campaign_id: UUID, payload: schemas.RecipientsAdd) -> dict:
    return await service.add_recipients(campaign_id, payload)


@router.get("/campaigns/{campaign_id}/recipients/{recipient_id}")
async def get_recipient(campaign_id: UUID, recipient_id: UUID) -> dict:
    return await service.get_recipient(campaign_id, recipient_id)


@router.patch("/campaigns/{campaign_id}/recipients/{recipient_id}")
async def update_recipient(campaign_id: UUID, recipient_id: UUID, payload: schemas.RecipientUpdate) -> dict:
    return await service.update_recipient(campaign_id, recipient_id, payload)


@router.delete("/campaigns/{campaign_id}/recipients/{recipient_id}")
async def delete_recipient(campaign_id: UUID, recipient_id: UUID) -> dict:
    return await service.delete_recipient(campaign_id, recipient_id)


@router.post("/campaigns/{campaign_id}/recipients/{recipient_id}/regenerate")
async def regenerate_recipient(campaign_id: UUID, recipient_id: UUID) -> dict:
    return await service.regenerate_recipient(campaign_id, recipient_id)


@router.post("/campaigns/{campaign_id}/generate")
async def generate_emails(campaign_id: UUID) -> dict:
    return await service.generate_emails(campaign_id)


@router.post("/campaigns/{campaign_id}/send")
async def send_next(campaign_id: UUID) -> dict:
    return await service.send_next(campaign_id)
