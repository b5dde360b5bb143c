"""
Contact dashboard API endpoints.
"""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, Query

from auth import dependencies as auth_dependencies

from . import repository, schemas, service

router = APIRouter(dependencies=[Depends(auth_dependencies.get_current_admin)])


@router.get("/contacts")
async def list_contacts(
    company_id: UUID | None = Query(default=None),
    outreach_status: str | None = Query(default=None),
    search: str | None = Query(default=None, max_length=200),
) -> list[dict]:
    return await repository.list_contacts(
        company_id=company_id,
        outreach_status=outreach_status,
        search=(search or "").strip() or None,
    )


@router.post("/contacts", status_code=201)
async def create_contact(payload: schemas.ContactCreate) -> dict:
    return await service.create_contact(payload)


@router.get("/contacts/search")
async def search_contacts(
    q: str = Query(default="", max_length=200),
    limit: int = Query(default=20, ge=1, le=100),
) -> list[dict]:
    if not q.strip():
        return []
    return await repository.search_contacts(q.strip(), limit=limit)


@router.get("/contacts/unassigned")
async def list_unassigned_contacts() -> list[dict]:
    return await repository.list_unassigned_contacts()


@router.get("/contacts/{contact_id}")
async def get_contact(contact_id: UUID) -> dict:
    return await service.get_contact(contact_id)


@router.patch("/contacts/{contact_id}")
async def update_contact(contact_id: UUID, payload: schemas.ContactUpdate) -> dict:
    return await service.update_contact(contact_id, payload)


@router.post("/contacts/{contact_id}/assign")
async def assign_contact(contact_id: UUID, payload: schemas.ContactAssign) -> dict:
    return await service.assign_contact(contact_id, payload)


@router.delete("/contacts/{contact_id}")
async def delete_contact(contact_id: UUID) -> dict:
    return await service.delete_contact(contact_id)


@router.post("/contacts/{contact_id}/outreach", status_code=201)
async def log_outreach(contact_id: UUID, payload: schemas.OutreachLogCreate) -> dict:
    return await service.log_outreach(contact_id, payload)
