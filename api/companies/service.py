"""
Company business logic.
"""

from __future__ import annotations

import logging
from uuid import UUID

import asyncpg
from fastapi import HTTPException

from core import text

from . import repository, schemas

logger = logging.getLogger(__name__)


def _normalize_fields(fields: dict) -> dict:
    """Derive the bare domain from the website unless one was supplied."""
    if fields.get("website") and not fields.get("domain"):
        fields["domain"] = text.extract_domain(fields["website"])
    return fields


async def list_companies(
    *,
    status: str | None,
    category: str | None,
    search: str | None,
    sort: str,
    order: str,
) -> list[dict]:
    return await repository.list_companies(
        status=status,
        category=category,
        search=(search or "").strip() or None,
        sort=sort,
        order=order,
    )


async def create_company(payload: schemas.CompanyCreate) -> dict:
    name = (payload.name or "").strip()
    if not name:
        raise HTTPException(status_code=400, detail="Company name is required")

    fields = _normalize_fields(payload.model_dump())
    fields["name"] = name
    fields["slug"] = text.slugify(name)
    fields["status"] = payload.status or "researching"

    try:
        row = await repository.insert_company(fields)
    except asyncpg.UniqueViolationError as exc:
        raise HTTPException(status_code=409, detail="A company with this slug already exists") from exc
    logger.info("company_created id=%s slug=%s", row["id"], row["slug"])
    return row


async def get_company(company_id: UUID) -> dict:
    row = await repository.get_company(company_id)
    if row is None:
        raise HTTPException(status_code=404, detail="Company not found")
    row["contacts"] = await repository.list_company_contacts(company_id)
    row["articles"] = await repository.list_company_articles(company_id)
    return row


async def update_company(company_id: UUID, payload: schemas.CompanyUpdate) -> dict:
    fields = _normalize_fields(payload.model_dump(exclude_unset=True))
    try:
        row = await repository.update_company(company_id, fields)
    except asyncpg.UniqueViolationError as exc:
        raise HTTPException(status_code=409, detail="A company with this slug already exists") from exc
    if row is None:
        raise HTTPException(status_code=404, detail="Company not found")
    return row


async def bulk_update_companies(payload: schemas.CompanyBulkUpdate) -> dict:
    if not payload.ids:
        raise HTTPException(status_code=400, detail="ids are required")
    fields = payload.fields.model_dump(exclude_unset=True)
    # Slug and domain are per-company; a bulk edit never touches them.
    fields.pop("slug", None)
    fields.pop("domain", None)
    fields.pop("website", None)
    if not fields:
        raise HTTPException(status_code=400, detail="No valid fields to update")
    updated = await repository.bulk_update_companies(payload.ids, fields)
    return {"updated": updated}


async def delete_company(company_id: UUID) -> dict:
    if not await repository.delete_company(company_id):
        raise HTTPException(status_code=404, detail="Company not found")
    return {"success": True}


async def create_category(payload: schemas.CategoryCreate) -> dict:
    name = payload.name.strip()
    if not name:
        raise HTTPException(status_code=400, detail="Category name is required")
    try:
        return await repository.insert_category(name, text.slugify(name))
    except asyncpg.UniqueViolationError as exc:
        raise HTTPException(status_code=409, detail="Category already exists") from exc


async def delete_category(category_id: UUID) -> dict:
    if not await repository.delete_category(category_id):
        raise HTTPException(status_code=404, detail="Category not found")
    return {"success": True}
