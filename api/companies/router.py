"""
Company dashboard API endpoints.
"""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, Query

from auth import dependencies as auth_dependencies

from . import repository, schemas, service

router = APIRouter(dependencies=[Depends(auth_dependencies.get_current_admin)])


@router.get("/companies")
async def list_companies(
    status: str | None = Query(default=None),
    category: str | None = Query(default=None),
    search: str | None = Query(default=None, max_length=200),
    sort: str = Query(default="created_at"),
    order: str = Query(default="desc"),
) -> list[dict]:
    return await service.list_companies(
        status=status,
        category=category,
        search=search,
        sort=sort,
        order=order,
    )


@router.post("/companies", status_code=201)
async def create_company(payload: schemas.CompanyCreate) -> dict:
    return await service.create_company(payload)


@router.patch("/companies/bulk")
async def bulk_update_companies(payload: schemas.CompanyBulkUpdate) -> dict:
    return await service.bulk_update_companies(payload)


@router.get("/companies/categories")
async def list_categories() -> list[dict]:
    return await repository.list_categories()


@router.post("/companies/categories", status_code=201)
async def create_category(payload: schemas.CategoryCreate) -> dict:
    return await service.create_category(payload)


@router.delete("/companies/categories/{category_id}")
async def delete_category(category_id: UUID) -> dict:
    return await service.delete_category(category_id)


@router.get("/companies/{company_id}")
async def get_company(company_id: UUID) -> dict:
    return await service.get_company(company_id)


@router.patch("/companies/{company_id}")
async def update_company(company_id: UUID, payload: schemas.CompanyUpdate) -> dict:
    return await service.update_company(company_id, payload)


@router.delete("/companies/{company_id}")
async def delete_company(company_id: UUID) -> dict:
    return await service.delete_company(company_id)
