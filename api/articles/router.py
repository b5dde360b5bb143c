"""
Article dashboard API endpoints.
"""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, Query

from auth import dependencies as auth_dependencies

from . import repository, schemas, service

router = APIRouter(dependencies=[Depends(auth_dependencies.get_current_admin)])


@router.get("/articles")
async def list_articles(
    company_id: UUID | None = Query(default=None),
    status: str | None = Query(default=None),
    search: str | None = Query(default=None, max_length=200),
) -> list[dict]:
    return await repository.list_articles(
        company_id=company_id,
        status=status,
        search=(search or "").strip() or None,
    )


@router.post("/articles", status_code=201)
async def create_article(payload: schemas.ArticleCreate) -> dict:
    return await service.create_article(payload)


@router.get("/articles/{article_id}")
async def get_article(article_id: UUID) -> dict:
    return await service.get_article(article_id)


@router.patch("/articles/{article_id}")
async def update_article(article_id: UUID, payload: schemas.ArticleUpdate) -> dict:
    return await service.update_article(article_id, payload)


@router.delete("/articles/{article_id}")
async def delete_article(article_id: UUID) -> dict:
    return await service.delete_article(article_id)


@router.get("/articles/{article_id}/enhancements")
async def list_enhancements(article_id: UUID) -> list[dict]:
    return await repository.list_enhancements(article_id)


@router.post("/articles/{article_id}/enhancements", status_code=201)
async def add_enhancement(article_id: UUID, payload: schemas.EnhancementCreate) -> dict:
    return await service.add_enhancement(article_id, payload)


@router.delete("/articles/{article_id}/enhancements/{enhancement_id}")
async def delete_enhancement(article_id: UUID, enhancement_id: UUID) -> dict:
    return await service.delete_enhancement(enhancement_id)


@router.post("/articles/{article_id}/enhance")
async def enhance_article(article_id: UUID) -> dict:
    return await service.enhance_article(article_id)
