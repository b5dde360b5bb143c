"""
Public directory endpoints (no authentication).
"""

from __future__ import annotations

from fastapi import APIRouter, Query

from . import service

router = APIRouter(prefix="/directory")


def _clean(value: str | None) -> str | None:
    return (value or "").strip() or None


@router.get("/companies")
async def list_companies(
    page: int = Query(default=1, ge=1),
    q: str | None = Query(default=None, max_length=200),
    category: str | None = Query(default=None),
) -> dict:
    return await service.companies(page=page, q=_clean(q), category=_clean(category))


@router.get("/companies/{slug}")
async def get_company(slug: str) -> dict:
    return await service.company(slug)


@router.get("/leaders")
async def list_leaders(
    page: int = Query(default=1, ge=1),
    q: str | None = Query(default=None, max_length=200),
    category: str | None = Query(default=None),
) -> dict:
    return await service.leaders(page=page, q=_clean(q), category=_clean(category))


@router.get("/leaders/{slug}")
async def get_leader(slug: str) -> dict:
    return await service.leader(slug)


@router.get("/articles")
async def list_articles(
    page: int = Query(default=1, ge=1),
    q: str | None = Query(default=None, max_length=200),
) -> dict:
    return await service.articles(page=page, q=_clean(q))


@router.get("/articles/{slug}")
async def get_article(slug: str) -> dict:
    return await service.article(slug)


@router.get("/news")
async def list_news(
    page: int = Query(default=1, ge=1),
    source: str | None = Query(default=None),
    edge: str | None = Query(default=None),
    system: str | None = Query(default=None),
    q: str | None = Query(default=None, max_length=200),
) -> dict:
    return await service.news(page=page, source=_clean(source), edge=_clean(edge), system=_clean(system), q=_clean(q))


@router.get("/news/months")
async def list_news_months() -> list[dict]:
    return await service.news_months()


@router.get("/news/months/{slug}")
async def get_news_month(slug: str) -> dict:
    return await service.news_month(slug)
