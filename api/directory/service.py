"""
Public directory pagination and detail lookups.
"""

from __future__ import annotations

from typing import Any

from fastapi import HTTPException

from news import months
from news import service as news_service

from . import repository

PAGE_SIZE = 12


def page_bounds(page: int) -> tuple[int, int]:
    page = max(int(page), 1)
    return PAGE_SIZE, (page - 1) * PAGE_SIZE


def paginate(items: list[dict[str, Any]]) -> dict[str, Any]:
    return {"items": items, "has_more": len(items) == PAGE_SIZE}


async def companies(*, page: int, q: str | None, category: str | None) -> dict:
    limit, offset = page_bounds(page)
    return paginate(await repository.list_companies(search=q, category=category, limit=limit, offset=offset))


async def leaders(*, page: int, q: str | None, category: str | None) -> dict:
    limit, offset = page_bounds(page)
    return paginate(await repository.list_leaders(search=q, category=category, limit=limit, offset=offset))


async def articles(*, page: int, q: str | None) -> dict:
    limit, offset = page_bounds(page)
    return paginate(await repository.list_articles(search=q, limit=limit, offset=offset))


async def news(*, page: int, source: str | None, edge: str | None, system: str | None, q: str | None) -> dict:
    limit, offset = page_bounds(page)
    items = await repository.list_news(
        source=source,
        edge=(edge or "").lower() or None,
        system=system,
        search=q,
        limit=limit,
        offset=offset,
    )
    return paginate(items)


async def news_months() -> list[dict]:
    rows = await repository.list_news_months()
    return [
        {"slug": months.month_slug(row["month"]), "label": months.month_label(row["month"]), "count": int(row["count"])}
        for row in rows
    ]


async def news_month(slug: str) -> dict:
    return await news_service.list_news_for_month(slug)


async def company(slug: str) -> dict:
    row = await repository.get_company_by_slug(slug)
    if row is None:
        raise HTTPException(status_code=404, detail="Company not found")
    row["leaders"] = await repository.list_company_leaders(row["id"])
    row["articles"] = await repository.list_company_articles(row["id"])
    return row


async def leader(slug: str) -> dict:
    row = await repository.get_leader_by_slug(slug)
    if row is None:
        raise HTTPException(status_code=404, detail="Leader not found")
    return row


async def article(slug: str) -> dict:
    row = await repository.get_article_by_slug(slug)
    if row is None:
        raise HTTPException(status_code=404, detail="Article not found")
    row["enhancements"] = await repository.list_article_enhancements(row["id"])
    return row
