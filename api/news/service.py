"""
News ingestion pipeline and dashboard operations.

Ingestion flow:
1) fetch all curated feeds concurrently
2) drop items whose URL is already stored
3) newest first, capped per run
4) AI summary + EDGE classification per item
5) insert as published

Progress is reported as a stream of event dicts; the router serializes them
as newline-delimited JSON.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, AsyncIterator
from uuid import UUID

import asyncpg
from fastapi import HTTPException

from core import anthropic, settings

from . import analysis, feeds, months, repository

logger = logging.getLogger(__name__)

NEWS_STATUSES = ("draft", "published", "hidden")
MAX_REPORTED_ERRORS = 20

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def select_new_items(items: list[dict[str, Any]], known_urls: set[str], *, limit: int) -> list[dict[str, Any]]:
    """
    Unseen items, newest first (undated last), at most `limit`.
    """
    seen: set[str] = set(known_urls)
    fresh: list[dict[str, Any]] = []
    for item in items:
        if item["url"] in seen:
            continue
        seen.add(item["url"])
        fresh.append(item)
    fresh.sort(key=lambda i: i.get("published_at") or _EPOCH, reverse=True)
    return fresh[:limit]


async def ingest_news() -> AsyncIterator[dict[str, Any]]:
    """
    Run one ingestion pass, yielding progress events.
    """
    try:
        yield {"type": "status", "message": "Fetching RSS feeds..."}
        items = await feeds.fetch_all_feeds()
        yield {"type": "status", "message": f"Found {len(items)} feed items. Checking for duplicates..."}

        known = await repository.existing_urls([i["url"] for i in items])
        limit = settings.news_max_articles_per_run()
        unseen_total = len({i["url"] for i in items} - known)
        to_process = select_new_items(items, known, limit=limit)
        yield {
            "type": "status",
            "message": f"{unseen_total} new articles, processing {len(to_process)} this run.",
        }

        ai_model = anthropic.resolve_model("fast")
        ingested = 0
        duplicates = 0
        errors: list[str] = []
        for index, item in enumerate(to_process, start=1):
            yield {
                "type": "progress",
                "current": index,
                "total": len(to_process),
                "title": item["title"],
                "source": item["source_name"],
            }
            try:
                result = await analysis.analyze_news_article(item["title"], item["url"], item["content"], model="fast")
                await repository.insert_article(item, result, ai_model=ai_model)
            except asyncpg.UniqueViolationError:
                duplicates += 1
                yield {"type": "skip", "title": item["title"], "reason": "duplicate"}
                continue
            except Exception as exc:
                message = f"{item['title'][:80]}: {exc}"
                logger.error("news_ingest_item_failed url=%s error=%s", item["url"], exc)
                errors.append(message)
                yield {"type": "error", "title": item["title"], "message": str(exc)}
                continue
            ingested += 1
            yield {"type": "ingested", "title": item["title"], "source": item["source_name"]}

        logger.info(
            "news_ingest_done ingested=%s skipped=%s duplicates=%s errors=%s remaining=%s",
            ingested,
            len(known),
            duplicates,
            len(errors),
            max(unseen_total - len(to_process), 0),
        )
        yield {
            "type": "done",
            "ingested": ingested,
            "skipped": len(known),
            "duplicates": duplicates,
            "remaining": max(unseen_total - len(to_process), 0),
            "total_feed_items": len(items),
            "errors": errors[:MAX_REPORTED_ERRORS],
        }
    except Exception as exc:
        logger.error("news_ingest_fatal error=%s", exc, exc_info=True)
        yield {"type": "fatal", "message": str(exc)}


def require_configured() -> None:
    if not anthropic.is_configured():
        raise HTTPException(status_code=500, detail="Anthropic API key not configured")


async def update_news(article_id: UUID, status: str | None) -> dict:
    if status not in NEWS_STATUSES:
        raise HTTPException(status_code=400, detail="No valid fields to update")
    row = await repository.update_status(article_id, status)
    if row is None:
        raise HTTPException(status_code=404, detail="News article not found")
    return row


async def delete_news(article_id: UUID) -> dict:
    if not await repository.delete_article(article_id):
        raise HTTPException(status_code=404, detail="News article not found")
    return {"success": True}


async def clear_news() -> dict:
    deleted = await repository.delete_all()
    logger.info("news_cleared deleted=%s", deleted)
    return {"deleted": deleted}


async def list_news_for_month(slug: str) -> dict:
    month = months.parse_month_slug(slug)
    if month is None:
        raise HTTPException(status_code=404, detail="Month not found")
    items = await repository.list_published_between(month["start"], month["end"])
    return {"month": month["slug"], "label": month["label"], "items": items}
