"""
Article business logic.

Scope:
- article CRUD with slug generation
- manual enhancements (videos, papers, books, images, links)
- AI-assisted discovery of related content
"""

from __future__ import annotations

import logging
import time
from datetime import datetime, timezone
from typing import Any
from uuid import UUID

from fastapi import HTTPException

from core import anthropic, google_books, serper, text, youtube

from . import ai, repository, schemas

logger = logging.getLogger(__name__)

ENHANCEMENT_TYPES = ("youtube", "scholar", "book", "image", "link")


async def _require_article(article_id: UUID) -> dict:
    row = await repository.get_article(article_id)
    if row is None:
        raise HTTPException(status_code=404, detail="Article not found")
    return row


async def create_article(payload: schemas.ArticleCreate) -> dict:
    title = payload.title.strip()
    if payload.company_id is None or not title:
        raise HTTPException(status_code=400, detail="Company and title are required")

    slug = (payload.slug or "").strip() or text.slugify(title)
    if await repository.slug_exists(slug):
        slug = f"{slug}-{int(time.time() * 1000)}"

    fields = payload.model_dump()
    fields.update(title=title, slug=slug)
    row = await repository.insert_article(fields)
    logger.info("article_created id=%s slug=%s", row["id"], slug)
    return row


async def get_article(article_id: UUID) -> dict:
    row = await _require_article(article_id)
    row["enhancements"] = await repository.list_enhancements(article_id)
    return row


async def update_article(article_id: UUID, payload: schemas.ArticleUpdate) -> dict:
    current = await _require_article(article_id)
    fields = payload.model_dump(exclude_unset=True)
    if fields.get("status") == "published" and not current.get("published_at"):
        fields["published_at"] = datetime.now(timezone.utc)
    row = await repository.update_article(article_id, fields)
    if row is None:
        raise HTTPException(status_code=404, detail="Article not found")
    return row


async def delete_article(article_id: UUID) -> dict:
    if not await repository.delete_article(article_id):
        raise HTTPException(status_code=404, detail="Article not found")
    return {"success": True}


# ---------------------------------------------------------------------------
# Enhancements
# ---------------------------------------------------------------------------


async def add_enhancement(article_id: UUID, payload: schemas.EnhancementCreate) -> dict:
    if payload.type not in ENHANCEMENT_TYPES:
        raise HTTPException(
            status_code=400,
            detail=f"Invalid enhancement type. Must be one of: {', '.join(ENHANCEMENT_TYPES)}",
        )
    await _require_article(article_id)

    metadata = dict(payload.metadata)
    embed_code = None
    if payload.type == "youtube":
        video_id = text.extract_youtube_id(payload.url)
        if video_id:
            metadata.setdefault("videoId", video_id)
            metadata.setdefault("thumbnail", f"https://img.youtube.com/vi/{video_id}/hqdefault.jpg")
            embed_code = f"{youtube.EMBED_URL}{video_id}"

    return await repository.insert_enhancement(
        article_id=article_id,
        enhancement_type=payload.type,
        title=payload.title,
        url=payload.url,
        embed_code=embed_code,
        metadata=metadata,
    )


async def delete_enhancement(enhancement_id: UUID) -> dict:
    if not await repository.delete_enhancement(enhancement_id):
        raise HTTPException(status_code=404, detail="Enhancement not found")
    return {"success": True}


# ---------------------------------------------------------------------------
# AI enhance
# ---------------------------------------------------------------------------


async def _find_videos(title: str, content: str, key_people: list[str]) -> list[dict[str, Any]]:
    queries = await ai.generate_search_queries(title, content, "youtube", key_people=key_people)
    seen: set[str] = set()
    videos: list[dict[str, Any]] = []
    for query in queries[:2]:
        for video in await youtube.search_videos(query, max_results=5, video_duration="medium"):
            if video["video_id"] not in seen:
                seen.add(video["video_id"])
                videos.append(video)
    return await ai.select_best_results(title, content, videos, max_results=4, result_type="videos")


async def _find_papers(title: str, content: str, key_people: list[str]) -> list[dict[str, Any]]:
    queries = await ai.generate_search_queries(title, content, "scholar", key_people=key_people)
    seen: set[str] = set()
    papers: list[dict[str, Any]] = []
    for query in queries[:2]:
        for paper in await serper.search_scholar(query, limit=5):
            if paper["url"] and paper["url"] not in seen:
                seen.add(paper["url"])
                papers.append(paper)
    return await ai.select_best_results(title, content, papers, max_results=3, result_type="research papers")


async def _find_books(title: str, content: str, key_people: list[str]) -> list[dict[str, Any]]:
    books: list[dict[str, Any]] = []
    seen: set[str] = set()
    for person in key_people[:2]:
        for book in await google_books.search_books_by_author(person, limit=3):
            if book["id"] not in seen:
                seen.add(book["id"])
                books.append(book)
    for query in (await ai.generate_search_queries(title, content, "books", key_people=key_people))[:2]:
        for book in await google_books.search_books(query, limit=5):
            if book["id"] not in seen:
                seen.add(book["id"])
                books.append(book)
    return await ai.select_best_results(title, content, books, max_results=3, result_type="books")


async def enhance_article(article_id: UUID) -> dict:
    """
    Discover related videos, papers and books and attach them.

    Each step is skipped when its client is not configured. Step failures are
    collected in `errors` rather than aborting the run.
    """
    if not anthropic.is_configured():
        raise HTTPException(status_code=500, detail="Anthropic API key not configured")

    article = await _require_article(article_id)
    title = article["title"]
    content = text.strip_html(article.get("content"))
    if not content:
        raise HTTPException(status_code=400, detail="Article has no content to analyze")

    result: dict[str, Any] = {"added": {"youtube": 0, "scholar": 0, "book": 0}, "errors": []}
    updates: dict[str, Any] = {"ai_enhanced": True}

    key_people = list(article.get("key_people") or [])
    if not key_people:
        try:
            key_people = await ai.extract_key_people(title, content)
            updates["key_people"] = key_people
        except anthropic.AnthropicError as exc:
            result["errors"].append(f"key_people: {exc}")
    result["key_people"] = key_people

    if not article.get("excerpt"):
        try:
            context = f"Company: {(article.get('company') or {}).get('name') or ''}\nKey people: {', '.join(key_people)}"
            updates["excerpt"] = await ai.generate_excerpt(title, content, context=context)
            result["excerpt"] = updates["excerpt"]
        except anthropic.AnthropicError as exc:
            result["errors"].append(f"excerpt: {exc}")

    steps = []
    if youtube.is_configured():
        steps.append(("youtube", _find_videos))
    if serper.is_configured():
        steps.append(("scholar", _find_papers))
    steps.append(("book", _find_books))

    for kind, finder in steps:
        try:
            found = await finder(title, content, key_people)
        except Exception as exc:
            logger.error("enhance_step_failed article_id=%s step=%s error=%s", article_id, kind, exc)
            result["errors"].append(f"{kind}: {exc}")
            continue
        for item in found:
            await repository.insert_enhancement(
                article_id=article_id,
                enhancement_type=kind,
                title=item.get("title"),
                url=item.get("url"),
                embed_code=item.get("embed_url"),
                metadata=item,
            )
            result["added"][kind] += 1

    await repository.update_article(article_id, updates)
    logger.info("article_enhanced id=%s added=%s errors=%s", article_id, result["added"], len(result["errors"]))
    return result
