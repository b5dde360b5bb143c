"""
News article persistence.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any
from uuid import UUID

from core import db

LIST_COLUMNS = """
    id, title, url, source_name, published_at, author, summary, key_points,
    edge_significance, edge_categories, biological_systems, status, created_at
"""


async def existing_urls(urls: list[str]) -> set[str]:
    if not urls:
        return set()
    rows = await db.fetch_all("SELECT url FROM news_articles WHERE url = ANY($1::text[])", urls)
    return {row["url"] for row in rows}


async def insert_article(item: dict[str, Any], analysis: dict[str, Any], *, ai_model: str) -> dict:
    row = await db.fetch_one(
        """
        INSERT INTO news_articles (
          title, url, source_name, source_feed_url, published_at, author,
          summary, key_points, edge_significance, edge_categories, biological_systems,
          raw_content, status, ai_model, analyzed_at
        )
        VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $9, $10, $11, $12, 'published', $13, now())
        RETURNING id, title, url
        """,
        item["title"],
        item["url"],
        item["source_name"],
        item.get("source_feed_url"),
        item.get("published_at"),
        item.get("author"),
        analysis["summary"] or None,
        analysis["key_points"],
        analysis["edge_significance"] or None,
        analysis["edge_categories"],
        analysis["biological_systems"],
        item.get("content") or None,
        ai_model,
    )
    if row is None:
        raise RuntimeError("Failed to insert news article.")
    return row


async def list_news(
    *,
    status: str | None = None,
    source: str | None = None,
    search: str | None = None,
    limit: int = 50,
    offset: int = 0,
) -> list[dict]:
    where: list[str] = []
    args: list[Any] = []
    if status:
        args.append(status)
        where.append(f"status = ${len(args)}")
    if source:
        args.append(source)
        where.append(f"source_name = ${len(args)}")
    if search:
        args.append(f"%{search}%")
        where.append(f"title ILIKE ${len(args)}")
    args.extend([limit, offset])
    where_sql = f"WHERE {' AND '.join(where)}" if where else ""
    return await db.fetch_all(
        f"""
        SELECT {LIST_COLUMNS}
        FROM news_articles
        {where_sql}
        ORDER BY published_at DESC NULLS LAST, created_at DESC
        LIMIT ${len(args) - 1}
        OFFSET ${len(args)}
        """,
        *args,
    )


async def list_published_between(start: datetime, end: datetime) -> list[dict]:
    return await db.fetch_all(
        f"""
        SELECT {LIST_COLUMNS}
        FROM news_articles
        WHERE status = 'published'
          AND published_at >= $1
          AND published_at < $2
        ORDER BY published_at DESC
        """,
        start,
        end,
    )


async def update_status(article_id: UUID, status: str) -> dict | None:
    return await db.fetch_one(
        f"""
        UPDATE news_articles
        SET status = $2, updated_at = now()
        WHERE id = $1
        RETURNING {LIST_COLUMNS}
        """,
        article_id,
        status,
    )


async def delete_article(article_id: UUID) -> bool:
    row = await db.fetch_one("DELETE FROM news_articles WHERE id = $1 RETURNING id", article_id)
    return row is not None


async def delete_all() -> int:
    return db.affected_rows(await db.execute("DELETE FROM news_articles"))
