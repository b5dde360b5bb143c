"""
Article and enhancement persistence.
"""

from __future__ import annotations

from typing import Any
from uuid import UUID

from core import db

UPDATABLE_COLUMNS = (
    "company_id",
    "title",
    "slug",
    "content",
    "excerpt",
    "featured_image_url",
    "status",
    "published_at",
    "key_people",
    "ai_enhanced",
)


async def list_articles(
    *,
    company_id: UUID | None = None,
    status: str | None = None,
    search: str | None = None,
) -> list[dict]:
    where: list[str] = []
    args: list[Any] = []
    if company_id is not None:
        args.append(company_id)
        where.append(f"a.company_id = ${len(args)}")
    if status:
        args.append(status)
        where.append(f"a.status = ${len(args)}")
    if search:
        args.append(f"%{search}%")
        where.append(f"a.title ILIKE ${len(args)}")
    where_sql = f"WHERE {' AND '.join(where)}" if where else ""
    return await db.fetch_all(
        f"""
        SELECT a.id, a.company_id, a.title, a.slug, a.excerpt, a.status, a.published_at,
               a.ai_enhanced, a.created_at, a.updated_at, co.name AS company_name
        FROM articles a
        LEFT JOIN companies co ON co.id = a.company_id
        {where_sql}
        ORDER BY a.created_at DESC
        """,
        *args,
    )


async def slug_exists(slug: str) -> bool:
    return bool(await db.fetch_val("SELECT EXISTS (SELECT 1 FROM articles WHERE slug = $1)", slug))


async def insert_article(fields: dict[str, Any]) -> dict:
    row = await db.fetch_one(
        """
        INSERT INTO articles (company_id, title, slug, content, excerpt, featured_image_url, status, published_at)
        VALUES ($1, $2, $3, $4, $5, $6, $7, CASE WHEN $7 = 'published' THEN now() END)
        RETURNING *
        """,
        fields["company_id"],
        fields["title"],
        fields["slug"],
        fields.get("content"),
        fields.get("excerpt"),
        fields.get("featured_image_url"),
        fields["status"],
    )
    if row is None:
        raise RuntimeError("Failed to create article.")
    return row


async def get_article(article_id: UUID) -> dict | None:
    return await db.fetch_one(
        """
        SELECT a.*,
               CASE WHEN co.id IS NULL THEN NULL ELSE json_build_object(
                 'id', co.id, 'name', co.name, 'slug', co.slug, 'website', co.website,
                 'description', co.description
               ) END AS company
        FROM articles a
        LEFT JOIN companies co ON co.id = a.company_id
        WHERE a.id = $1
        """,
        article_id,
    )


async def update_article(article_id: UUID, fields: dict[str, Any]) -> dict | None:
    set_sql, args = db.update_set_clause(fields, UPDATABLE_COLUMNS, start=2)
    if not set_sql:
        return await db.fetch_one("SELECT * FROM articles WHERE id = $1", article_id)
    return await db.fetch_one(
        f"""
        UPDATE articles
        SET {set_sql}, updated_at = now()
        WHERE id = $1
        RETURNING *
        """,
        article_id,
        *args,
    )


async def delete_article(article_id: UUID) -> bool:
    row = await db.fetch_one("DELETE FROM articles WHERE id = $1 RETURNING id", article_id)
    return row is not None


async def list_enhancements(article_id: UUID) -> list[dict]:
    return await db.fetch_all(
        """
        SELECT id, article_id, type, title, url, embed_code, metadata, position, created_at
        FROM article_enhancements
        WHERE article_id = $1
        ORDER BY position ASC, created_at ASC
        """,
        article_id,
    )


async def insert_enhancement(
    *,
    article_id: UUID,
    enhancement_type: str,
    title: str | None,
    url: str | None,
    embed_code: str | None,
    metadata: dict[str, Any],
) -> dict:
    # Position is computed in the INSERT so concurrent adds still append.
    row = await db.fetch_one(
        """
        INSERT INTO article_enhancements (article_id, type, title, url, embed_code, metadata, position)
        VALUES (
          $1, $2, $3, $4, $5, $6::jsonb,
          COALESCE((SELECT max(position) FROM article_enhancements WHERE article_id = $1), -1) + 1
        )
        RETURNING id, article_id, type, title, url, embed_code, metadata, position, created_at
        """,
        article_id,
        enhancement_type,
        title,
        url,
        embed_code,
        metadata,
    )
    if row is None:
        raise RuntimeError("Failed to insert enhancement.")
    return row


async def delete_enhancement(enhancement_id: UUID) -> bool:
    row = await db.fetch_one("DELETE FROM article_enhancements WHERE id = $1 RETURNING id", enhancement_id)
    return row is not None
