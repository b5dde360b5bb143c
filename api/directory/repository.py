"""
Read-only queries for the public directory.

Every list query fetches one page; callers pass `limit` and `offset`.
"""

from __future__ import annotations

from typing import Any

from core import db


async def list_companies(*, search: str | None, category: str | None, limit: int, offset: int) -> list[dict]:
    where = ["is_draft = false"]
    args: list[Any] = []
    if search:
        args.append(f"%{search}%")
        where.append(f"(name ILIKE ${len(args)} OR description ILIKE ${len(args)})")
    if category:
        args.append(category)
        where.append(f"category = ${len(args)}")
    args.extend([limit, offset])
    return await db.fetch_all(
        f"""
        SELECT id, name, slug, website, description, logo_url, category, city, state, country, is_featured
        FROM companies
        WHERE {' AND '.join(where)}
        ORDER BY name ASC
        LIMIT ${len(args) - 1} OFFSET ${len(args)}
        """,
        *args,
    )


async def get_company_by_slug(slug: str) -> dict | None:
    return await db.fetch_one(
        """
        SELECT id, name, slug, website, description, logo_url, category, city, state, country, is_featured
        FROM companies
        WHERE slug = $1 AND is_draft = false
        """,
        slug,
    )


async def list_company_leaders(company_id: Any) -> list[dict]:
    return await db.fetch_all(
        """
        SELECT id, first_name, last_name, title, slug, avatar_url
        FROM contacts
        WHERE company_id = $1 AND show_on_articles = true
        ORDER BY last_name, first_name
        """,
        company_id,
    )


async def list_company_articles(company_id: Any) -> list[dict]:
    return await db.fetch_all(
        """
        SELECT id, title, slug, excerpt, featured_image_url, published_at
        FROM articles
        WHERE company_id = $1 AND status = 'published'
        ORDER BY published_at DESC NULLS LAST
        """,
        company_id,
    )


async def list_leaders(*, search: str | None, category: str | None, limit: int, offset: int) -> list[dict]:
    where = ["ct.show_on_articles = true", "(co.id IS NULL OR co.is_draft = false)"]
    args: list[Any] = []
    if search:
        args.append(f"%{search}%")
        n = len(args)
        where.append(f"((ct.first_name || ' ' || ct.last_name) ILIKE ${n} OR ct.title ILIKE ${n})")
    if category:
        args.append(category)
        where.append(f"co.category = ${len(args)}")
    args.extend([limit, offset])
    return await db.fetch_all(
        f"""
        SELECT ct.id, ct.first_name, ct.last_name, ct.title, ct.slug, ct.avatar_url, ct.bio, ct.is_featured,
               co.name AS company_name, co.slug AS company_slug
        FROM contacts ct
        LEFT JOIN companies co ON co.id = ct.company_id
        WHERE {' AND '.join(where)}
        ORDER BY ct.last_name ASC, ct.first_name ASC
        LIMIT ${len(args) - 1} OFFSET ${len(args)}
        """,
        *args,
    )


async def get_leader_by_slug(slug: str) -> dict | None:
    return await db.fetch_one(
        """
        SELECT ct.id, ct.first_name, ct.last_name, ct.title, ct.slug, ct.avatar_url, ct.bio, ct.linkedin_url,
               co.name AS company_name, co.slug AS company_slug
        FROM contacts ct
        LEFT JOIN companies co ON co.id = ct.company_id
        WHERE ct.slug = $1
          AND ct.show_on_articles = true
          AND (co.id IS NULL OR co.is_draft = false)
        """,
        slug,
    )


async def list_articles(*, search: str | None, limit: int, offset: int) -> list[dict]:
    where = ["a.status = 'published'"]
    args: list[Any] = []
    if search:
        args.append(f"%{search}%")
        where.append(f"(a.title ILIKE ${len(args)} OR a.excerpt ILIKE ${len(args)})")
    args.extend([limit, offset])
    return await db.fetch_all(
        f"""
        SELECT a.id, a.title, a.slug, a.excerpt, a.featured_image_url, a.published_at,
               co.name AS company_name, co.slug AS company_slug
        FROM articles a
        LEFT JOIN companies co ON co.id = a.company_id
        WHERE {' AND '.join(where)}
        ORDER BY a.published_at DESC NULLS LAST
        LIMIT ${len(args) - 1} OFFSET ${len(args)}
        """,
        *args,
    )


async def get_article_by_slug(slug: str) -> dict | None:
    return await db.fetch_one(
        """
        SELECT a.id, a.title, a.slug, a.content, a.excerpt, a.featured_image_url, a.published_at, a.key_people,
               co.name AS company_name, co.slug AS company_slug, co.website AS company_website
        FROM articles a
        LEFT JOIN companies co ON co.id = a.company_id
        WHERE a.slug = $1 AND a.status = 'published'
        """,
        slug,
    )


async def list_article_enhancements(article_id: Any) -> list[dict]:
    return await db.fetch_all(
        """
        SELECT type, title, url, embed_code, metadata, position
        FROM article_enhancements
        WHERE article_id = $1
        ORDER BY position ASC
        """,
        article_id,
    )


async def list_news(
    *,
    source: str | None,
    edge: str | None,
    system: str | None,
    search: str | None,
    limit: int,
    offset: int,
) -> list[dict]:
    where = ["status = 'published'"]
    args: list[Any] = []
    if source:
        args.append(source)
        where.append(f"source_name = ${len(args)}")
    if edge:
        args.append(edge)
        where.append(f"${len(args)} = ANY(edge_categories)")
    if system:
        args.append(system)
        where.append(f"${len(args)} = ANY(biological_systems)")
    if search:
        args.append(f"%{search}%")
        n = len(args)
        where.append(
            f"(title ILIKE ${n} OR summary ILIKE ${n} OR edge_significance ILIKE ${n} OR raw_content ILIKE ${n})"
        )
    args.extend([limit, offset])
    return await db.fetch_all(
        f"""
        SELECT id, title, url, source_name, published_at, author, summary, key_points,
               edge_significance, edge_categories, biological_systems
        FROM news_articles
        WHERE {' AND '.join(where)}
        ORDER BY published_at DESC NULLS LAST
        LIMIT ${len(args) - 1} OFFSET ${len(args)}
        """,
        *args,
    )


async def list_news_months() -> list[dict]:
    return await db.fetch_all(
        """
        SELECT date_trunc('month', published_at) AS month, count(*) AS count
        FROM news_articles
        WHERE status = 'published' AND published_at IS NOT NULL
        GROUP BY 1
        ORDER BY 1 DESC
        """
    )
