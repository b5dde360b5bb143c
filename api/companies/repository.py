"""
Company persistence helpers.
"""

from __future__ import annotations

from typing import Any
from uuid import UUID

from core import db

UPDATABLE_COLUMNS = (
    "name",
    "slug",
    "website",
    "domain",
    "description",
    "category",
    "status",
    "logo_url",
    "linkedin_url",
    "city",
    "state",
    "country",
    "is_draft",
    "is_featured",
    "notes",
)

SORT_COLUMNS = {"created_at", "updated_at", "name", "status"}


async def list_companies(
    *,
    status: str | None = None,
    category: str | None = None,
    search: str | None = None,
    sort: str = "created_at",
    order: str = "desc",
) -> list[dict]:
    where: list[str] = []
    args: list[Any] = []
    if status:
        args.append(status)
        where.append(f"status = ${len(args)}")
    if category:
        args.append(category)
        where.append(f"category = ${len(args)}")
    if search:
        args.append(f"%{search}%")
        where.append(f"name ILIKE ${len(args)}")

    sort_col = sort if sort in SORT_COLUMNS else "created_at"
    direction = "ASC" if (order or "").lower() == "asc" else "DESC"
    where_sql = f"WHERE {' AND '.join(where)}" if where else ""
    return await db.fetch_all(
        f"""
        SELECT *
        FROM companies
        {where_sql}
        ORDER BY {sort_col} {direction}
        """,
        *args,
    )


async def insert_company(fields: dict[str, Any]) -> dict:
    row = await db.fetch_one(
        """
        INSERT INTO companies (name, slug, website, domain, description, category, status,
                               logo_url, linkedin_url, city, state, country, is_draft)
        VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $9, $10, $11, $12, true)
        RETURNING *
        """,
        fields["name"],
        fields["slug"],
        fields.get("website"),
        fields.get("domain"),
        fields.get("description"),
        fields.get("category"),
        fields["status"],
        fields.get("logo_url"),
        fields.get("linkedin_url"),
        fields.get("city"),
        fields.get("state"),
        fields.get("country"),
    )
    if row is None:
        raise RuntimeError("Failed to create company.")
    return row


async def get_company(company_id: UUID) -> dict | None:
    return await db.fetch_one("SELECT * FROM companies WHERE id = $1", company_id)


async def list_company_contacts(company_id: UUID) -> list[dict]:
    return await db.fetch_all(
        """
        SELECT id, first_name, last_name, email, title, outreach_status, show_on_articles, slug
        FROM contacts
        WHERE company_id = $1
        ORDER BY last_name, first_name
        """,
        company_id,
    )


async def list_company_articles(company_id: UUID) -> list[dict]:
    return await db.fetch_all(
        """
        SELECT id, title, slug, status, published_at, created_at
        FROM articles
        WHERE company_id = $1
        ORDER BY created_at DESC
        """,
        company_id,
    )


async def update_company(company_id: UUID, fields: dict[str, Any]) -> dict | None:
    set_sql, args = db.update_set_clause(fields, UPDATABLE_COLUMNS, start=2)
    if not set_sql:
        return await get_company(company_id)
    return await db.fetch_one(
        f"""
        UPDATE companies
        SET {set_sql}, updated_at = now()
        WHERE id = $1
        RETURNING *
        """,
        company_id,
        *args,
    )


async def bulk_update_companies(company_ids: list[UUID], fields: dict[str, Any]) -> int:
    set_sql, args = db.update_set_clause(fields, UPDATABLE_COLUMNS, start=2)
    if not set_sql or not company_ids:
        return 0
    status = await db.execute(
        f"""
        UPDATE companies
        SET {set_sql}, updated_at = now()
        WHERE id = ANY($1::uuid[])
        """,
        company_ids,
        *args,
    )
    return db.affected_rows(status)


async def delete_company(company_id: UUID) -> bool:
    row = await db.fetch_one("DELETE FROM companies WHERE id = $1 RETURNING id", company_id)
    return row is not None


async def list_categories() -> list[dict]:
    return await db.fetch_all("SELECT id, name, slug, created_at FROM company_categories ORDER BY name")


async def insert_category(name: str, slug: str) -> dict:
    row = await db.fetch_one(
        """
        INSERT INTO company_categories (name, slug)
        VALUES ($1, $2)
        RETURNING id, name, slug, created_at
        """,
        name,
        slug,
    )
    if row is None:
        raise RuntimeError("Failed to create category.")
    return row


async def delete_category(category_id: UUID) -> bool:
    row = await db.fetch_one("DELETE FROM company_categories WHERE id = $1 RETURNING id", category_id)
    return row is not None
