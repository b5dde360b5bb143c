"""
Contact and outreach-log persistence.
"""

from __future__ import annotations

from datetime import date
from typing import Any
from uuid import UUID

from core import db

UPDATABLE_COLUMNS = (
    "company_id",
    "first_name",
    "last_name",
    "email",
    "email_domain",
    "phone",
    "title",
    "linkedin_url",
    "source",
    "outreach_status",
    "show_on_articles",
    "notes",
    "avatar_url",
    "is_featured",
    "slug",
    "bio",
    "address1",
    "address2",
    "city",
    "state",
    "zip",
    "country",
)

_CONTACT_SELECT = """
    SELECT ct.*, co.name AS company_name, co.slug AS company_slug
    FROM contacts ct
    LEFT JOIN companies co ON co.id = ct.company_id
"""


async def list_contacts(
    *,
    company_id: UUID | None = None,
    outreach_status: str | None = None,
    search: str | None = None,
) -> list[dict]:
    where: list[str] = []
    args: list[Any] = []
    if company_id is not None:
        args.append(company_id)
        where.append(f"ct.company_id = ${len(args)}")
    if outreach_status:
        args.append(outreach_status)
        where.append(f"ct.outreach_status = ${len(args)}")
    if search:
        args.append(f"%{search}%")
        n = len(args)
        where.append(f"(ct.first_name ILIKE ${n} OR ct.last_name ILIKE ${n} OR ct.email ILIKE ${n})")
    where_sql = f"WHERE {' AND '.join(where)}" if where else ""
    return await db.fetch_all(
        f"""
        {_CONTACT_SELECT}
        {where_sql}
        ORDER BY ct.created_at DESC
        """,
        *args,
    )


async def search_contacts(query: str, *, limit: int = 20) -> list[dict]:
    return await db.fetch_all(
        """
        SELECT ct.id, ct.first_name, ct.last_name, ct.email, ct.title, co.name AS company_name
        FROM contacts ct
        LEFT JOIN companies co ON co.id = ct.company_id
        WHERE (ct.first_name || ' ' || ct.last_name) ILIKE $1
           OR ct.email ILIKE $1
        ORDER BY ct.last_name, ct.first_name
        LIMIT $2
        """,
        f"%{query}%",
        limit,
    )


async def list_unassigned_contacts() -> list[dict]:
    return await db.fetch_all(
        """
        SELECT *
        FROM contacts
        WHERE company_id IS NULL
        ORDER BY created_at DESC
        """
    )


async def insert_contact(fields: dict[str, Any]) -> dict:
    cols = [c for c in UPDATABLE_COLUMNS if c in fields]
    placeholders = ", ".join(f"${i}" for i in range(1, len(cols) + 1))
    row = await db.fetch_one(
        f"""
        INSERT INTO contacts ({", ".join(cols)})
        VALUES ({placeholders})
        RETURNING *
        """,
        *[fields[c] for c in cols],
    )
    if row is None:
        raise RuntimeError("Failed to create contact.")
    return row


async def get_contact(contact_id: UUID) -> dict | None:
    return await db.fetch_one(f"{_CONTACT_SELECT} WHERE ct.id = $1", contact_id)


async def list_outreach_log(contact_id: UUID) -> list[dict]:
    return await db.fetch_all(
        """
        SELECT id, contact_id, campaign_id, date, type, notes, response_received, created_at
        FROM outreach_log
        WHERE contact_id = $1
        ORDER BY date DESC, created_at DESC
        """,
        contact_id,
    )


async def update_contact(contact_id: UUID, fields: dict[str, Any]) -> dict | None:
    set_sql, args = db.update_set_clause(fields, UPDATABLE_COLUMNS, start=2)
    if not set_sql:
        return await db.fetch_one("SELECT * FROM contacts WHERE id = $1", contact_id)
    return await db.fetch_one(
        f"""
        UPDATE contacts
        SET {set_sql}, updated_at = now()
        WHERE id = $1
        RETURNING *
        """,
        contact_id,
        *args,
    )


async def delete_contact(contact_id: UUID) -> bool:
    row = await db.fetch_one("DELETE FROM contacts WHERE id = $1 RETURNING id", contact_id)
    return row is not None


async def insert_outreach_log(
    *,
    contact_id: UUID,
    log_date: date,
    log_type: str,
    notes: str | None,
    response_received: bool,
) -> dict:
    row = await db.fetch_one(
        """
        INSERT INTO outreach_log (contact_id, date, type, notes, response_received)
        VALUES ($1, $2, $3, $4, $5)
        RETURNING id, contact_id, campaign_id, date, type, notes, response_received, created_at
        """,
        contact_id,
        log_date,
        log_type,
        notes,
        response_received,
    )
    if row is None:
        raise RuntimeError("Failed to insert outreach log entry.")
    return row
