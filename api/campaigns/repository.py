"""
Campaign, recipient and sender-profile persistence.
"""

from __future__ import annotations

from typing import Any
from uuid import UUID

from core import db

CAMPAIGN_COLUMNS = (
    "name",
    "purpose",
    "status",
    "sender_profile_id",
    "reply_to",
    "tone",
    "prompt_context",
    "call_to_action",
    "must_include",
    "must_avoid",
    "max_words",
    "send_window_start",
    "send_window_end",
    "min_delay_seconds",
    "max_delay_seconds",
    "daily_send_limit",
    "one_per_company",
    "track_opens",
    "track_clicks",
    "company_cooldown_days",
)

RECIPIENT_COLUMNS = ("subject", "body", "body_html", "status", "approved", "suppression_reason")

SENDER_COLUMNS = ("name", "email", "title", "signature", "is_default")

SENT_STATUSES = ("sent", "delivered", "opened", "clicked")

# Recipients still waiting to go out; these are the ones a company response cancels.
SUPPRESSIBLE_STATUSES = ("approved", "queued", "generated")


# ---------------------------------------------------------------------------
# Campaigns
# ---------------------------------------------------------------------------


async def list_campaigns(*, status: str | None = None, search: str | None = None) -> list[dict]:
    where: list[str] = []
    args: list[Any] = []
    if status:
        args.append(status)
        where.append(f"c.status = ${len(args)}")
    if search:
        args.append(f"%{search}%")
        where.append(f"c.name ILIKE ${len(args)}")
    args.append(list(SENT_STATUSES))
    sent_idx = len(args)
    where_sql = f"WHERE {' AND '.join(where)}" if where else ""

    return await db.fetch_all(
        f"""
        SELECT
          c.*,
          COALESCE(counts.total, 0) AS total_recipients,
          COALESCE(counts.sent, 0) AS sent_count,
          COALESCE(counts.generated, 0) AS generated_count,
          COALESCE(counts.approved, 0) AS approved_count,
          COALESCE(counts.suppressed, 0) AS suppressed_count
        FROM campaigns c
        LEFT JOIN LATERAL (
          SELECT
            count(*) AS total,
            count(*) FILTER (WHERE r.status = ANY(${sent_idx}::text[])) AS sent,
            count(*) FILTER (WHERE r.status = 'generated') AS generated,
            count(*) FILTER (WHERE r.status = 'approved') AS approved,
            count(*) FILTER (WHERE r.status = 'suppressed') AS suppressed
          FROM campaign_recipients r
          WHERE r.campaign_id = c.id
        ) counts ON true
        {where_sql}
        ORDER BY c.created_at DESC
        """,
        *args,
    )


async def insert_campaign(fields: dict[str, Any]) -> dict:
    cols = [c for c in CAMPAIGN_COLUMNS if c in fields]
    placeholders = ", ".join(f"${i}" for i in range(1, len(cols) + 1))
    row = await db.fetch_one(
        f"""
        INSERT INTO campaigns ({", ".join(cols)})
        VALUES ({placeholders})
        RETURNING *
        """,
        *[fields[c] for c in cols],
    )
    if row is None:
        raise RuntimeError("Failed to create campaign.")
    return row


async def get_campaign(campaign_id: UUID) -> dict | None:
    return await db.fetch_one("SELECT * FROM campaigns WHERE id = $1", campaign_id)


async def update_campaign(campaign_id: UUID, fields: dict[str, Any]) -> dict | None:
    set_sql, args = db.update_set_clause(fields, CAMPAIGN_COLUMNS, start=2)
    if not set_sql:
        return await get_campaign(campaign_id)
    return await db.fetch_one(
        f"""
        UPDATE campaigns
        SET {set_sql}, updated_at = now()
        WHERE id = $1
        RETURNING *
        """,
        campaign_id,
        *args,
    )


async def set_campaign_status(campaign_id: UUID, status: str) -> None:
    await db.execute(
        "UPDATE campaigns SET status = $2, updated_at = now() WHERE id = $1",
        campaign_id,
        status,
    )


async def delete_campaign(campaign_id: UUID) -> bool:
    row = await db.fetch_one("DELETE FROM campaigns WHERE id = $1 RETURNING id", campaign_id)
    return row is not None


# ---------------------------------------------------------------------------
# Recipients
# ---------------------------------------------------------------------------

_RECIPIENT_SELECT = """
    SELECT
      r.*,
      json_build_object(
        'id', ct.id, 'first_name', ct.first_name, 'last_name', ct.last_name,
        'email', ct.email, 'title', ct.title, 'outreach_status', ct.outreach_status
      ) AS contact,
      CASE WHEN co.id IS NULL THEN NULL ELSE json_build_object(
        'id', co.id, 'name', co.name, 'domain', co.domain, 'website', co.website
      ) END AS company
    FROM campaign_recipients r
    JOIN contacts ct ON ct.id = r.contact_id
    LEFT JOIN companies co ON co.id = r.company_id
"""


async def list_recipients(campaign_id: UUID, *, status: str | None = None) -> list[dict]:
    args: list[Any] = [campaign_id]
    status_sql = ""
    if status:
        args.append(status)
        status_sql = "AND r.status = $2"
    return await db.fetch_all(
        f"""
        {_RECIPIENT_SELECT}
        WHERE r.campaign_id = $1 {status_sql}
        ORDER BY r.created_at ASC
        """,
        *args,
    )


async def get_recipient(campaign_id: UUID, recipient_id: UUID) -> dict | None:
    return await db.fetch_one(
        f"{_RECIPIENT_SELECT} WHERE r.id = $1 AND r.campaign_id = $2",
        recipient_id,
        campaign_id,
    )


async def contacts_with_email(contact_ids: list[UUID]) -> list[dict]:
    return await db.fetch_all(
        """
        SELECT id, company_id, email
        FROM contacts
        WHERE id = ANY($1::uuid[])
          AND email IS NOT NULL
          AND email <> ''
        """,
        contact_ids,
    )


async def available_contacts(
    *,
    search: str | None,
    company_id: UUID | None,
    category: str | None,
    event_id: UUID | None,
    outreach_status: str | None,
    title_search: str | None,
    has_email: bool,
    not_contacted_days: int | None,
    limit: int = 500,
) -> list[dict]:
    where: list[str] = []
    args: list[Any] = []

    def arg(value: Any) -> str:
        args.append(value)
        return f"${len(args)}"

    if search:
        p = arg(f"%{search}%")
        where.append(f"(ct.first_name ILIKE {p} OR ct.last_name ILIKE {p} OR ct.email ILIKE {p} OR co.name ILIKE {p})")
    if company_id is not None:
        where.append(f"ct.company_id = {arg(company_id)}")
    if category:
        where.append(f"co.category = {arg(category)}")
    if event_id is not None:
        where.append(f"ct.company_id IN (SELECT company_id FROM event_companies WHERE event_id = {arg(event_id)})")
    if outreach_status:
        where.append(f"ct.outreach_status = {arg(outreach_status)}")
    if title_search:
        where.append(f"ct.title ILIKE {arg(f'%{title_search}%')}")
    if has_email:
        where.append("ct.email IS NOT NULL AND ct.email <> ''")
    if not_contacted_days:
        where.append(
            "NOT EXISTS (SELECT 1 FROM outreach_log ol WHERE ol.contact_id = ct.id "
            f"AND ol.date >= current_date - {arg(int(not_contacted_days))}::int)"
        )

    where_sql = f"WHERE {' AND '.join(where)}" if where else ""
    return await db.fetch_all(
        f"""
        SELECT ct.id, ct.first_name, ct.last_name, ct.email, ct.title, ct.outreach_status, ct.company_id,
               CASE WHEN co.id IS NULL THEN NULL ELSE json_build_object('id', co.id, 'name', co.name) END AS company
        FROM contacts ct
        LEFT JOIN companies co ON co.id = ct.company_id
        {where_sql}
        ORDER BY ct.last_name, ct.first_name
        LIMIT {arg(limit)}
        """,
        *args,
    )


async def recent_company_sends(company_ids: list[UUID], *, within_days: int) -> list[dict]:
    """Latest send per company inside the cooldown window, with its campaign name."""
    if not company_ids:
        return []
    return await db.fetch_all(
        """
        SELECT DISTINCT ON (r.company_id)
               r.company_id, r.sent_at, c.name AS campaign_name
        FROM campaign_recipients r
        JOIN campaigns c ON c.id = r.campaign_id
        WHERE r.company_id = ANY($1::uuid[])
          AND r.sent_at IS NOT NULL
          AND r.sent_at >= now() - make_interval(days => $2)
        ORDER BY r.company_id, r.sent_at DESC
        """,
        company_ids,
        int(within_days),
    )


async def existing_recipient_contact_ids(campaign_id: UUID, contact_ids: list[UUID]) -> set[UUID]:
    rows = await db.fetch_all(
        """
        SELECT contact_id
        FROM campaign_recipients
        WHERE campaign_id = $1
          AND contact_id = ANY($2::uuid[])
        """,
        campaign_id,
        contact_ids,
    )
    return {row["contact_id"] for row in rows}


async def insert_recipients(campaign_id: UUID, contacts: list[dict]) -> list[dict]:
    if not contacts:
        return []
    return await db.fetch_all(
        """
        INSERT INTO campaign_recipients (campaign_id, contact_id, company_id, status)
        SELECT $1, x.contact_id, x.company_id, 'pending'
        FROM unnest($2::uuid[], $3::uuid[]) AS x(contact_id, company_id)
        RETURNING *
        """,
        campaign_id,
        [c["id"] for c in contacts],
        [c.get("company_id") for c in contacts],
    )


async def update_recipient(campaign_id: UUID, recipient_id: UUID, fields: dict[str, Any]) -> dict | None:
    set_sql, args = db.update_set_clause(fields, RECIPIENT_COLUMNS, start=3)
    if not set_sql:
        return await get_recipient(campaign_id, recipient_id)
    return await db.fetch_one(
        f"""
        UPDATE campaign_recipients
        SET {set_sql}, updated_at = now()
        WHERE id = $1 AND campaign_id = $2
        RETURNING *
        """,
        recipient_id,
        campaign_id,
        *args,
    )


async def bulk_set_recipient_status(recipient_ids: list[UUID], status: str) -> int:
    result = await db.execute(
        """
        UPDATE campaign_recipients
        SET status = $2, approved = ($2 = 'approved'), updated_at = now()
        WHERE id = ANY($1::uuid[])
        """,
        recipient_ids,
        status,
    )
    return db.affected_rows(result)


async def delete_recipient(campaign_id: UUID, recipient_id: UUID) -> bool:
    row = await db.fetch_one(
        "DELETE FROM campaign_recipients WHERE id = $1 AND campaign_id = $2 RETURNING id",
        recipient_id,
        campaign_id,
    )
    return row is not None


async def save_generated_email(recipient_id: UUID, *, subject: str, body: str, body_html: str) -> dict | None:
    return await db.fetch_one(
        """
        UPDATE campaign_recipients
        SET subject = $2, body = $3, body_html = $4, status = 'generated', approved = false,
            error = NULL, generated_at = now(), updated_at = now()
        WHERE id = $1
        RETURNING *
        """,
        recipient_id,
        subject,
        body,
        body_html,
    )


async def next_approved_recipient(campaign_id: UUID) -> dict | None:
    return await db.fetch_one(
        f"""
        {_RECIPIENT_SELECT}
        WHERE r.campaign_id = $1
          AND r.status = 'approved'
        ORDER BY r.created_at ASC
        LIMIT 1
        """,
        campaign_id,
    )


async def mark_recipient_sent(recipient_id: UUID, *, resend_id: str) -> None:
    await db.execute(
        """
        UPDATE campaign_recipients
        SET status = 'sent', resend_id = $2, sent_at = now(), error = NULL, updated_at = now()
        WHERE id = $1
        """,
        recipient_id,
        resend_id,
    )


async def mark_recipient_failed(recipient_id: UUID, error: str) -> None:
    await db.execute(
        """
        UPDATE campaign_recipients
        SET status = 'failed', error = $2, updated_at = now()
        WHERE id = $1
        """,
        recipient_id,
        error,
    )


async def suppress_company_recipients(company_id: UUID, reason: str) -> int:
    """
    Suppress every not-yet-sent recipient at a company across all campaigns.
    """
    result = await db.execute(
        """
        UPDATE campaign_recipients
        SET status = 'suppressed', suppression_reason = $2, updated_at = now()
        WHERE company_id = $1
          AND status = ANY($3::text[])
        """,
        company_id,
        reason,
        list(SUPPRESSIBLE_STATUSES),
    )
    return db.affected_rows(result)


async def update_recipient_by_resend_id(resend_id: str, fields: dict[str, Any]) -> dict | None:
    allowed = ("status", "error", "delivered_at", "opened_at", "clicked_at")
    set_sql, args = db.update_set_clause(fields, allowed, start=2)
    if not set_sql:
        return None
    return await db.fetch_one(
        f"""
        UPDATE campaign_recipients
        SET {set_sql}, updated_at = now()
        WHERE resend_id = $1
        RETURNING id, status
        """,
        resend_id,
        *args,
    )


# ---------------------------------------------------------------------------
# Contact side effects of sending
# ---------------------------------------------------------------------------


async def insert_outreach_log(
    *,
    contact_id: UUID,
    campaign_id: UUID,
    subject: str,
) -> None:
    await db.execute(
        """
        INSERT INTO outreach_log (contact_id, campaign_id, date, type, notes, response_received)
        VALUES ($1, $2, CURRENT_DATE, 'email', $3, false)
        """,
        contact_id,
        campaign_id,
        f"Campaign email: {subject}",
    )


async def mark_contact_contacted(contact_id: UUID) -> None:
    await db.execute(
        """
        UPDATE contacts
        SET outreach_status = 'contacted', updated_at = now()
        WHERE id = $1
          AND outreach_status = 'not_contacted'
        """,
        contact_id,
    )


async def get_contact_with_company(contact_id: UUID) -> dict | None:
    return await db.fetch_one(
        """
        SELECT ct.*, co.name AS company_name, co.description AS company_description,
               co.website AS company_website, co.category AS company_category
        FROM contacts ct
        LEFT JOIN companies co ON co.id = ct.company_id
        WHERE ct.id = $1
        """,
        contact_id,
    )


async def get_company_name(company_id: UUID) -> str | None:
    return await db.fetch_val("SELECT name FROM companies WHERE id = $1", company_id)


# ---------------------------------------------------------------------------
# Sender profiles
# ---------------------------------------------------------------------------


async def list_sender_profiles() -> list[dict]:
    return await db.fetch_all("SELECT * FROM sender_profiles ORDER BY is_default DESC, name")


async def get_sender_profile(profile_id: UUID | None) -> dict | None:
    if profile_id is not None:
        row = await db.fetch_one("SELECT * FROM sender_profiles WHERE id = $1", profile_id)
        if row is not None:
            return row
    return await db.fetch_one(
        "SELECT * FROM sender_profiles ORDER BY is_default DESC, created_at ASC LIMIT 1"
    )


async def insert_sender_profile(fields: dict[str, Any]) -> dict:
    row = await db.fetch_one(
        """
        INSERT INTO sender_profiles (name, email, title, signature, is_default)
        VALUES ($1, $2, $3, $4, $5)
        RETURNING *
        """,
        fields["name"],
        fields["email"],
        fields.get("title"),
        fields.get("signature"),
        bool(fields.get("is_default")),
    )
    if row is None:
        raise RuntimeError("Failed to create sender profile.")
    return row


async def update_sender_profile(profile_id: UUID, fields: dict[str, Any]) -> dict | None:
    set_sql, args = db.update_set_clause(fields, SENDER_COLUMNS, start=2)
    if not set_sql:
        return await db.fetch_one("SELECT * FROM sender_profiles WHERE id = $1", profile_id)
    return await db.fetch_one(
        f"""
        UPDATE sender_profiles
        SET {set_sql}, updated_at = now()
        WHERE id = $1
        RETURNING *
        """,
        profile_id,
        *args,
    )


async def delete_sender_profile(profile_id: UUID) -> bool:
    row = await db.fetch_one("DELETE FROM sender_profiles WHERE id = $1 RETURNING id", profile_id)
    return row is not None
