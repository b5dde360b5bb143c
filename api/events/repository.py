"""
Event persistence, including ticket tiers and company/contact links.
"""

from __future__ import annotations

from typing import Any
from uuid import UUID

from core import db

UPDATABLE_COLUMNS = (
    "name",
    "slug",
    "tagline",
    "description",
    "extended_info",
    "start_date",
    "end_date",
    "timezone",
    "venue_name",
    "venue_address",
    "city",
    "state",
    "country",
    "registration_url",
    "featured_image_url",
    "og_image_url",
    "logo_url",
    "images",
    "landing_page_settings",
    "section_colors",
    "status",
)

JSONB_COLUMNS = ("images", "landing_page_settings", "section_colors")


async def list_events() -> list[dict]:
    return await db.fetch_all("SELECT * FROM events ORDER BY start_date DESC NULLS LAST, created_at DESC")


async def slug_exists(slug: str) -> bool:
    return bool(await db.fetch_val("SELECT EXISTS (SELECT 1 FROM events WHERE slug = $1)", slug))


async def insert_event(fields: dict[str, Any]) -> dict:
    cols = [c for c in UPDATABLE_COLUMNS if c in fields]
    values = ", ".join(
        f"${i}::jsonb" if col in JSONB_COLUMNS else f"${i}" for i, col in enumerate(cols, start=1)
    )
    row = await db.fetch_one(
        f"""
        INSERT INTO events ({", ".join(cols)})
        VALUES ({values})
        RETURNING *
        """,
        *[fields[c] for c in cols],
    )
    if row is None:
        raise RuntimeError("Failed to create event.")
    return row


async def get_event(event_id: UUID) -> dict | None:
    return await db.fetch_one("SELECT * FROM events WHERE id = $1", event_id)


async def update_event(event_id: UUID, fields: dict[str, Any]) -> dict | None:
    set_sql, args = db.update_set_clause(fields, UPDATABLE_COLUMNS, jsonb=JSONB_COLUMNS, start=2)
    if not set_sql:
        return await get_event(event_id)
    return await db.fetch_one(
        f"""
        UPDATE events
        SET {set_sql}, updated_at = now()
        WHERE id = $1
        RETURNING *
        """,
        event_id,
        *args,
    )


async def delete_event(event_id: UUID) -> bool:
    row = await db.fetch_one("DELETE FROM events WHERE id = $1 RETURNING id", event_id)
    return row is not None


TIER_COLUMNS = ("name", "price", "original_price", "currency", "description", "purchase_url", "is_featured", "position")

_TIER_SELECT = """
    SELECT t.*,
           COALESCE(
             (SELECT json_agg(json_build_object('id', f.id, 'feature', f.feature, 'position', f.position)
                              ORDER BY f.position)
              FROM event_ticket_tier_features f
              WHERE f.tier_id = t.id),
             '[]'::json
           ) AS features
    FROM event_ticket_tiers t
"""


async def list_ticket_tiers(event_id: UUID) -> list[dict]:
    return await db.fetch_all(f"{_TIER_SELECT} WHERE t.event_id = $1 ORDER BY t.position", event_id)


async def get_ticket_tier(event_id: UUID, tier_id: UUID) -> dict | None:
    return await db.fetch_one(f"{_TIER_SELECT} WHERE t.id = $1 AND t.event_id = $2", tier_id, event_id)


async def insert_ticket_tier(event_id: UUID, fields: dict[str, Any]) -> dict:
    """Append a tier; position defaults to one past the current last tier."""
    row = await db.fetch_one(
        """
        INSERT INTO event_ticket_tiers (event_id, name, price, original_price, currency, description,
                                        purchase_url, is_featured, position)
        VALUES ($1, $2, $3, $4, $5, $6, $7, $8,
                COALESCE($9, (SELECT COALESCE(MAX(position), -1) + 1 FROM event_ticket_tiers WHERE event_id = $1)))
        RETURNING *
        """,
        event_id,
        fields["name"],
        fields["price"],
        fields.get("original_price"),
        fields.get("currency") or "USD",
        fields.get("description"),
        fields.get("purchase_url"),
        bool(fields.get("is_featured")),
        fields.get("position"),
    )
    if row is None:
        raise RuntimeError("Failed to create ticket tier.")
    row["features"] = []
    return row


async def update_ticket_tier(event_id: UUID, tier_id: UUID, fields: dict[str, Any]) -> dict | None:
    set_sql, args = db.update_set_clause(fields, TIER_COLUMNS, start=3)
    if set_sql:
        row = await db.fetch_one(
            f"""
            UPDATE event_ticket_tiers
            SET {set_sql}
            WHERE id = $1 AND event_id = $2
            RETURNING id
            """,
            tier_id,
            event_id,
            *args,
        )
        if row is None:
            return None
    return await get_ticket_tier(event_id, tier_id)


async def delete_ticket_tier(event_id: UUID, tier_id: UUID) -> bool:
    row = await db.fetch_one(
        "DELETE FROM event_ticket_tiers WHERE id = $1 AND event_id = $2 RETURNING id",
        tier_id,
        event_id,
    )
    return row is not None


async def insert_tier_feature(tier_id: UUID, feature: str, position: int | None) -> dict:
    row = await db.fetch_one(
        """
        INSERT INTO event_ticket_tier_features (tier_id, feature, position)
        VALUES ($1, $2, COALESCE($3, (SELECT COALESCE(MAX(position), -1) + 1
                                      FROM event_ticket_tier_features WHERE tier_id = $1)))
        RETURNING *
        """,
        tier_id,
        feature,
        position,
    )
    if row is None:
        raise RuntimeError("Failed to create tier feature.")
    return row


async def update_tier_feature(tier_id: UUID, feature_id: UUID, fields: dict[str, Any]) -> dict | None:
    set_sql, args = db.update_set_clause(fields, ("feature", "position"), start=3)
    if not set_sql:
        return await db.fetch_one(
            "SELECT * FROM event_ticket_tier_features WHERE id = $1 AND tier_id = $2",
            feature_id,
            tier_id,
        )
    return await db.fetch_one(
        f"""
        UPDATE event_ticket_tier_features
        SET {set_sql}
        WHERE id = $1 AND tier_id = $2
        RETURNING *
        """,
        feature_id,
        tier_id,
        *args,
    )


async def delete_tier_feature(tier_id: UUID, feature_id: UUID) -> bool:
    row = await db.fetch_one(
        "DELETE FROM event_ticket_tier_features WHERE id = $1 AND tier_id = $2 RETURNING id",
        feature_id,
        tier_id,
    )
    return row is not None


async def copy_event(source: dict[str, Any], *, name: str, slug: str) -> dict:
    """
    Insert a draft copy of `source` with its page content in one transaction.

    Venue, dates and registration link are cleared; tier purchase URLs too.
    Ticket tiers with features, FAQ links, value propositions, sliders with
    their images and section photos are copied. Company and contact links
    are not.
    """
    async with db.pool().acquire() as conn:
        async with conn.transaction():
            event = await conn.fetchrow(
                """
                INSERT INTO events (name, slug, tagline, description, extended_info, timezone,
                                    featured_image_url, og_image_url, logo_url,
                                    images, landing_page_settings, section_colors, status)
                VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $9, $10::jsonb, $11::jsonb, $12::jsonb, 'draft')
                RETURNING *
                """,
                name,
                slug,
                source.get("tagline"),
                source.get("description"),
                source.get("extended_info"),
                source.get("timezone"),
                source.get("featured_image_url"),
                source.get("og_image_url"),
                source.get("logo_url"),
                source.get("images"),
                source.get("landing_page_settings"),
                source.get("section_colors"),
            )
            source_id, new_id = source["id"], event["id"]

            tiers = await conn.fetch(
                "SELECT * FROM event_ticket_tiers WHERE event_id = $1 ORDER BY position",
                source_id,
            )
            for tier in tiers:
                new_tier_id = await conn.fetchval(
                    """
                    INSERT INTO event_ticket_tiers (event_id, name, price, original_price, currency, description,
                                                    is_featured, position, purchase_url)
                    VALUES ($1, $2, $3, $4, $5, $6, $7, $8, NULL)
                    RETURNING id
                    """,
                    new_id,
                    tier["name"],
                    tier["price"],
                    tier["original_price"],
                    tier["currency"],
                    tier["description"],
                    tier["is_featured"],
                    tier["position"],
                )
                await conn.execute(
                    """
                    INSERT INTO event_ticket_tier_features (tier_id, feature, position)
                    SELECT $2, feature, position
                    FROM event_ticket_tier_features
                    WHERE tier_id = $1
                    """,
                    tier["id"],
                    new_tier_id,
                )

            await conn.execute(
                """
                INSERT INTO event_faq_links (event_id, faq_id, display_order)
                SELECT $2, faq_id, display_order FROM event_faq_links WHERE event_id = $1
                """,
                source_id,
                new_id,
            )
            await conn.execute(
                """
                INSERT INTO event_value_propositions (event_id, title, description, icon, position)
                SELECT $2, title, description, icon, position FROM event_value_propositions WHERE event_id = $1
                """,
                source_id,
                new_id,
            )
            await conn.execute(
                """
                INSERT INTO event_section_photos (event_id, section_key, image_url, caption, alt_text, position)
                SELECT $2, section_key, image_url, caption, alt_text, position
                FROM event_section_photos
                WHERE event_id = $1
                """,
                source_id,
                new_id,
            )

            sliders = await conn.fetch("SELECT * FROM event_sliders WHERE event_id = $1", source_id)
            for slider in sliders:
                new_slider_id = await conn.fetchval(
                    "INSERT INTO event_sliders (event_id, name, section_key) VALUES ($1, $2, $3) RETURNING id",
                    new_id,
                    slider["name"],
                    slider["section_key"],
                )
                await conn.execute(
                    """
                    INSERT INTO event_slider_images (slider_id, image_url, caption, alt_text, position)
                    SELECT $2, image_url, caption, alt_text, position
                    FROM event_slider_images
                    WHERE slider_id = $1
                    """,
                    slider["id"],
                    new_slider_id,
                )
    return dict(event)


async def list_event_companies(event_id: UUID) -> list[dict]:
    return await db.fetch_all(
        """
        SELECT ec.company_id, ec.role, co.name, co.slug, co.logo_url
        FROM event_companies ec
        JOIN companies co ON co.id = ec.company_id
        WHERE ec.event_id = $1
        ORDER BY co.name
        """,
        event_id,
    )


async def list_event_contacts(event_id: UUID) -> list[dict]:
    return await db.fetch_all(
        """
        SELECT ec.contact_id, ec.role, ct.first_name, ct.last_name, ct.title, ct.avatar_url
        FROM event_contacts ec
        JOIN contacts ct ON ct.id = ec.contact_id
        WHERE ec.event_id = $1
        ORDER BY ct.last_name, ct.first_name
        """,
        event_id,
    )


async def link_company(event_id: UUID, company_id: UUID, role: str | None) -> dict | None:
    return await db.fetch_one(
        """
        INSERT INTO event_companies (event_id, company_id, role)
        VALUES ($1, $2, $3)
        ON CONFLICT (event_id, company_id) DO UPDATE SET role = EXCLUDED.role
        RETURNING event_id, company_id, role
        """,
        event_id,
        company_id,
        role,
    )


async def unlink_company(event_id: UUID, company_id: UUID) -> bool:
    row = await db.fetch_one(
        "DELETE FROM event_companies WHERE event_id = $1 AND company_id = $2 RETURNING event_id",
        event_id,
        company_id,
    )
    return row is not None


async def link_contact(event_id: UUID, contact_id: UUID, role: str | None) -> dict | None:
    return await db.fetch_one(
        """
        INSERT INTO event_contacts (event_id, contact_id, role)
        VALUES ($1, $2, $3)
        ON CONFLICT (event_id, contact_id) DO UPDATE SET role = EXCLUDED.role
        RETURNING event_id, contact_id, role
        """,
        event_id,
        contact_id,
        role,
    )


async def unlink_contact(event_id: UUID, contact_id: UUID) -> bool:
    row = await db.fetch_one(
        "DELETE FROM event_contacts WHERE event_id = $1 AND contact_id = $2 RETURNING event_id",
        event_id,
        contact_id,
    )
    return row is not None
