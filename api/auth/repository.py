"""
Admin user persistence helpers.
"""

from __future__ import annotations

from core import db


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


async def create_admin(*, email: str, password_hash: str, name: str | None = None) -> dict:
    row = await db.fetch_one(
        """
        INSERT INTO admin_users (email, password_hash, name)
        VALUES ($1, $2, $3)
        RETURNING id, email, name, is_active, created_at
        """,
        normalize_email(email),
        password_hash,
        name,
    )
    if row is None:
        raise RuntimeError("Failed to create admin user.")
    return row


async def get_admin_by_email(email: str) -> dict | None:
    return await db.fetch_one(
        """
        SELECT id, email, name, password_hash, is_active, created_at
        FROM admin_users
        WHERE lower(email) = lower($1)
        """,
        normalize_email(email),
    )


async def get_admin_by_id(admin_id: int) -> dict | None:
    return await db.fetch_one(
        """
        SELECT id, email, name, password_hash, is_active, created_at
        FROM admin_users
        WHERE id = $1
        """,
        admin_id,
    )


async def touch_last_login(admin_id: int) -> None:
    await db.execute("UPDATE admin_users SET last_login_at = now() WHERE id = $1", admin_id)
