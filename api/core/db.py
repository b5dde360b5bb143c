"""
Async database access helpers (raw SQL) using asyncpg.

The pool is opened by the FastAPI lifespan hook and closed on shutdown
(see `api/main.py`). Queries use positional placeholders: $1, $2, ...
"""

from __future__ import annotations

import json
from typing import Any, Iterable
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

import asyncpg

from core import settings

_pool: asyncpg.Pool | None = None


def _sanitize_database_url(url: str) -> str:
    # Hosted Postgres URLs carry `sslmode`, which asyncpg rejects as a DSN param.
    parts = urlsplit(url)
    if not parts.query:
        return url

    params = [(k, v) for (k, v) in parse_qsl(parts.query, keep_blank_values=True) if k != "sslmode"]
    return urlunsplit((parts.scheme, parts.netloc, parts.path, urlencode(params), parts.fragment))


def database_url() -> str:
    url = settings.env_str("DATABASE_URL")
    if not url:
        raise RuntimeError("DATABASE_URL is not set.")
    return _sanitize_database_url(url)


async def _init_connection(conn: asyncpg.Connection) -> None:
    # json/jsonb columns and parameters round-trip as Python objects.
    for type_name in ("json", "jsonb"):
        await conn.set_type_codec(type_name, encoder=json.dumps, decoder=json.loads, schema="pg_catalog")


async def init_pool() -> None:
    global _pool
    if _pool is not None:
        return None
    _pool = await asyncpg.create_pool(
        dsn=database_url(),
        init=_init_connection,
        min_size=1,
        max_size=settings.env_int("DB_POOL_MAX_SIZE", 5),
        command_timeout=30,
    )


async def close_pool() -> None:
    global _pool
    if _pool is None:
        return None
    await _pool.close()
    _pool = None


def pool() -> asyncpg.Pool:
    if _pool is None:
        raise RuntimeError("DB pool is not initialized. Call init_pool() on startup.")
    return _pool


def update_set_clause(
    fields: dict[str, Any],
    allowed: Iterable[str],
    *,
    jsonb: Iterable[str] = (),
    start: int = 1,
) -> tuple[str, list[Any]]:
    """
    Build `col = $n, ...` for the whitelisted keys present in `fields`.

    Returns ("", []) when nothing updatable was supplied.
    """
    jsonb_cols = set(jsonb)
    parts: list[str] = []
    args: list[Any] = []
    for col in allowed:
        if col not in fields:
            continue
        value = fields[col]
        idx = start + len(args)
        cast = "::jsonb" if col in jsonb_cols else ""
        parts.append(f"{col} = ${idx}{cast}")
        args.append(value)
    return ", ".join(parts), args


async def fetch_one(sql: str, *args: Any) -> dict[str, Any] | None:
    """
    Run a query and return a single row as a dict (or None).
    """
    row = await pool().fetchrow(sql, *args)
    return dict(row) if row is not None else None


async def fetch_all(sql: str, *args: Any) -> list[dict[str, Any]]:
    """
    Run a query and return all rows as a list of dicts.
    """
    rows = await pool().fetch(sql, *args)
    return [dict(r) for r in rows]


async def fetch_val(sql: str, *args: Any) -> Any:
    return await pool().fetchval(sql, *args)


async def execute(sql: str, *args: Any) -> str:
    """
    Run a statement (INSERT/UPDATE/DELETE). Returns the status tag, e.g. "UPDATE 3".
    """
    return await pool().execute(sql, *args)


def affected_rows(status: str | None) -> int:
    """Row count from an asyncpg status tag ("UPDATE 3" -> 3)."""
    if not status:
        return 0
    try:
        return int(status.rsplit(" ", 1)[-1])
    except ValueError:
        return 0
