"""
Environment-backed configuration helpers.

Values are read on each call so tests can patch `os.environ`.
"""

from __future__ import annotations

import os
from datetime import datetime, timezone


def env_str(name: str, default: str = "") -> str:
    return os.environ.get(name, default).strip()


def env_int(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def env_list(name: str, default: list[str]) -> list[str]:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return list(default)
    return [item.strip() for item in raw.split(",") if item.strip()]


def cors_origins() -> list[str]:
    return env_list("CORS_ORIGINS", ["http://localhost:3000", "http://127.0.0.1:3000"])


def news_max_articles_per_run() -> int:
    return env_int("NEWS_MAX_ARTICLES_PER_RUN", 20)


def news_earliest_date() -> datetime:
    raw = env_str("NEWS_EARLIEST_DATE", "2026-02-01")
    try:
        parsed = datetime.fromisoformat(raw)
    except ValueError:
        parsed = datetime(2026, 2, 1)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def cron_secret() -> str:
    return env_str("CRON_SECRET")
