"""
Month-archive slugs such as "february-2026".
"""

from __future__ import annotations

import calendar
from datetime import date, datetime, timezone

_MONTHS = [m.lower() for m in calendar.month_name[1:]]


def parse_month_slug(slug: str) -> dict | None:
    """
    "february-2026" -> {"start", "end", "label", "slug"}; None when invalid.

    `start` is inclusive and `end` exclusive, both UTC midnight.
    """
    parts = (slug or "").strip().lower().split("-")
    if len(parts) != 2 or parts[0] not in _MONTHS or not parts[1].isdigit():
        return None
    month = _MONTHS.index(parts[0]) + 1
    year = int(parts[1])
    if year < 2000 or year > 2100:
        return None

    start = datetime(year, month, 1, tzinfo=timezone.utc)
    end = datetime(year + 1, 1, 1, tzinfo=timezone.utc) if month == 12 else datetime(year, month + 1, 1, tzinfo=timezone.utc)
    return {"start": start, "end": end, "label": month_label(start), "slug": month_slug(start)}


def month_slug(value: date) -> str:
    return f"{calendar.month_name[value.month].lower()}-{value.year}"


def month_label(value: date) -> str:
    return f"{calendar.month_name[value.month]} {value.year}"
