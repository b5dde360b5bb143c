from datetime import date, datetime, timezone

import pytest

from news import months


def test_parse_month_slug():
    month = months.parse_month_slug("february-2026")
    assert month["start"] == datetime(2026, 2, 1, tzinfo=timezone.utc)
    assert month["end"] == datetime(2026, 3, 1, tzinfo=timezone.utc)
    assert month["label"] == "February 2026"
    assert month["slug"] == "february-2026"


def test_parse_month_slug_december_rolls_year():
    month = months.parse_month_slug("December-2025")
    assert month["end"] == datetime(2026, 1, 1, tzinfo=timezone.utc)


@pytest.mark.parametrize("slug", ["feb-2026", "february", "february-1999", "february-2101", "2026-02", ""])
def test_parse_month_slug_invalid(slug):
    assert months.parse_month_slug(slug) is None


def test_month_slug_and_label():
    assert months.month_slug(date(2026, 7, 19)) == "july-2026"
    assert months.month_label(date(2026, 7, 19)) == "July 2026"
