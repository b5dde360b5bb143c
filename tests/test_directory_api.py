from datetime import datetime, timezone
from unittest.mock import AsyncMock, patch
from uuid import uuid4


def _rows(n):
    return [{"id": str(uuid4()), "name": f"Company {i}"} for i in range(n)]


async def test_directory_is_public(anon_client):
    with patch("directory.repository.list_companies", new=AsyncMock(return_value=_rows(3))):
        resp = await anon_client.get("/directory/companies")
    assert resp.status_code == 200
    assert resp.json()["has_more"] is False


async def test_full_page_reports_more(anon_client):
    list_companies = AsyncMock(return_value=_rows(12))
    with patch("directory.repository.list_companies", new=list_companies):
        resp = await anon_client.get("/directory/companies", params={"page": 3, "q": "  "})
    assert resp.json()["has_more"] is True
    kwargs = list_companies.await_args.kwargs
    assert (kwargs["limit"], kwargs["offset"]) == (12, 24)
    assert kwargs["search"] is None


async def test_news_edge_filter_is_lowercased(anon_client):
    list_news = AsyncMock(return_value=[])
    with patch("directory.repository.list_news", new=list_news):
        await anon_client.get("/directory/news", params={"edge": "Decode"})
    assert list_news.await_args.kwargs["edge"] == "decode"


async def test_news_months(anon_client):
    rows = [{"month": datetime(2026, 3, 1, tzinfo=timezone.utc), "count": 7}]
    with patch("directory.repository.list_news_months", new=AsyncMock(return_value=rows)):
        resp = await anon_client.get("/directory/news/months")
    assert resp.json() == [{"slug": "march-2026", "label": "March 2026", "count": 7}]


async def test_news_month_invalid_slug(anon_client):
    resp = await anon_client.get("/directory/news/months/smarch-2026")
    assert resp.status_code == 404


async def test_news_month_queries_range(anon_client):
    between = AsyncMock(return_value=[])
    with patch("news.repository.list_published_between", new=between):
        resp = await anon_client.get("/directory/news/months/december-2025")
    assert resp.json() == {"month": "december-2025", "label": "December 2025", "items": []}
    start, end = between.await_args.args
    assert start == datetime(2025, 12, 1, tzinfo=timezone.utc)
    assert end == datetime(2026, 1, 1, tzinfo=timezone.utc)


async def test_company_not_found(anon_client):
    with patch("directory.repository.get_company_by_slug", new=AsyncMock(return_value=None)):
        resp = await anon_client.get("/directory/companies/missing")
    assert resp.status_code == 404
    assert resp.json() == {"error": "Company not found"}
