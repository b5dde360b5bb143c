from datetime import datetime, timezone
from unittest.mock import AsyncMock, patch
from uuid import uuid4

import asyncpg

NOW = datetime(2026, 3, 1, tzinfo=timezone.utc)


def _company(**overrides):
    row = {
        "id": uuid4(),
        "name": "Acme Longevity",
        "slug": "acme-longevity",
        "website": "https://www.acme.com",
        "domain": "acme.com",
        "status": "researching",
        "is_draft": True,
        "created_at": NOW,
    }
    row.update(overrides)
    return row


async def test_create_company_requires_name(client):
    resp = await client.post("/companies", json={"name": "  "})
    assert resp.status_code == 400
    assert resp.json() == {"error": "Company name is required"}


async def test_create_company_derives_slug_domain_and_defaults(client):
    insert = AsyncMock(return_value=_company())
    with patch("companies.repository.insert_company", new=insert):
        resp = await client.post("/companies", json={"name": "Acme Longevity", "website": "https://www.acme.com/"})

    assert resp.status_code == 201
    fields = insert.await_args.args[0]
    assert fields["slug"] == "acme-longevity"
    assert fields["domain"] == "acme.com"
    assert fields["status"] == "researching"


async def test_create_company_slug_conflict(client):
    with patch(
        "companies.repository.insert_company",
        new=AsyncMock(side_effect=asyncpg.UniqueViolationError("duplicate key")),
    ):
        resp = await client.post("/companies", json={"name": "Acme"})
    assert resp.status_code == 409
    assert "error" in resp.json()


async def test_get_company_not_found(client):
    with patch("companies.repository.get_company", new=AsyncMock(return_value=None)):
        resp = await client.get(f"/companies/{uuid4()}")
    assert resp.status_code == 404
    assert resp.json() == {"error": "Company not found"}


async def test_get_company_includes_contacts_and_articles(client):
    company = _company()
    with (
        patch("companies.repository.get_company", new=AsyncMock(return_value=company)),
        patch("companies.repository.list_company_contacts", new=AsyncMock(return_value=[{"id": 1}])),
        patch("companies.repository.list_company_articles", new=AsyncMock(return_value=[])),
    ):
        resp = await client.get(f"/companies/{company['id']}")
    body = resp.json()
    assert resp.status_code == 200
    assert body["contacts"] == [{"id": 1}]
    assert body["articles"] == []


async def test_update_company_regenerates_domain(client):
    update = AsyncMock(return_value=_company(domain="newsite.io"))
    with patch("companies.repository.update_company", new=update):
        resp = await client.patch(f"/companies/{uuid4()}", json={"website": "newsite.io"})
    assert resp.status_code == 200
    assert update.await_args.args[1] == {"website": "newsite.io", "domain": "newsite.io"}


async def test_bulk_update_rejects_empty_fields(client):
    resp = await client.patch("/companies/bulk", json={"ids": [str(uuid4())], "fields": {"slug": "x"}})
    assert resp.status_code == 400
    assert resp.json() == {"error": "No valid fields to update"}


async def test_list_companies_passes_filters(client):
    list_mock = AsyncMock(return_value=[])
    with patch("companies.repository.list_companies", new=list_mock):
        resp = await client.get("/companies", params={"status": "published", "search": " acme ", "order": "asc"})
    assert resp.status_code == 200
    assert list_mock.await_args.kwargs["search"] == "acme"
    assert list_mock.await_args.kwargs["order"] == "asc"


async def test_invalid_uuid_is_a_400(client):
    resp = await client.get("/companies/not-a-uuid")
    assert resp.status_code == 400
    assert "error" in resp.json()


async def test_unexpected_error_is_a_500(client):
    with patch("companies.repository.list_companies", new=AsyncMock(side_effect=RuntimeError("boom"))):
        resp = await client.get("/companies")
    assert resp.status_code == 500
    assert resp.json() == {"error": "Internal server error"}


async def test_companies_require_admin(anon_client):
    resp = await anon_client.get("/companies")
    assert resp.status_code == 401
    assert resp.json() == {"error": "Missing Authorization header."}


async def test_update_company_slug_conflict(client):
    with patch(
        "companies.repository.update_company",
        new=AsyncMock(side_effect=asyncpg.UniqueViolationError("duplicate key value")),
    ):
        resp = await client.patch(f"/companies/{uuid4()}", json={"slug": "taken"})
    assert resp.status_code == 409
    assert resp.json() == {"error": "A company with this slug already exists"}
