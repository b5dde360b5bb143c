from datetime import datetime, timezone
from unittest.mock import AsyncMock, patch
from uuid import uuid4

import pytest

from articles import ai, service

NOW = datetime(2026, 4, 2, tzinfo=timezone.utc)


def _article(**overrides):
    row = {
        "id": uuid4(),
        "company_id": uuid4(),
        "title": "Inside a Longevity Clinic",
        "slug": "inside-a-longevity-clinic",
        "content": "<p>Dr. Jane Doe runs a clinic.</p>",
        "excerpt": None,
        "status": "draft",
        "published_at": None,
        "key_people": [],
        "created_at": NOW,
    }
    row.update(overrides)
    return row


@pytest.mark.parametrize(
    "title, slug",
    [
        ("Inside a Longevity Clinic", "inside-a-longevity-clinic"),
        ("  NAD+ & Sirtuins: 2026 Update!  ", "nad-sirtuins-2026-update"),
    ],
)
async def test_article_slug_from_title(client, title, slug):
    insert = AsyncMock(side_effect=lambda fields: {**_article(), "slug": fields["slug"]})
    with (
        patch("articles.repository.slug_exists", new=AsyncMock(return_value=False)),
        patch("articles.repository.insert_article", new=insert),
    ):
        resp = await client.post("/articles", json={"company_id": str(uuid4()), "title": title})
    assert resp.status_code == 201
    assert resp.json()["slug"] == slug


async def test_create_article_requires_company_and_title(client):
    resp = await client.post("/articles", json={"title": "No company"})
    assert resp.status_code == 400
    assert resp.json() == {"error": "Company and title are required"}


async def test_create_article_suffixes_taken_slug(client):
    insert = AsyncMock(side_effect=lambda fields: {**_article(), "slug": fields["slug"]})
    with (
        patch("articles.repository.slug_exists", new=AsyncMock(return_value=True)),
        patch("articles.repository.insert_article", new=insert),
    ):
        resp = await client.post("/articles", json={"company_id": str(uuid4()), "title": "Inside a Longevity Clinic"})
    assert resp.status_code == 201
    slug = resp.json()["slug"]
    base, _, stamp = slug.rpartition("-")
    assert base == "inside-a-longevity-clinic"
    assert stamp.isdigit() and len(stamp) >= 13


async def test_publishing_stamps_published_at(client):
    article = _article()
    update = AsyncMock(return_value={**article, "status": "published"})
    with (
        patch("articles.repository.get_article", new=AsyncMock(return_value=article)),
        patch("articles.repository.update_article", new=update),
    ):
        resp = await client.patch(f"/articles/{article['id']}", json={"status": "published"})
    assert resp.status_code == 200
    fields = update.await_args.args[1]
    assert isinstance(fields["published_at"], datetime)


async def test_add_enhancement_rejects_unknown_type(client):
    resp = await client.post(f"/articles/{uuid4()}/enhancements", json={"type": "podcast"})
    assert resp.status_code == 400
    assert resp.json()["error"].startswith("Invalid enhancement type. Must be one of: youtube")


async def test_add_youtube_enhancement_fills_metadata(client):
    article = _article()
    insert = AsyncMock(return_value={"id": str(uuid4())})
    with (
        patch("articles.repository.get_article", new=AsyncMock(return_value=article)),
        patch("articles.repository.insert_enhancement", new=insert),
    ):
        resp = await client.post(
            f"/articles/{article['id']}/enhancements",
            json={"type": "youtube", "title": "Talk", "url": "https://youtu.be/dQw4w9WgXcQ"},
        )
    assert resp.status_code == 201
    kwargs = insert.await_args.kwargs
    assert kwargs["embed_code"] == "https://www.youtube.com/embed/dQw4w9WgXcQ"
    assert kwargs["metadata"]["videoId"] == "dQw4w9WgXcQ"
    assert kwargs["metadata"]["thumbnail"] == "https://img.youtube.com/vi/dQw4w9WgXcQ/hqdefault.jpg"


async def test_enhance_requires_anthropic(client):
    resp = await client.post(f"/articles/{uuid4()}/enhance")
    assert resp.status_code == 500


async def test_enhance_article_collects_step_errors(monkeypatch):
    monkeypatch.setenv("ANTHROPIC_API_KEY", "key")
    article = _article(key_people=["Jane Doe"], excerpt="Already set")
    update = AsyncMock()
    with (
        patch("articles.repository.get_article", new=AsyncMock(return_value=article)),
        patch("articles.service._find_books", new=AsyncMock(side_effect=RuntimeError("books down"))),
        patch("articles.repository.update_article", new=update),
    ):
        result = await service.enhance_article(article["id"])

    assert result["added"] == {"youtube": 0, "scholar": 0, "book": 0}
    assert result["errors"] == ["book: books down"]
    update.assert_awaited_once_with(article["id"], {"ai_enhanced": True})


def test_parse_key_people():
    raw = "1. Jane Doe\n- John Smith\nMadonna\nJane Doe\nDr. Who?"
    assert ai.parse_key_people(raw) == ["Jane Doe", "John Smith"]
    assert ai.parse_key_people("NONE") == []


def test_parse_queries():
    raw = '1. "rapamycin longevity trial"\n\n2. Jane Doe interview\n3. x\n4. extra'
    assert ai.parse_queries(raw) == ["rapamycin longevity trial", "Jane Doe interview", "x"]


def test_parse_selection_falls_back_to_first_results():
    results = [{"title": str(i)} for i in range(5)]
    assert ai.parse_selection("2, 4, 9", results, 3) == [results[1], results[3]]
    assert ai.parse_selection("none", results, 2) == results[:2]
