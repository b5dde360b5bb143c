import contextlib
from datetime import date, datetime, timezone
from decimal import Decimal
from unittest.mock import AsyncMock, patch
from uuid import uuid4

import asyncpg

from events import repository

NOW = datetime(2026, 2, 1, tzinfo=timezone.utc)


def _event(**overrides):
    row = {"id": uuid4(), "name": "Longevity Summit", "slug": "longevity-summit", "status": "draft", "created_at": NOW}
    row.update(overrides)
    return row


async def test_create_event_requires_name_and_slug(client):
    resp = await client.post("/events", json={"name": "Summit"})
    assert resp.status_code == 400
    assert resp.json() == {"error": "Name and slug are required"}


async def test_create_event_sets_landing_page_defaults(client):
    insert = AsyncMock(return_value=_event())
    with patch("events.repository.insert_event", new=insert):
        resp = await client.post("/events", json={"name": "Summit", "slug": "summit"})
    assert resp.status_code == 201
    settings = insert.await_args.args[0]["landing_page_settings"]
    assert settings == {"show_speakers": True, "show_sponsors": True, "show_tickets": True, "show_venue": True}


async def test_create_event_duplicate_slug(client):
    with patch("events.repository.insert_event", new=AsyncMock(side_effect=asyncpg.UniqueViolationError("dup"))):
        resp = await client.post("/events", json={"name": "Summit", "slug": "summit"})
    assert resp.status_code == 409


async def test_duplicate_requires_new_name_and_slug(client):
    resp = await client.post(f"/events/{uuid4()}/duplicate", json={"newName": "Copy"})
    assert resp.status_code == 400
    assert resp.json() == {"error": "newSlug and newName are required"}


async def test_duplicate_rejects_taken_slug(client):
    with patch("events.repository.slug_exists", new=AsyncMock(return_value=True)):
        resp = await client.post(
            f"/events/{uuid4()}/duplicate",
            json={"newName": "Summit 2027", "newSlug": "longevity-summit"},
        )
    assert resp.status_code == 400
    assert resp.json() == {"error": "An event with this slug already exists"}


async def test_duplicate_missing_source(client):
    with (
        patch("events.repository.slug_exists", new=AsyncMock(return_value=False)),
        patch("events.repository.get_event", new=AsyncMock(return_value=None)),
    ):
        resp = await client.post(f"/events/{uuid4()}/duplicate", json={"newName": "Copy", "newSlug": "copy"})
    assert resp.status_code == 404


async def test_duplicate_copies_event(client):
    source = _event()
    copy = AsyncMock(return_value=_event(name="Summit 2027", slug="summit-2027"))
    with (
        patch("events.repository.slug_exists", new=AsyncMock(return_value=False)),
        patch("events.repository.get_event", new=AsyncMock(return_value=source)),
        patch("events.repository.copy_event", new=copy),
    ):
        resp = await client.post(
            f"/events/{source['id']}/duplicate",
            json={"newName": " Summit 2027 ", "newSlug": "summit-2027"},
        )
    assert resp.status_code == 201
    assert resp.json()["slug"] == "summit-2027"
    assert copy.await_args.kwargs == {"name": "Summit 2027", "slug": "summit-2027"}


async def test_unlink_missing_company(client):
    with patch("events.repository.unlink_company", new=AsyncMock(return_value=False)):
        resp = await client.delete(f"/events/{uuid4()}/companies/{uuid4()}")
    assert resp.status_code == 404


class _FakeConnection:
    """Records every statement copy_event issues and answers the reads it makes."""

    def __init__(self, *, tiers, sliders):
        self.tiers = tiers
        self.sliders = sliders
        self.statements = []
        self.new_ids = []

    def _new_id(self):
        new_id = uuid4()
        self.new_ids.append(new_id)
        return new_id

    async def fetchrow(self, sql, *args):
        self.statements.append((sql, args))
        return {"id": self._new_id(), "name": args[0], "slug": args[1], "status": "draft"}

    async def fetch(self, sql, *args):
        self.statements.append((sql, args))
        if "FROM event_ticket_tiers" in sql:
            return self.tiers
        if "FROM event_sliders" in sql:
            return self.sliders
        return []

    async def fetchval(self, sql, *args):
        self.statements.append((sql, args))
        return self._new_id()

    async def execute(self, sql, *args):
        self.statements.append((sql, args))
        return "INSERT 0 1"

    @contextlib.asynccontextmanager
    async def transaction(self):
        yield


class _FakePool:
    def __init__(self, conn):
        self.conn = conn

    @contextlib.asynccontextmanager
    async def acquire(self):
        yield self.conn


def _statements_touching(conn, table):
    return [(sql, args) for sql, args in conn.statements if f"INSERT INTO {table} " in sql]


async def test_copy_event_clears_logistics_and_copies_page_content():
    source = _event(
        tagline="Live longer",
        start_date=date(2026, 5, 1),
        venue_name="Moscone West",
        registration_url="https://tickets.example.com",
        og_image_url="https://cdn.example.com/og.png",
        logo_url="https://cdn.example.com/logo.png",
        images=["hero.png"],
        landing_page_settings={"show_venue": True},
        section_colors={"hero": "#000"},
    )
    tier = {
        "id": uuid4(),
        "name": "VIP",
        "price": Decimal("499.00"),
        "original_price": Decimal("699.00"),
        "currency": "USD",
        "description": "Front row",
        "purchase_url": "https://tickets.example.com/vip",
        "is_featured": True,
        "position": 0,
    }
    slider = {"id": uuid4(), "name": "Gallery", "section_key": "hero"}
    conn = _FakeConnection(tiers=[tier], sliders=[slider])

    with patch("core.db.pool", return_value=_FakePool(conn)):
        event = await repository.copy_event(source, name="Summit 2027", slug="summit-2027")

    new_event_id = conn.new_ids[0]
    assert event["id"] == new_event_id
    assert event["status"] == "draft"

    event_sql, event_args = conn.statements[0]
    for cleared in ("venue_name", "start_date", "end_date", "registration_url"):
        assert cleared not in event_sql
    assert "'draft'" in event_sql
    assert "https://cdn.example.com/og.png" in event_args
    assert "https://cdn.example.com/logo.png" in event_args
    assert "Moscone West" not in event_args
    assert "https://tickets.example.com" not in event_args

    [(tier_sql, tier_args)] = _statements_touching(conn, "event_ticket_tiers")
    assert "NULL)" in tier_sql
    assert tier_args[0] == new_event_id
    assert "https://tickets.example.com/vip" not in tier_args
    assert Decimal("699.00") in tier_args
    new_tier_id = conn.new_ids[1]

    [(_, feature_args)] = _statements_touching(conn, "event_ticket_tier_features")
    assert feature_args == (tier["id"], new_tier_id)

    for table in ("event_faq_links", "event_value_propositions", "event_section_photos"):
        [(_, args)] = _statements_touching(conn, table)
        assert args == (source["id"], new_event_id)

    [(_, slider_args)] = _statements_touching(conn, "event_sliders")
    assert slider_args == (new_event_id, "Gallery", "hero")
    [(_, image_args)] = _statements_touching(conn, "event_slider_images")
    assert image_args == (slider["id"], conn.new_ids[2])

    assert not _statements_touching(conn, "event_companies")
    assert not _statements_touching(conn, "event_contacts")


async def test_create_ticket_tier_requires_name_and_price(client):
    resp = await client.post(f"/events/{uuid4()}/ticket-tiers", json={"name": "VIP"})
    assert resp.status_code == 400
    assert resp.json() == {"error": "Name and price are required"}


async def test_create_ticket_tier_for_missing_event(client):
    with patch("events.repository.get_event", new=AsyncMock(return_value=None)):
        resp = await client.post(f"/events/{uuid4()}/ticket-tiers", json={"name": "VIP", "price": 499})
    assert resp.status_code == 404
    assert resp.json() == {"error": "Event not found"}


async def test_create_ticket_tier_appends_with_empty_features(client):
    event = _event()
    tier = {"id": uuid4(), "event_id": event["id"], "name": "VIP", "price": "499.00", "position": 2, "features": []}
    insert = AsyncMock(return_value=tier)
    with (
        patch("events.repository.get_event", new=AsyncMock(return_value=event)),
        patch("events.repository.insert_ticket_tier", new=insert),
    ):
        resp = await client.post(f"/events/{event['id']}/ticket-tiers", json={"name": " VIP ", "price": "499"})

    assert resp.status_code == 201
    assert resp.json()["features"] == []
    event_id, fields = insert.await_args.args
    assert event_id == event["id"]
    assert fields["name"] == "VIP"
    assert fields["price"] == Decimal("499")
    assert fields["currency"] == "USD"
    assert fields["position"] is None


async def test_update_ticket_tier_rejects_blank_name(client):
    update = AsyncMock()
    with patch("events.repository.update_ticket_tier", new=update):
        resp = await client.patch(f"/events/{uuid4()}/ticket-tiers/{uuid4()}", json={"name": "  "})
    assert resp.status_code == 400
    update.assert_not_awaited()


async def test_update_ticket_tier_is_scoped_to_event(client):
    event_id, tier_id = uuid4(), uuid4()
    update = AsyncMock(return_value=None)
    with patch("events.repository.update_ticket_tier", new=update):
        resp = await client.patch(f"/events/{event_id}/ticket-tiers/{tier_id}", json={"purchase_url": "https://x.io"})
    assert resp.status_code == 404
    assert resp.json() == {"error": "Ticket tier not found"}
    update.assert_awaited_once_with(event_id, tier_id, {"purchase_url": "https://x.io"})


async def test_delete_missing_ticket_tier(client):
    with patch("events.repository.delete_ticket_tier", new=AsyncMock(return_value=False)):
        resp = await client.delete(f"/events/{uuid4()}/ticket-tiers/{uuid4()}")
    assert resp.status_code == 404


async def test_create_tier_feature_requires_text(client):
    resp = await client.post(f"/events/{uuid4()}/ticket-tiers/{uuid4()}/features", json={"feature_text": " "})
    assert resp.status_code == 400
    assert resp.json() == {"error": "feature_text is required"}


async def test_create_tier_feature_for_tier_of_other_event(client):
    with patch("events.repository.get_ticket_tier", new=AsyncMock(return_value=None)):
        resp = await client.post(
            f"/events/{uuid4()}/ticket-tiers/{uuid4()}/features",
            json={"feature_text": "Lunch included"},
        )
    assert resp.status_code == 404
    assert resp.json() == {"error": "Ticket tier not found"}


async def test_create_tier_feature(client):
    tier_id = uuid4()
    feature = {"id": uuid4(), "tier_id": tier_id, "feature": "Lunch included", "position": 0}
    insert = AsyncMock(return_value=feature)
    with (
        patch("events.repository.get_ticket_tier", new=AsyncMock(return_value={"id": tier_id})),
        patch("events.repository.insert_tier_feature", new=insert),
    ):
        resp = await client.post(
            f"/events/{uuid4()}/ticket-tiers/{tier_id}/features",
            json={"feature_text": " Lunch included "},
        )
    assert resp.status_code == 201
    insert.assert_awaited_once_with(tier_id, "Lunch included", None)


async def test_update_tier_feature_maps_text(client):
    tier_id, feature_id = uuid4(), uuid4()
    update = AsyncMock(return_value={"id": feature_id, "feature": "Dinner", "position": 1})
    with (
        patch("events.repository.get_ticket_tier", new=AsyncMock(return_value={"id": tier_id})),
        patch("events.repository.update_tier_feature", new=update),
    ):
        resp = await client.patch(
            f"/events/{uuid4()}/ticket-tiers/{tier_id}/features/{feature_id}",
            json={"feature_text": "Dinner", "position": 1},
        )
    assert resp.status_code == 200
    update.assert_awaited_once_with(tier_id, feature_id, {"position": 1, "feature": "Dinner"})


async def test_delete_missing_tier_feature(client):
    with (
        patch("events.repository.get_ticket_tier", new=AsyncMock(return_value={"id": uuid4()})),
        patch("events.repository.delete_tier_feature", new=AsyncMock(return_value=False)),
    ):
        resp = await client.delete(f"/events/{uuid4()}/ticket-tiers/{uuid4()}/features/{uuid4()}")
    assert resp.status_code == 404
    assert resp.json() == {"error": "Feature not found"}
