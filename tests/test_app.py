from fastapi.routing import APIRoute

from main import app


def test_app_registers_feature_routes():
    paths = {route.path for route in app.routes if isinstance(route, APIRoute)}
    for path in (
        "/auth/login",
        "/companies",
        "/contacts/{contact_id}/outreach",
        "/articles/{article_id}/enhance",
        "/events/{event_id}/duplicate",
        "/events/{event_id}/ticket-tiers/{tier_id}/features/{feature_id}",
        "/news/ingest",
        "/campaigns/{campaign_id}/send",
        "/campaigns/{campaign_id}/available-contacts",
        "/campaigns/{campaign_id}/recipients/{recipient_id}/regenerate",
        "/directory/news/months/{slug}",
        "/webhooks/resend",
        "/youtube-search",
    ):
        assert path in paths


async def test_health(anon_client):
    resp = await anon_client.get("/health")
    assert resp.json() == {"status": "ok"}
