from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, patch
from uuid import uuid4

import pytest
from fastapi import HTTPException

from campaigns import service
from core import anthropic, resend

NOW = datetime(2026, 3, 1, tzinfo=timezone.utc)


def _campaign(**overrides):
    row = {
        "id": uuid4(),
        "name": "Spring outreach",
        "purpose": "Invite founders",
        "status": "ready",
        "sender_profile_id": None,
        "reply_to": None,
        "min_delay_seconds": 120,
        "max_delay_seconds": 300,
        "max_words": 100,
        "created_at": NOW,
    }
    row.update(overrides)
    return row


SENDER = {"id": uuid4(), "name": "Sam Editor", "email": "sam@brand.com", "title": "Editor", "signature": "Sam\nBrand"}


def test_parse_generated_email_json():
    raw = '```json\n{"subject": "Quick question", "body": "Hi Jane,\\n\\nLoved your work."}\n```'
    assert service.parse_generated_email(raw) == ("Quick question", "Hi Jane,\n\nLoved your work.")


def test_parse_generated_email_subject_line_fallback():
    raw = "Subject: Hello there\nHi Jane,\nThanks."
    assert service.parse_generated_email(raw) == ("Hello there", "Hi Jane,\nThanks.")


def test_body_to_html_escapes_and_appends_signature():
    html = service.body_to_html("Hi <Jane>,\n\nLine one\nLine two", "Sam\nBrand")
    assert html == "<p>Hi &lt;Jane&gt;,</p><p>Line one<br>Line two</p><p>Sam<br>Brand</p>"


def test_recommended_delay_within_bounds():
    for _ in range(20):
        assert 120 <= service.recommended_delay(_campaign()) <= 300


async def test_create_campaign_requires_name_and_purpose(client):
    resp = await client.post("/campaigns", json={"name": "Only name"})
    assert resp.status_code == 400
    assert resp.json() == {"error": "Name and purpose are required"}


async def test_create_campaign_applies_defaults(client):
    insert = AsyncMock(return_value=_campaign(status="draft"))
    with patch("campaigns.repository.insert_campaign", new=insert):
        resp = await client.post("/campaigns", json={"name": "Spring", "purpose": "Invite"})
    assert resp.status_code == 201
    fields = insert.await_args.args[0]
    assert fields["status"] == "draft"
    assert fields["max_words"] == 100
    assert (fields["send_window_start"], fields["send_window_end"]) == (9, 17)
    assert (fields["min_delay_seconds"], fields["max_delay_seconds"]) == (120, 300)
    assert fields["daily_send_limit"] == 50
    assert fields["one_per_company"] is True
    assert fields["company_cooldown_days"] == 30


async def test_list_campaigns_groups_counts(client):
    row = _campaign()
    row.update(total_recipients=5, sent_count=2, generated_count=1, approved_count=1, suppressed_count=1)
    with patch("campaigns.repository.list_campaigns", new=AsyncMock(return_value=[row])):
        resp = await client.get("/campaigns")
    counts = resp.json()[0]["recipient_counts"]
    assert counts == {"total": 5, "sent": 2, "generated": 1, "approved": 1, "suppressed": 1}


async def test_add_recipients_skips_existing_and_emailless(client):
    campaign = _campaign()
    with_email = [{"id": uuid4(), "company_id": uuid4(), "email": "a@x.com"}, {"id": uuid4(), "company_id": None, "email": "b@y.com"}]
    insert = AsyncMock(return_value=[{"id": str(uuid4())}])
    with (
        patch("campaigns.repository.get_campaign", new=AsyncMock(return_value=campaign)),
        patch("campaigns.repository.contacts_with_email", new=AsyncMock(return_value=with_email)),
        patch("campaigns.repository.existing_recipient_contact_ids", new=AsyncMock(return_value={with_email[0]["id"]})),
        patch("campaigns.repository.insert_recipients", new=insert),
    ):
        resp = await client.post(
            f"/campaigns/{campaign['id']}/recipients",
            json={"contact_ids": [str(c["id"]) for c in with_email] + [str(uuid4())]},
        )
    assert resp.status_code == 201
    body = resp.json()
    assert body["added"] == 1
    assert body["skipped"] == 2
    assert insert.await_args.args[1] == [with_email[1]]


async def test_add_recipients_without_emails(client):
    with (
        patch("campaigns.repository.get_campaign", new=AsyncMock(return_value=_campaign())),
        patch("campaigns.repository.contacts_with_email", new=AsyncMock(return_value=[])),
    ):
        resp = await client.post(f"/campaigns/{uuid4()}/recipients", json={"contact_ids": [str(uuid4())]})
    assert resp.status_code == 400
    assert resp.json() == {"error": "No contacts with email addresses found"}


async def test_send_requires_resend(client):
    resp = await client.post(f"/campaigns/{uuid4()}/send")
    assert resp.status_code == 500


async def test_send_rejects_draft_campaign(client, monkeypatch):
    monkeypatch.setenv("RESEND_API_KEY", "re_key")
    with patch("campaigns.repository.get_campaign", new=AsyncMock(return_value=_campaign(status="draft"))):
        resp = await client.post(f"/campaigns/{uuid4()}/send")
    assert resp.status_code == 400


async def test_send_completes_campaign_when_nothing_approved(client, monkeypatch):
    monkeypatch.setenv("RESEND_API_KEY", "re_key")
    campaign = _campaign(status="sending")
    set_status = AsyncMock()
    with (
        patch("campaigns.repository.get_campaign", new=AsyncMock(return_value=campaign)),
        patch("campaigns.repository.get_sender_profile", new=AsyncMock(return_value=SENDER)),
        patch("campaigns.repository.next_approved_recipient", new=AsyncMock(return_value=None)),
        patch("campaigns.repository.set_campaign_status", new=set_status),
    ):
        resp = await client.post(f"/campaigns/{campaign['id']}/send")
    assert resp.json()["done"] is True
    set_status.assert_awaited_once_with(campaign["id"], "completed")


async def test_send_next_sends_and_records(monkeypatch):
    monkeypatch.setenv("RESEND_API_KEY", "re_key")
    campaign = _campaign(status="ready")
    recipient = {
        "id": uuid4(),
        "contact_id": uuid4(),
        "subject": "Hello",
        "body": "Hi Jane",
        "contact": {"email": "jane@acme.com", "outreach_status": "not_contacted"},
    }
    send = AsyncMock(return_value="re_abc")
    mark_sent = AsyncMock()
    set_status = AsyncMock()
    contacted = AsyncMock()
    with (
        patch("campaigns.repository.get_campaign", new=AsyncMock(return_value=campaign)),
        patch("campaigns.repository.get_sender_profile", new=AsyncMock(return_value=SENDER)),
        patch("campaigns.repository.next_approved_recipient", new=AsyncMock(return_value=recipient)),
        patch("core.resend.send_email", new=send),
        patch("campaigns.repository.mark_recipient_sent", new=mark_sent),
        patch("campaigns.repository.insert_outreach_log", new=AsyncMock()),
        patch("campaigns.repository.mark_contact_contacted", new=contacted),
        patch("campaigns.repository.set_campaign_status", new=set_status),
    ):
        result = await service.send_next(campaign["id"])

    assert result["sent"] is True
    assert 120 <= result["recommended_delay_seconds"] <= 300
    kwargs = send.await_args.kwargs
    assert kwargs["sender"] == "Sam Editor <sam@brand.com>"
    assert kwargs["reply_to"] == "sam@brand.com"
    assert kwargs["html"].endswith("<p>Sam<br>Brand</p>")
    mark_sent.assert_awaited_once()
    contacted.assert_awaited_once_with(recipient["contact_id"])
    set_status.assert_awaited_once_with(campaign["id"], "sending")


async def test_send_next_marks_missing_email_failed(monkeypatch):
    monkeypatch.setenv("RESEND_API_KEY", "re_key")
    recipient = {"id": uuid4(), "contact_id": uuid4(), "contact": {"email": None}}
    failed = AsyncMock()
    with (
        patch("campaigns.repository.get_campaign", new=AsyncMock(return_value=_campaign())),
        patch("campaigns.repository.get_sender_profile", new=AsyncMock(return_value=SENDER)),
        patch("campaigns.repository.next_approved_recipient", new=AsyncMock(return_value=recipient)),
        patch("campaigns.repository.mark_recipient_failed", new=failed),
    ):
        result = await service.send_next(uuid4())
    assert result["sent"] is False
    failed.assert_awaited_once_with(recipient["id"], "Contact has no email address")


async def test_suppress_endpoint_requires_company(client):
    resp = await client.post("/campaigns/suppress", json={})
    assert resp.status_code == 400
    assert resp.json() == {"error": "company_id is required"}


async def test_suppress_endpoint_builds_reason(client):
    company_id = uuid4()
    contact = {"first_name": "Jane", "last_name": "Doe", "company_name": "Acme"}
    with (
        patch("campaigns.repository.get_contact_with_company", new=AsyncMock(return_value=contact)),
        patch("campaigns.repository.suppress_company_recipients", new=AsyncMock(return_value=3)),
    ):
        resp = await client.post(
            "/campaigns/suppress",
            json={"company_id": str(company_id), "contact_id": str(uuid4())},
        )
    body = resp.json()
    assert body["suppressed"] == 3
    assert body["reason"].startswith("Jane Doe at Acme responded on ")


async def test_generate_emails_writes_each_pending_recipient(monkeypatch):
    monkeypatch.setenv("ANTHROPIC_API_KEY", "key")
    campaign = _campaign(status="draft")
    pending = [{"id": uuid4(), "contact_id": uuid4()}, {"id": uuid4(), "contact_id": uuid4()}]
    contact = {"first_name": "Jane", "last_name": "Doe", "company_name": "Acme"}
    save = AsyncMock()
    set_status = AsyncMock()
    with (
        patch("campaigns.repository.get_campaign", new=AsyncMock(return_value=campaign)),
        patch("campaigns.repository.get_sender_profile", new=AsyncMock(return_value=SENDER)),
        patch("campaigns.repository.list_recipients", new=AsyncMock(return_value=pending)),
        patch("campaigns.repository.get_contact_with_company", new=AsyncMock(side_effect=[contact, None])),
        patch("core.anthropic.complete", new=AsyncMock(return_value='{"subject": "Hi", "body": "Hello Jane"}')),
        patch("campaigns.repository.save_generated_email", new=save),
        patch("campaigns.repository.set_campaign_status", new=set_status),
    ):
        result = await service.generate_emails(campaign["id"])

    assert result["generated"] == 1
    assert result["errors"] == 1
    save.assert_awaited_once_with(pending[0]["id"], subject="Hi", body="Hello Jane", body_html="<p>Hello Jane</p>")
    assert [c.args[1] for c in set_status.await_args_list] == ["generating", "ready"]


def test_email_html_prefers_stored_html():
    recipient = {"body": "Hi Jane", "body_html": '<p>Hi Jane, <a href="https://x.io">edited link</a></p>'}
    assert service.email_html(recipient, "Sam") == '<p>Hi Jane, <a href="https://x.io">edited link</a></p><p>Sam</p>'


def test_email_html_falls_back_to_body():
    assert service.email_html({"body": "Hi Jane", "body_html": "  "}, None) == "<p>Hi Jane</p>"


async def test_send_next_uses_edited_html_and_default_subject(monkeypatch):
    monkeypatch.setenv("RESEND_API_KEY", "re_key")
    recipient = {
        "id": uuid4(),
        "contact_id": uuid4(),
        "subject": "",
        "body": "Hi Jane",
        "body_html": '<p>Hi Jane, <a href="https://x.io">edited link</a></p>',
        "contact": {"email": "jane@acme.com", "outreach_status": "contacted"},
    }
    send = AsyncMock(return_value="re_abc")
    mark_sent = AsyncMock()
    with (
        patch("campaigns.repository.get_campaign", new=AsyncMock(return_value=_campaign(status="sending"))),
        patch("campaigns.repository.get_sender_profile", new=AsyncMock(return_value=SENDER)),
        patch("campaigns.repository.next_approved_recipient", new=AsyncMock(return_value=recipient)),
        patch("core.resend.send_email", new=send),
        patch("campaigns.repository.mark_recipient_sent", new=mark_sent),
        patch("campaigns.repository.insert_outreach_log", new=AsyncMock()),
        patch("campaigns.repository.mark_contact_contacted", new=AsyncMock()),
    ):
        await service.send_next(uuid4())

    kwargs = send.await_args.kwargs
    assert kwargs["subject"] == "Quick note"
    assert kwargs["html"] == '<p>Hi Jane, <a href="https://x.io">edited link</a></p><p>Sam<br>Brand</p>'
    mark_sent.assert_awaited_once_with(recipient["id"], resend_id="re_abc")


async def test_send_next_marks_recipient_failed_on_provider_error(monkeypatch):
    monkeypatch.setenv("RESEND_API_KEY", "re_key")
    recipient = {
        "id": uuid4(),
        "contact_id": uuid4(),
        "subject": "Hello",
        "body": "Hi Jane",
        "contact": {"email": "jane@acme.com"},
    }
    failed = AsyncMock()
    mark_sent = AsyncMock()
    with (
        patch("campaigns.repository.get_campaign", new=AsyncMock(return_value=_campaign())),
        patch("campaigns.repository.get_sender_profile", new=AsyncMock(return_value=SENDER)),
        patch("campaigns.repository.next_approved_recipient", new=AsyncMock(return_value=recipient)),
        patch("core.resend.send_email", new=AsyncMock(side_effect=resend.ResendError("Resend send failed: 422"))),
        patch("campaigns.repository.mark_recipient_failed", new=failed),
        patch("campaigns.repository.mark_recipient_sent", new=mark_sent),
    ):
        result = await service.send_next(uuid4())

    assert result == {
        "sent": False,
        "done": False,
        "recipient_id": recipient["id"],
        "error": "Resend send failed: 422",
    }
    failed.assert_awaited_once_with(recipient["id"], "Resend send failed: 422")
    mark_sent.assert_not_awaited()


async def test_recipient_routes_are_scoped_to_campaign(client):
    campaign_id, recipient_id = uuid4(), uuid4()
    get = AsyncMock(return_value=None)
    update = AsyncMock(return_value=None)
    delete = AsyncMock(return_value=False)
    url = f"/campaigns/{campaign_id}/recipients/{recipient_id}"
    with (
        patch("campaigns.repository.get_recipient", new=get),
        patch("campaigns.repository.update_recipient", new=update),
        patch("campaigns.repository.delete_recipient", new=delete),
    ):
        got = await client.get(url)
        patched = await client.patch(url, json={"approved": True})
        deleted = await client.delete(url)

    assert [got.status_code, patched.status_code, deleted.status_code] == [404, 404, 404]
    assert got.json() == {"error": "Recipient not found"}
    get.assert_awaited_once_with(campaign_id, recipient_id)
    update.assert_awaited_once_with(campaign_id, recipient_id, {"approved": True, "status": "approved"})
    delete.assert_awaited_once_with(campaign_id, recipient_id)


async def test_regenerate_requires_anthropic(client):
    resp = await client.post(f"/campaigns/{uuid4()}/recipients/{uuid4()}/regenerate")
    assert resp.status_code == 500
    assert resp.json() == {"error": "Anthropic API key not configured"}


async def test_regenerate_unknown_recipient(client, monkeypatch):
    monkeypatch.setenv("ANTHROPIC_API_KEY", "key")
    campaign = _campaign(sender_profile_id=SENDER["id"])
    with (
        patch("campaigns.repository.get_campaign", new=AsyncMock(return_value=campaign)),
        patch("campaigns.repository.get_sender_profile", new=AsyncMock(return_value=SENDER)),
        patch("campaigns.repository.get_recipient", new=AsyncMock(return_value=None)),
    ):
        resp = await client.post(f"/campaigns/{campaign['id']}/recipients/{uuid4()}/regenerate")
    assert resp.status_code == 404
    assert resp.json() == {"error": "Recipient not found"}


async def test_regenerate_rewrites_email_and_clears_approval(client, monkeypatch):
    monkeypatch.setenv("ANTHROPIC_API_KEY", "key")
    campaign = _campaign(sender_profile_id=SENDER["id"])
    recipient = {"id": uuid4(), "contact_id": uuid4(), "status": "approved", "approved": True}
    contact = {"first_name": "Jane", "last_name": "Doe", "company_name": "Acme"}
    saved = {**recipient, "subject": "New", "body": "Fresh take", "status": "generated", "approved": False}
    save = AsyncMock(return_value=saved)
    with (
        patch("campaigns.repository.get_campaign", new=AsyncMock(return_value=campaign)),
        patch("campaigns.repository.get_sender_profile", new=AsyncMock(return_value=SENDER)),
        patch("campaigns.repository.get_recipient", new=AsyncMock(return_value=recipient)),
        patch("campaigns.repository.get_contact_with_company", new=AsyncMock(return_value=contact)),
        patch("core.anthropic.complete", new=AsyncMock(return_value='{"subject": "New", "body": "Fresh take"}')),
        patch("campaigns.repository.save_generated_email", new=save),
    ):
        resp = await client.post(f"/campaigns/{campaign['id']}/recipients/{recipient['id']}/regenerate")

    assert resp.status_code == 200
    assert resp.json()["status"] == "generated"
    assert resp.json()["approved"] is False
    save.assert_awaited_once_with(recipient["id"], subject="New", body="Fresh take", body_html="<p>Fresh take</p>")


async def test_regenerate_reports_model_failure(monkeypatch):
    monkeypatch.setenv("ANTHROPIC_API_KEY", "key")
    recipient = {"id": uuid4(), "contact_id": uuid4()}
    save = AsyncMock()
    with (
        patch("campaigns.repository.get_campaign", new=AsyncMock(return_value=_campaign())),
        patch("campaigns.repository.get_sender_profile", new=AsyncMock(return_value=SENDER)),
        patch("campaigns.repository.get_recipient", new=AsyncMock(return_value=recipient)),
        patch("campaigns.repository.get_contact_with_company", new=AsyncMock(return_value={"first_name": "Jane"})),
        patch("core.anthropic.complete", new=AsyncMock(side_effect=anthropic.AnthropicError("overloaded"))),
        patch("campaigns.repository.save_generated_email", new=save),
        pytest.raises(HTTPException) as excinfo,
    ):
        await service.regenerate_recipient(uuid4(), recipient["id"])

    assert excinfo.value.status_code == 502
    save.assert_not_awaited()


async def test_available_contacts_flags_companies_in_cooldown(client):
    campaign = _campaign(company_cooldown_days=14)
    acme, globex = uuid4(), uuid4()
    contacts = [
        {"id": uuid4(), "first_name": "Jane", "last_name": "Doe", "company_id": acme},
        {"id": uuid4(), "first_name": "Ann", "last_name": "Lee", "company_id": globex},
        {"id": uuid4(), "first_name": "Bo", "last_name": None, "company_id": None},
    ]
    sent_at = datetime.now(timezone.utc) - timedelta(days=3, hours=1)
    listing = AsyncMock(return_value=contacts)
    sends = AsyncMock(return_value=[{"company_id": acme, "sent_at": sent_at, "campaign_name": "Winter push"}])
    with (
        patch("campaigns.repository.get_campaign", new=AsyncMock(return_value=campaign)),
        patch("campaigns.repository.available_contacts", new=listing),
        patch("campaigns.repository.recent_company_sends", new=sends),
    ):
        resp = await client.get(f"/campaigns/{campaign['id']}/available-contacts", params={"search": "  doe "})

    assert resp.status_code == 200
    body = resp.json()
    assert len(body["contacts"]) == 3
    assert body["cooldown_warnings"] == [
        {
            "contact_id": str(contacts[0]["id"]),
            "contact_name": "Jane Doe",
            "campaign_name": "Winter push",
            "days_ago": 3,
        }
    ]
    assert listing.await_args.kwargs["search"] == "doe"
    assert listing.await_args.kwargs["has_email"] is True
    assert sends.await_args.kwargs == {"within_days": 14}
    assert set(sends.await_args.args[0]) == {acme, globex}


async def test_available_contacts_skips_cooldown_lookup_when_disabled(client):
    campaign = _campaign(company_cooldown_days=0)
    sends = AsyncMock()
    with (
        patch("campaigns.repository.get_campaign", new=AsyncMock(return_value=campaign)),
        patch("campaigns.repository.available_contacts", new=AsyncMock(return_value=[{"id": uuid4(), "company_id": uuid4()}])),
        patch("campaigns.repository.recent_company_sends", new=sends),
    ):
        resp = await client.get(f"/campaigns/{campaign['id']}/available-contacts", params={"has_email": "false"})

    assert resp.json()["cooldown_warnings"] == []
    sends.assert_not_awaited()
