"""
Campaign business logic.

Scope:
- campaign and sender-profile CRUD
- recipient list management
- AI email generation for pending recipients
- sending one approved email per call (the caller paces the loop)
- manual suppression when a company responds
"""

from __future__ import annotations

import html
import json
import logging
import random
from datetime import date, datetime, timezone
from uuid import UUID

from fastapi import HTTPException

from core import anthropic, resend

from . import prompts, repository, schemas, suppression

logger = logging.getLogger(__name__)

DEFAULT_SUBJECT = "Quick note"


async def _require_campaign(campaign_id: UUID) -> dict:
    campaign = await repository.get_campaign(campaign_id)
    if campaign is None:
        raise HTTPException(status_code=404, detail="Campaign not found")
    return campaign


# ---------------------------------------------------------------------------
# Campaigns
# ---------------------------------------------------------------------------


async def list_campaigns(*, status: str | None, search: str | None) -> list[dict]:
    rows = await repository.list_campaigns(status=status, search=(search or "").strip() or None)
    for row in rows:
        row["recipient_counts"] = {
            "total": int(row.pop("total_recipients")),
            "sent": int(row.pop("sent_count")),
            "generated": int(row.pop("generated_count")),
            "approved": int(row.pop("approved_count")),
            "suppressed": int(row.pop("suppressed_count")),
        }
    return rows


async def create_campaign(payload: schemas.CampaignCreate) -> dict:
    name = payload.name.strip()
    purpose = payload.purpose.strip()
    if not name or not purpose:
        raise HTTPException(status_code=400, detail="Name and purpose are required")
    if payload.min_delay_seconds > payload.max_delay_seconds:
        raise HTTPException(status_code=400, detail="min_delay_seconds cannot exceed max_delay_seconds")

    fields = payload.model_dump()
    fields.update(name=name, purpose=purpose, status="draft")
    row = await repository.insert_campaign(fields)
    logger.info("campaign_created id=%s name=%s", row["id"], name)
    return row


async def get_campaign(campaign_id: UUID) -> dict:
    campaign = await _require_campaign(campaign_id)
    campaign["sender_profile"] = await repository.get_sender_profile(campaign.get("sender_profile_id"))
    return campaign


async def update_campaign(campaign_id: UUID, payload: schemas.CampaignUpdate) -> dict:
    fields = payload.model_dump(exclude_unset=True)
    row = await repository.update_campaign(campaign_id, fields)
    if row is None:
        raise HTTPException(status_code=404, detail="Campaign not found")
    return row


async def delete_campaign(campaign_id: UUID) -> dict:
    if not await repository.delete_campaign(campaign_id):
        raise HTTPException(status_code=404, detail="Campaign not found")
    return {"success": True}


# ---------------------------------------------------------------------------
# Recipients
# ---------------------------------------------------------------------------


async def list_recipients(campaign_id: UUID, *, status: str | None) -> list[dict]:
    await _require_campaign(campaign_id)
    return await repository.list_recipients(campaign_id, status=status)


async def add_recipients(campaign_id: UUID, payload: schemas.RecipientsAdd) -> dict:
    if not payload.contact_ids:
        raise HTTPException(status_code=400, detail="contact_ids are required")
    await _require_campaign(campaign_id)

    contacts = await repository.contacts_with_email(payload.contact_ids)
    if not contacts:
        raise HTTPException(status_code=400, detail="No contacts with email addresses found")

    existing = await repository.existing_recipient_contact_ids(campaign_id, [c["id"] for c in contacts])
    new_contacts = [c for c in contacts if c["id"] not in existing]
    inserted = await repository.insert_recipients(campaign_id, new_contacts)
    return {
        "added": len(inserted),
        "skipped": len(payload.contact_ids) - len(inserted),
        "recipients": inserted,
    }


async def get_recipient(campaign_id: UUID, recipient_id: UUID) -> dict:
    row = await repository.get_recipient(campaign_id, recipient_id)
    if row is None:
        raise HTTPException(status_code=404, detail="Recipient not found")
    return row


async def update_recipient(campaign_id: UUID, recipient_id: UUID, payload: schemas.RecipientUpdate) -> dict:
    fields = payload.model_dump(exclude_unset=True)
    if fields.get("approved") is True and "status" not in fields:
        fields["status"] = "approved"
    row = await repository.update_recipient(campaign_id, recipient_id, fields)
    if row is None:
        raise HTTPException(status_code=404, detail="Recipient not found")
    return row


async def bulk_update_recipients(payload: schemas.RecipientsBulkStatus) -> dict:
    if not payload.ids:
        raise HTTPException(status_code=400, detail="ids are required")
    updated = await repository.bulk_set_recipient_status(payload.ids, payload.status)
    return {"updated": updated}


async def delete_recipient(campaign_id: UUID, recipient_id: UUID) -> dict:
    if not await repository.delete_recipient(campaign_id, recipient_id):
        raise HTTPException(status_code=404, detail="Recipient not found")
    return {"success": True}


# ---------------------------------------------------------------------------
# Generation
# ---------------------------------------------------------------------------


def parse_generated_email(raw: str) -> tuple[str, str]:
    """
    Read {"subject", "body"} from the model reply.

    Falls back to a leading "Subject:" line when the reply is not JSON.
    """
    cleaned = anthropic.strip_code_fence(raw)
    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError:
        data = None
    if isinstance(data, dict) and data.get("body"):
        return str(data.get("subject") or "").strip(), str(data["body"]).strip()

    subject = ""
    body_lines: list[str] = []
    for line in cleaned.splitlines():
        if not subject and line.lower().startswith("subject:"):
            subject = line.split(":", 1)[1].strip()
            continue
        body_lines.append(line)
    return subject, "\n".join(body_lines).strip()


def _signature_html(signature: str | None) -> str:
    if not signature:
        return ""
    return f"<p>{html.escape(signature).replace(chr(10), '<br>')}</p>"


def body_to_html(body: str, signature: str | None = None) -> str:
    paragraphs = [p for p in (body or "").split("\n\n") if p.strip()]
    parts = [f"<p>{html.escape(p).replace(chr(10), '<br>')}</p>" for p in paragraphs]
    return "".join(parts) + _signature_html(signature)


def email_html(recipient: dict, signature: str | None) -> str:
    """Stored HTML wins over the plain body; the signature is always appended."""
    stored = (recipient.get("body_html") or "").strip()
    if not stored:
        return body_to_html(recipient.get("body") or "", signature)
    return stored + _signature_html(signature)


def _system_prompt(campaign: dict, sender: dict) -> str:
    return prompts.email_system_prompt(
        sender_name=sender["name"],
        sender_title=sender.get("title"),
        max_words=int(campaign.get("max_words") or 100),
        tone=campaign.get("tone"),
    )


async def _write_email(campaign: dict, system: str, contact: dict) -> tuple[str, str]:
    company = {
        "name": contact.get("company_name"),
        "description": contact.get("company_description"),
        "category": contact.get("company_category"),
    }
    raw = await anthropic.complete(
        system=system,
        prompt=prompts.email_user_prompt(campaign, contact, company),
        model="quality",
        max_tokens=1024,
        temperature=0.8,
    )
    return parse_generated_email(raw)


async def _require_generation_context(campaign_id: UUID) -> tuple[dict, dict]:
    if not anthropic.is_configured():
        raise HTTPException(status_code=500, detail="Anthropic API key not configured")

    campaign = await _require_campaign(campaign_id)
    sender = await repository.get_sender_profile(campaign.get("sender_profile_id"))
    if sender is None:
        raise HTTPException(status_code=400, detail="Campaign has no sender profile configured")
    return campaign, sender


async def generate_emails(campaign_id: UUID) -> dict:
    campaign, sender = await _require_generation_context(campaign_id)

    pending = await repository.list_recipients(campaign_id, status="pending")
    if not pending:
        return {"message": "No pending recipients to generate", "generated": 0, "errors": 0}

    await repository.set_campaign_status(campaign_id, "generating")
    system = _system_prompt(campaign, sender)

    generated = 0
    errors = 0
    for recipient in pending:
        contact = await repository.get_contact_with_company(recipient["contact_id"])
        if contact is None:
            logger.error("generate_contact_missing recipient_id=%s", recipient["id"])
            errors += 1
            continue
        try:
            subject, body = await _write_email(campaign, system, contact)
        except anthropic.AnthropicError as exc:
            logger.error("generate_email_failed recipient_id=%s error=%s", recipient["id"], exc)
            errors += 1
            continue
        if not body:
            errors += 1
            continue
        await repository.save_generated_email(
            recipient["id"],
            subject=subject,
            body=body,
            body_html=body_to_html(body),
        )
        generated += 1

    await repository.set_campaign_status(campaign_id, "ready" if generated else campaign["status"])
    logger.info("campaign_generated id=%s generated=%s errors=%s", campaign_id, generated, errors)
    return {"message": f"Generated {generated} emails", "generated": generated, "errors": errors}


async def regenerate_recipient(campaign_id: UUID, recipient_id: UUID) -> dict:
    """Rewrite one recipient's email; the result needs approval again."""
    campaign, sender = await _require_generation_context(campaign_id)
    recipient = await repository.get_recipient(campaign_id, recipient_id)
    if recipient is None:
        raise HTTPException(status_code=404, detail="Recipient not found")
    contact = await repository.get_contact_with_company(recipient["contact_id"])
    if contact is None:
        raise HTTPException(status_code=404, detail="Contact not found")

    try:
        subject, body = await _write_email(campaign, _system_prompt(campaign, sender), contact)
    except anthropic.AnthropicError as exc:
        logger.error("regenerate_email_failed recipient_id=%s error=%s", recipient_id, exc)
        raise HTTPException(status_code=502, detail=str(exc)) from exc
    if not body:
        raise HTTPException(status_code=502, detail="Model returned an empty email")

    row = await repository.save_generated_email(
        recipient_id,
        subject=subject,
        body=body,
        body_html=body_to_html(body),
    )
    if row is None:
        raise HTTPException(status_code=404, detail="Recipient not found")
    logger.info("campaign_email_regenerated campaign_id=%s recipient_id=%s", campaign_id, recipient_id)
    return row


# ---------------------------------------------------------------------------
# Available contacts
# ---------------------------------------------------------------------------


def _contact_name(contact: dict) -> str:
    return " ".join(p for p in (contact.get("first_name"), contact.get("last_name")) if p)


async def available_contacts(
    campaign_id: UUID,
    *,
    search: str | None = None,
    company_id: UUID | None = None,
    category: str | None = None,
    event_id: UUID | None = None,
    status: str | None = None,
    title_search: str | None = None,
    has_email: bool = True,
    not_contacted_days: int | None = None,
) -> dict:
    """
    Contacts that could be added to the campaign.

    Each contact whose company received a campaign email inside the
    campaign's cooldown window gets a warning; nothing is filtered out.
    """
    campaign = await _require_campaign(campaign_id)
    contacts = await repository.available_contacts(
        search=(search or "").strip() or None,
        company_id=company_id,
        category=category,
        event_id=event_id,
        outreach_status=status,
        title_search=(title_search or "").strip() or None,
        has_email=has_email,
        not_contacted_days=not_contacted_days,
    )

    cooldown_days = campaign.get("company_cooldown_days")
    if cooldown_days is None:
        cooldown_days = 30
    warnings: list[dict] = []
    company_ids = list({c["company_id"] for c in contacts if c.get("company_id")})
    if cooldown_days > 0 and company_ids:
        sends = await repository.recent_company_sends(company_ids, within_days=cooldown_days)
        latest = {row["company_id"]: row for row in sends}
        now = datetime.now(timezone.utc)
        for contact in contacts:
            send = latest.get(contact.get("company_id"))
            if send is None:
                continue
            warnings.append(
                {
                    "contact_id": contact["id"],
                    "contact_name": _contact_name(contact),
                    "campaign_name": send["campaign_name"],
                    "days_ago": (now - send["sent_at"]).days,
                }
            )
    return {"contacts": contacts, "cooldown_warnings": warnings}


# ---------------------------------------------------------------------------
# Sending
# ---------------------------------------------------------------------------


def recommended_delay(campaign: dict) -> int:
    low = int(campaign.get("min_delay_seconds") or 0)
    high = int(campaign.get("max_delay_seconds") or low)
    if high < low:
        low, high = high, low
    return random.randint(low, high)


async def send_next(campaign_id: UUID) -> dict:
    if not resend.is_configured():
        raise HTTPException(status_code=500, detail="Resend API key not configured")

    campaign = await _require_campaign(campaign_id)
    if campaign["status"] not in ("sending", "ready"):
        raise HTTPException(status_code=400, detail="Campaign must be in ready or sending status")

    sender = await repository.get_sender_profile(campaign.get("sender_profile_id"))
    if sender is None:
        raise HTTPException(status_code=400, detail="Campaign has no sender profile configured")

    recipient = await repository.next_approved_recipient(campaign_id)
    if recipient is None:
        await repository.set_campaign_status(campaign_id, "completed")
        return {"sent": False, "done": True, "message": "No approved recipients remaining"}

    contact = recipient.get("contact") or {}
    to_email = (contact.get("email") or "").strip()
    if not to_email:
        await repository.mark_recipient_failed(recipient["id"], "Contact has no email address")
        return {"sent": False, "done": False, "recipient_id": recipient["id"], "error": "Contact has no email address"}

    body_html = email_html(recipient, sender.get("signature"))
    subject = recipient.get("subject") or DEFAULT_SUBJECT
    try:
        message_id = await resend.send_email(
            sender=f"{sender['name']} <{sender['email']}>",
            to=to_email,
            subject=subject,
            html=body_html,
            reply_to=campaign.get("reply_to") or sender["email"],
        )
    except resend.ResendError as exc:
        logger.error("campaign_send_failed recipient_id=%s error=%s", recipient["id"], exc)
        await repository.mark_recipient_failed(recipient["id"], str(exc)[:500])
        return {"sent": False, "done": False, "recipient_id": recipient["id"], "error": str(exc)[:500]}

    await repository.mark_recipient_sent(recipient["id"], resend_id=message_id)
    await repository.insert_outreach_log(
        contact_id=recipient["contact_id"],
        campaign_id=campaign_id,
        subject=subject,
    )
    await repository.mark_contact_contacted(recipient["contact_id"])
    if campaign["status"] == "ready":
        await repository.set_campaign_status(campaign_id, "sending")

    logger.info("campaign_email_sent campaign_id=%s recipient_id=%s resend_id=%s", campaign_id, recipient["id"], message_id)
    return {
        "sent": True,
        "done": False,
        "recipient_id": recipient["id"],
        "resend_id": message_id,
        "recommended_delay_seconds": recommended_delay(campaign),
    }


# ---------------------------------------------------------------------------
# Suppression
# ---------------------------------------------------------------------------


async def suppress(payload: schemas.SuppressRequest) -> dict:
    if payload.company_id is None:
        raise HTTPException(status_code=400, detail="company_id is required")

    contact = None
    if payload.contact_id is not None:
        contact = await repository.get_contact_with_company(payload.contact_id)
    company_name = contact.get("company_name") if contact else await repository.get_company_name(payload.company_id)

    reason = suppression.build_reason(
        first_name=(contact or {}).get("first_name"),
        last_name=(contact or {}).get("last_name"),
        company_name=company_name,
        responded_on=date.today(),
    )
    count = await suppression.suppress_company_recipients(payload.company_id, reason)
    return {"suppressed": count, "reason": reason}


# ---------------------------------------------------------------------------
# Sender profiles
# ---------------------------------------------------------------------------


async def create_sender_profile(payload: schemas.SenderProfileCreate) -> dict:
    return await repository.insert_sender_profile(payload.model_dump())


async def update_sender_profile(profile_id: UUID, payload: schemas.SenderProfileUpdate) -> dict:
    row = await repository.update_sender_profile(profile_id, payload.model_dump(exclude_unset=True))
    if row is None:
        raise HTTPException(status_code=404, detail="Sender profile not found")
    return row


async def delete_sender_profile(profile_id: UUID) -> dict:
    if not await repository.delete_sender_profile(profile_id):
        raise HTTPException(status_code=404, detail="Sender profile not found")
    return {"success": True}
