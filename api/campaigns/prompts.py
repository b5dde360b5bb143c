"""
Prompt builders for outreach email generation.
"""

from __future__ import annotations


def email_system_prompt(*, sender_name: str, sender_title: str | None, max_words: int, tone: str | None) -> str:
    role = f"{sender_name}, {sender_title}" if sender_title else sender_name
    return (
        f"You write short, personal outreach emails on behalf of {role} at a longevity media brand.\n"
        f"Keep the body under {max_words} words.\n"
        f"Tone: {tone or 'warm, direct and professional'}.\n"
        "Never use emoji, exclamation-heavy hype, or generic marketing filler.\n"
        "Do not include a signature; it is appended separately.\n"
        'Return ONLY valid JSON with this exact schema: {"subject": "...", "body": "..."}.'
    )


def email_user_prompt(campaign: dict, contact: dict, company: dict | None) -> str:
    lines = [
        f"Campaign purpose: {campaign.get('purpose') or ''}",
    ]
    if campaign.get("prompt_context"):
        lines.append(f"Context: {campaign['prompt_context']}")
    if campaign.get("call_to_action"):
        lines.append(f"Call to action: {campaign['call_to_action']}")
    if campaign.get("must_include"):
        lines.append(f"Must include: {campaign['must_include']}")
    if campaign.get("must_avoid"):
        lines.append(f"Must avoid: {campaign['must_avoid']}")

    lines.append("")
    name = " ".join(p for p in (contact.get("first_name"), contact.get("last_name")) if p)
    lines.append(f"Recipient: {name}")
    if contact.get("title"):
        lines.append(f"Title: {contact['title']}")

    company = company or {}
    lines.append(f"Company: {company.get('name') or 'Unknown Company'}")
    if company.get("description"):
        lines.append(f"Company description: {company['description']}")
    if company.get("category"):
        lines.append(f"Category: {company['category']}")

    lines.append("")
    lines.append("Write the email now. Return only the JSON.")
    return "\n".join(lines)
