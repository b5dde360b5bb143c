"""
Anthropic Messages API client helpers.

Used endpoint:
- POST /v1/messages -> {"content": [{"type": "text", "text": "..."}], ...}

Callers pick a model alias ("default", "fast", "quality", "best") per call.
"""

from __future__ import annotations

from typing import Any

import httpx

from core import settings

API_BASE_URL = "https://api.anthropic.com"
API_VERSION = "2023-06-01"

MODELS = {
    "fast": "claude-haiku-4-5-20251001",
    "quality": "claude-sonnet-4-5-20250929",
    "best": "claude-opus-4-1-20250805",
}


class AnthropicError(RuntimeError):
    pass


def api_key() -> str:
    return settings.env_str("ANTHROPIC_API_KEY")


def is_configured() -> bool:
    return bool(api_key())


def resolve_model(model: str | None = None) -> str:
    alias = (model or "default").strip()
    if alias == "default":
        return settings.env_str("ANTHROPIC_MODEL") or MODELS["quality"]
    return MODELS.get(alias, alias)


async def complete(
    *,
    prompt: str,
    system: str | None = None,
    model: str | None = None,
    max_tokens: int = 1024,
    temperature: float | None = None,
    timeout_s: float = 90.0,
    transport: httpx.AsyncBaseTransport | None = None,
) -> str:
    """
    Send one user message and return the first text block of the reply.
    """
    key = api_key()
    if not key:
        raise AnthropicError("ANTHROPIC_API_KEY is not configured.")

    payload: dict[str, Any] = {
        "model": resolve_model(model),
        "max_tokens": int(max_tokens),
        "messages": [{"role": "user", "content": prompt}],
    }
    if system:
        payload["system"] = system
    if temperature is not None:
        payload["temperature"] = float(temperature)

    headers = {
        "x-api-key": key,
        "anthropic-version": API_VERSION,
        "content-type": "application/json",
    }

    async with httpx.AsyncClient(base_url=API_BASE_URL, timeout=timeout_s, transport=transport) as client:
        resp = await client.post("/v1/messages", json=payload, headers=headers)

    if resp.status_code != 200:
        body = resp.text[:500]
        raise AnthropicError(f"Anthropic messages request failed: {resp.status_code} {body}")

    data: dict[str, Any] = resp.json()
    for block in data.get("content") or []:
        if isinstance(block, dict) and block.get("type") == "text":
            text = block.get("text")
            if isinstance(text, str):
                return text.strip()

    raise AnthropicError("Anthropic returned no text content.")


def strip_code_fence(text: str) -> str:
    """Remove a ```json ... ``` wrapper if the model added one."""
    cleaned = (text or "").strip()
    if cleaned.startswith("```"):
        cleaned = cleaned.split("\n", 1)[1] if "\n" in cleaned else ""
        if cleaned.rstrip().endswith("```"):
            cleaned = cleaned.rstrip()[:-3]
    return cleaned.strip()
