"""
Serper (Google search proxy) client helpers.

Used endpoints:
- POST /scholar -> {"organic": [...]}
"""

from __future__ import annotations

from typing import Any

import httpx

from core import settings

API_BASE_URL = "https://google.serper.dev"


class SerperError(RuntimeError):
    pass


def api_key() -> str:
    return settings.env_str("SERPER_API_KEY")


def is_configured() -> bool:
    return bool(api_key())


async def _post(
    path: str,
    payload: dict[str, Any],
    *,
    timeout_s: float,
    transport: httpx.AsyncBaseTransport | None,
) -> dict[str, Any]:
    key = api_key()
    if not key:
        raise SerperError("SERPER_API_KEY is not configured.")
    async with httpx.AsyncClient(base_url=API_BASE_URL, timeout=timeout_s, transport=transport) as client:
        resp = await client.post(path, json=payload, headers={"X-API-KEY": key})
    if resp.status_code != 200:
        raise SerperError(f"Serper {path} request failed: {resp.status_code} {resp.text[:500]}")
    return resp.json()


def parse_scholar_result(item: dict[str, Any]) -> dict[str, Any]:
    year = item.get("year")
    return {
        "title": item.get("title", ""),
        "url": item.get("link", ""),
        "snippet": item.get("snippet", ""),
        "publication_info": item.get("publicationInfo", ""),
        "cited_by": int(item.get("citedBy") or 0),
        "year": int(year) if str(year or "").isdigit() else None,
        "pdf_url": item.get("pdfUrl"),
    }


async def search_scholar(
    query: str,
    *,
    limit: int = 10,
    timeout_s: float = 15.0,
    transport: httpx.AsyncBaseTransport | None = None,
) -> list[dict[str, Any]]:
    data = await _post("/scholar", {"q": query, "num": limit}, timeout_s=timeout_s, transport=transport)
    return [parse_scholar_result(i) for i in (data.get("organic") or [])[:limit]]
