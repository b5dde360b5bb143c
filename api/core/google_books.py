"""
Google Books API client helpers.

Used endpoint:
- GET /books/v1/volumes?q=...
"""

from __future__ import annotations

import logging
import re
from typing import Any

import httpx

from core import settings

logger = logging.getLogger(__name__)

API_URL = "https://www.googleapis.com/books/v1/volumes"


def api_key() -> str:
    return settings.env_str("GOOGLE_BOOKS_API_KEY")


def parse_volume(item: dict[str, Any]) -> dict[str, Any]:
    info = item.get("volumeInfo") or {}
    volume_id = item.get("id", "")

    title = info.get("title", "")
    if info.get("subtitle"):
        title = f"{title}: {info['subtitle']}"

    year = None
    match = re.match(r"^(\d{4})", info.get("publishedDate") or "")
    if match:
        year = int(match.group(1))

    isbn = None
    identifiers = {i.get("type"): i.get("identifier") for i in info.get("industryIdentifiers") or []}
    isbn = identifiers.get("ISBN_13") or identifiers.get("ISBN_10")

    links = info.get("imageLinks") or {}
    thumbnail = links.get("thumbnail") or links.get("smallThumbnail")
    if thumbnail:
        thumbnail = thumbnail.replace("http://", "https://").replace("zoom=1", "zoom=2")

    url = (
        info.get("canonicalVolumeLink")
        or info.get("infoLink")
        or f"https://books.google.com/books?id={volume_id}"
    )

    return {
        "id": volume_id,
        "title": title,
        "authors": list(info.get("authors") or []),
        "year": year,
        "publisher": info.get("publisher"),
        "description": info.get("description"),
        "isbn": isbn,
        "page_count": info.get("pageCount"),
        "categories": list(info.get("categories") or []),
        "thumbnail_url": thumbnail,
        "url": url,
    }


async def search_books(
    query: str,
    *,
    limit: int = 10,
    order_by: str = "relevance",
    timeout_s: float = 15.0,
    transport: httpx.AsyncBaseTransport | None = None,
) -> list[dict[str, Any]]:
    """
    Search volumes. Failures are logged and yield an empty list.
    """
    params: dict[str, Any] = {
        "q": query,
        "maxResults": max(1, min(int(limit), 40)),
        "orderBy": order_by,
        "printType": "books",
        "langRestrict": "en",
    }
    key = api_key()
    if key:
        params["key"] = key

    try:
        async with httpx.AsyncClient(timeout=timeout_s, transport=transport) as client:
            resp = await client.get(API_URL, params=params)
    except httpx.HTTPError as exc:
        logger.error("google_books_request_failed query=%s error=%s", query, exc)
        return []

    if resp.status_code != 200:
        logger.error("google_books_bad_status query=%s status=%s body=%s", query, resp.status_code, resp.text[:500])
        return []

    return [parse_volume(item) for item in resp.json().get("items") or []]


def author_names_match(a: str, b: str) -> bool:
    """Same last name and same first initial, case-insensitive."""
    pa = (a or "").lower().split()
    pb = (b or "").lower().split()
    if not pa or not pb:
        return False
    return pa[-1] == pb[-1] and pa[0][0] == pb[0][0]


async def search_books_by_author(
    author: str,
    *,
    limit: int = 10,
    transport: httpx.AsyncBaseTransport | None = None,
) -> list[dict[str, Any]]:
    books = await search_books(f'inauthor:"{author}"', limit=limit, transport=transport)
    return [b for b in books if any(author_names_match(author, name) for name in b["authors"])]
