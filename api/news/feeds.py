"""
RSS/Atom feed fetching and normalization.

Feeds are fetched with httpx and parsed with feedparser. A failing feed
contributes no items; it never aborts the run.
"""

from __future__ import annotations

import asyncio
import calendar
import logging
from datetime import datetime, timezone
from typing import Any

import feedparser
import httpx

from core import settings, text

logger = logging.getLogger(__name__)

USER_AGENT = "bioEDGE-Longevity-News/1.0"
FETCH_TIMEOUT_S = 15.0
MAX_TITLE_CHARS = 500
MAX_CONTENT_CHARS = 4000

FEED_SOURCES: list[dict[str, str]] = [
    {"name": "LifeSpan.io", "url": "https://www.lifespan.io/feed"},
    {"name": "Longevity.Technology", "url": "https://longevity.technology/feed"},
    {"name": "LT Wire", "url": "https://longevity.technology/category/lt-wire/feed"},
    {"name": "Nature Aging", "url": "https://www.nature.com/nataging.rss"},
    {"name": "Nature - npj Aging", "url": "https://www.nature.com/npjamd.rss"},
    {"name": "Neuroscience News", "url": "https://neurosciencenews.com/neuroscience-terms/longevity/feed"},
    {"name": "Peter Attia MD", "url": "https://peterattiamd.com/feed"},
    {"name": "Princeton Longevity Center", "url": "https://princetonlongevitycenter.com/feed"},
    {
        "name": "SAGE Research on Aging",
        "url": "https://journals.sagepub.com/action/showFeed?ui=0&mi=ehikzz&ai=2b4&jc=jaga&type=etoc&feed=rss",
    },
    {"name": "Stanford Longevity Center", "url": "https://longevity.stanford.edu/feed"},
    {"name": "The Conversation - Longevity", "url": "https://theconversation.com/topics/longevity-20168/articles.atom"},
    {"name": "The Lancet Healthy Longevity", "url": "https://www.thelancet.com/rssfeed/lanhl_current.xml"},
    {"name": "Wiley Aging Cell", "url": "https://onlinelibrary.wiley.com/action/showFeed?jc=14749726&type=etoc&feed=rss"},
]


def _entry_datetime(entry: Any) -> datetime | None:
    parsed = entry.get("published_parsed") or entry.get("updated_parsed")
    if not parsed:
        return None
    return datetime.fromtimestamp(calendar.timegm(parsed), tz=timezone.utc)


def _entry_content(entry: Any) -> str:
    for block in entry.get("content") or []:
        value = block.get("value") if isinstance(block, dict) else None
        if value:
            return value
    return entry.get("summary") or entry.get("description") or ""


def normalize_entry(
    entry: Any,
    *,
    source_name: str,
    feed_url: str,
    earliest: datetime | None = None,
) -> dict[str, Any] | None:
    """
    Turn one feedparser entry into an ingestible item, or None to skip it.
    """
    title = text.strip_html(entry.get("title"))[:MAX_TITLE_CHARS]
    link = (entry.get("link") or "").strip()
    if not title or not link:
        return None

    published = _entry_datetime(entry)
    if earliest is not None and published is not None and published < earliest:
        return None

    author = entry.get("author") or ""
    if not author:
        authors = entry.get("authors") or []
        author = next((a.get("name") for a in authors if isinstance(a, dict) and a.get("name")), "")

    return {
        "title": title,
        "url": link,
        "source_name": source_name,
        "source_feed_url": feed_url,
        "published_at": published,
        "author": author.strip() or None,
        "content": text.strip_html(_entry_content(entry))[:MAX_CONTENT_CHARS],
    }


def parse_feed(
    content: bytes | str,
    *,
    source_name: str,
    feed_url: str,
    earliest: datetime | None = None,
) -> list[dict[str, Any]]:
    parsed = feedparser.parse(content)
    items: list[dict[str, Any]] = []
    for entry in parsed.entries:
        item = normalize_entry(entry, source_name=source_name, feed_url=feed_url, earliest=earliest)
        if item is not None:
            items.append(item)
    return items


async def fetch_feed(
    client: httpx.AsyncClient,
    source: dict[str, str],
    *,
    earliest: datetime | None = None,
) -> list[dict[str, Any]]:
    try:
        resp = await client.get(source["url"])
        resp.raise_for_status()
    except httpx.HTTPError as exc:
        logger.warning("feed_fetch_failed source=%s url=%s error=%s", source["name"], source["url"], exc)
        return []

    items = parse_feed(resp.content, source_name=source["name"], feed_url=source["url"], earliest=earliest)
    logger.info("feed_fetched source=%s items=%s", source["name"], len(items))
    return items


async def fetch_all_feeds(
    sources: list[dict[str, str]] | None = None,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> list[dict[str, Any]]:
    """
    Fetch every source concurrently and flatten the results.
    """
    sources = FEED_SOURCES if sources is None else sources
    earliest = settings.news_earliest_date()
    async with httpx.AsyncClient(
        timeout=FETCH_TIMEOUT_S,
        headers={"User-Agent": USER_AGENT},
        follow_redirects=True,
        transport=transport,
    ) as client:
        results = await asyncio.gather(
            *(fetch_feed(client, source, earliest=earliest) for source in sources),
            return_exceptions=True,
        )

    items: list[dict[str, Any]] = []
    for source, result in zip(sources, results):
        if isinstance(result, BaseException):
            logger.error("feed_parse_failed source=%s error=%s", source["name"], result)
            continue
        items.extend(result)
    return items
