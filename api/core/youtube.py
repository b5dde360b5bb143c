"""
YouTube Data API v3 client helpers.

Used endpoints:
- GET /search -> video ids + snippets
- GET /videos -> snippet, contentDetails, statistics
"""

from __future__ import annotations

import logging
import re
from typing import Any

import httpx

from core import settings

logger = logging.getLogger(__name__)

API_BASE_URL = "https://www.googleapis.com/youtube/v3"
WATCH_URL = "https://www.youtube.com/watch?v="
EMBED_URL = "https://www.youtube.com/embed/"

_DURATION_RE = re.compile(r"^PT(?:(\d+)H)?(?:(\d+)M)?(?:(\d+)S)?$")


class YouTubeError(RuntimeError):
    pass


def api_key() -> str:
    return settings.env_str("YOUTUBE_API_KEY")


def is_configured() -> bool:
    return bool(api_key())


def parse_duration(iso: str | None) -> tuple[int, str]:
    """
    "PT1H2M3S" -> (3723, "1:02:03"); "PT4M5S" -> (245, "4:05").
    """
    match = _DURATION_RE.match((iso or "").strip())
    if not match:
        return 0, "0:00"
    hours, minutes, seconds = (int(g or 0) for g in match.groups())
    total = hours * 3600 + minutes * 60 + seconds
    if hours:
        return total, f"{hours}:{minutes:02d}:{seconds:02d}"
    return total, f"{minutes}:{seconds:02d}"


def _best_thumbnail(snippet: dict[str, Any]) -> str:
    thumbs = snippet.get("thumbnails") or {}
    for size in ("high", "medium", "default"):
        url = (thumbs.get(size) or {}).get("url")
        if url:
            return url
    return ""


def _video_from_search_item(item: dict[str, Any]) -> dict[str, Any]:
    video_id = (item.get("id") or {}).get("videoId", "")
    snippet = item.get("snippet") or {}
    return {
        "video_id": video_id,
        "title": snippet.get("title", ""),
        "description": snippet.get("description", ""),
        "channel_title": snippet.get("channelTitle", ""),
        "channel_id": snippet.get("channelId", ""),
        "published_at": snippet.get("publishedAt", ""),
        "thumbnail_url": _best_thumbnail(snippet),
        "duration": "",
        "duration_seconds": 0,
        "view_count": 0,
        "like_count": 0,
        "url": f"{WATCH_URL}{video_id}",
        "embed_url": f"{EMBED_URL}{video_id}",
    }


def _video_from_details(item: dict[str, Any]) -> dict[str, Any]:
    video_id = item.get("id", "")
    snippet = item.get("snippet") or {}
    stats = item.get("statistics") or {}
    seconds, formatted = parse_duration((item.get("contentDetails") or {}).get("duration"))
    return {
        "video_id": video_id,
        "title": snippet.get("title", ""),
        "description": snippet.get("description", ""),
        "channel_title": snippet.get("channelTitle", ""),
        "channel_id": snippet.get("channelId", ""),
        "published_at": snippet.get("publishedAt", ""),
        "thumbnail_url": _best_thumbnail(snippet),
        "duration": formatted,
        "duration_seconds": seconds,
        "view_count": int(stats.get("viewCount") or 0),
        "like_count": int(stats.get("likeCount") or 0),
        "url": f"{WATCH_URL}{video_id}",
        "embed_url": f"{EMBED_URL}{video_id}",
    }


async def _get(
    path: str,
    params: dict[str, Any],
    *,
    timeout_s: float,
    transport: httpx.AsyncBaseTransport | None,
) -> dict[str, Any]:
    key = api_key()
    if not key:
        raise YouTubeError("YOUTUBE_API_KEY is not configured.")
    async with httpx.AsyncClient(base_url=API_BASE_URL, timeout=timeout_s, transport=transport) as client:
        resp = await client.get(path, params={**params, "key": key})
    if resp.status_code != 200:
        raise YouTubeError(f"YouTube {path} request failed: {resp.status_code} {resp.text[:500]}")
    return resp.json()


async def search_videos(
    query: str,
    *,
    max_results: int = 10,
    order: str = "relevance",
    video_duration: str | None = None,
    video_definition: str | None = None,
    timeout_s: float = 15.0,
    transport: httpx.AsyncBaseTransport | None = None,
) -> list[dict[str, Any]]:
    """
    Search videos, then enrich them with duration and statistics.

    If the detail call fails, the basic search results are returned.
    """
    params: dict[str, Any] = {
        "part": "snippet",
        "q": query,
        "type": "video",
        "maxResults": max(1, min(int(max_results), 50)),
        "order": order,
        "relevanceLanguage": "en",
    }
    if video_duration:
        params["videoDuration"] = video_duration
    if video_definition:
        params["videoDefinition"] = video_definition

    data = await _get("/search", params, timeout_s=timeout_s, transport=transport)
    basic = [_video_from_search_item(i) for i in data.get("items") or [] if (i.get("id") or {}).get("videoId")]
    if not basic:
        return []

    try:
        details = await _get(
            "/videos",
            {"part": "snippet,contentDetails,statistics", "id": ",".join(v["video_id"] for v in basic)},
            timeout_s=timeout_s,
            transport=transport,
        )
    except (YouTubeError, httpx.HTTPError) as exc:
        logger.warning("youtube_details_failed query=%s error=%s", query, exc)
        return basic

    by_id = {item.get("id"): _video_from_details(item) for item in details.get("items") or []}
    return [by_id.get(v["video_id"], v) for v in basic]


async def get_video(
    video_id: str,
    *,
    timeout_s: float = 15.0,
    transport: httpx.AsyncBaseTransport | None = None,
) -> dict[str, Any] | None:
    data = await _get(
        "/videos",
        {"part": "snippet,contentDetails,statistics", "id": video_id},
        timeout_s=timeout_s,
        transport=transport,
    )
    items = data.get("items") or []
    if not items:
        return None
    return _video_from_details(items[0])
