"""
AI summarisation and EDGE classification of news articles.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from core import anthropic

logger = logging.getLogger(__name__)

EDGE_CATEGORIES = ("eliminate", "decode", "gain", "execute")

BIOLOGICAL_SYSTEMS = (
    "Breath",
    "Circulation",
    "Consciousness",
    "Defense",
    "Detoxification",
    "Digestive",
    "Emotional",
    "Energy Production",
    "Hormonal",
    "Hydration",
    "Nervous System",
    "Regeneration",
    "Stress Response",
    "Structure & Movement",
    "Temperature",
)

MAX_SUMMARY_CHARS = 1000
MAX_KEY_POINTS = 3
MAX_KEY_POINT_CHARS = 100
MAX_SIGNIFICANCE_CHARS = 1000

SYSTEM_PROMPT = (
    "You are a science writer for a longevity media brand built on the EDGE framework:\n"
    "Eliminate (remove what harms), Decode (measure and understand your biology), "
    "Gain (add what helps) and Execute (turn knowledge into daily practice).\n"
    "You summarise longevity research and industry news for an educated lay audience.\n"
    "Be accurate and specific. Never overstate findings. Never use emoji.\n"
    "Return ONLY valid JSON."
)


def empty_analysis() -> dict[str, Any]:
    return {
        "summary": "",
        "key_points": [],
        "edge_significance": "",
        "edge_categories": [],
        "biological_systems": [],
    }


def user_prompt(title: str, url: str, content: str) -> str:
    systems = ", ".join(BIOLOGICAL_SYSTEMS)
    return (
        f"Title: {title}\n"
        f"URL: {url}\n\n"
        f"Content:\n{content}\n\n"
        "Return JSON with exactly these keys:\n"
        '{"summary": "2-3 sentence plain-language summary",\n'
        ' "keyPoints": ["up to 3 short takeaways, each under 100 characters"],\n'
        ' "longevitySignificance": "why this matters for healthspan and longevity",\n'
        ' "edgeCategories": ["any of: eliminate, decode, gain, execute"],\n'
        f' "biologicalSystems": ["any of: {systems}"]}}'
    )


def sanitize_analysis(data: Any) -> dict[str, Any]:
    """
    Clamp lengths and drop anything outside the allowed vocabularies.
    """
    if not isinstance(data, dict):
        return empty_analysis()

    key_points = data.get("keyPoints") or data.get("key_points") or []
    if not isinstance(key_points, list):
        key_points = []
    categories = data.get("edgeCategories") or data.get("edge_categories") or []
    systems = data.get("biologicalSystems") or data.get("biological_systems") or []
    significance = data.get("longevitySignificance") or data.get("edgeSignificance") or data.get("edge_significance") or ""

    return {
        "summary": str(data.get("summary") or "")[:MAX_SUMMARY_CHARS],
        "key_points": [str(p)[:MAX_KEY_POINT_CHARS] for p in key_points if p][:MAX_KEY_POINTS],
        "edge_significance": str(significance)[:MAX_SIGNIFICANCE_CHARS],
        "edge_categories": [
            c.lower() for c in categories if isinstance(c, str) and c.lower() in EDGE_CATEGORIES
        ],
        "biological_systems": [s for s in systems if isinstance(s, str) and s in BIOLOGICAL_SYSTEMS],
    }


def parse_analysis(raw: str) -> dict[str, Any]:
    try:
        data = json.loads(anthropic.strip_code_fence(raw))
    except json.JSONDecodeError:
        logger.warning("news_analysis_unparsable snippet=%s", (raw or "")[:200])
        return empty_analysis()
    return sanitize_analysis(data)


async def analyze_news_article(title: str, url: str, content: str, *, model: str = "fast") -> dict[str, Any]:
    raw = await anthropic.complete(
        system=SYSTEM_PROMPT,
        prompt=user_prompt(title, url, content),
        model=model,
        max_tokens=800,
    )
    return parse_analysis(raw)
