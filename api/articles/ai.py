"""
AI helpers for article enrichment: excerpts, key people, search queries and
result selection.
"""

from __future__ import annotations

import logging
import re
from typing import Any

from core import anthropic

logger = logging.getLogger(__name__)

_NAME_RE = re.compile(r"^[A-Za-z\s\-']+$")

_QUERY_TARGETS = {
    "youtube": (
        "YouTube videos: talks, interviews or presentations by the people mentioned, "
        "educational content on the main topics, documentaries or explainers"
    ),
    "scholar": (
        "academic research papers: research authored by scientists or doctors mentioned, "
        "clinical studies on the products or methods discussed, review papers on the main topics"
    ),
    "books": (
        "books: books written by founders, doctors or experts mentioned, foundational texts "
        "on the main topics, popular science books on the subject"
    ),
}


async def generate_excerpt(title: str, content: str, *, context: str = "", max_length: int = 200) -> str:
    prompt = (
        f"Generate a compelling excerpt ({max_length} characters max) for this article. "
        "The excerpt should hook readers and convey the main value proposition. "
        'Do not use quotes or say "this article"; write it as a direct hook.'
    )
    if context:
        prompt += f"\n\nContext about the company and key people:\n{context}"
    prompt += f"\n\nTitle: {title}\n\nContent:\n{content[:2000]}\n\nRespond with only the excerpt, no explanation."
    raw = await anthropic.complete(prompt=prompt, max_tokens=300)
    return raw.strip().strip('"')[: max_length * 2]


def parse_key_people(raw: str) -> list[str]:
    if not raw or raw.strip().upper() == "NONE":
        return []
    names: list[str] = []
    for line in raw.splitlines():
        name = line.strip().lstrip("-*0123456789. ").strip()
        if len(name.split()) >= 2 and _NAME_RE.match(name) and name not in names:
            names.append(name)
    return names[:5]


async def extract_key_people(title: str, content: str) -> list[str]:
    prompt = (
        "Extract all notable people mentioned in this article who might have written books or research papers.\n"
        "Look for founders and CEOs, doctors, authors, scientists and researchers, and health experts.\n\n"
        f"Title: {title}\n\nContent:\n{content[:3000]}\n\n"
        "Return ONLY the full names of people found, one per line, without titles such as Dr. or MD.\n"
        'If no relevant people are found, return "NONE".'
    )
    return parse_key_people(await anthropic.complete(prompt=prompt, max_tokens=300))


def parse_queries(raw: str) -> list[str]:
    queries: list[str] = []
    for line in (raw or "").splitlines():
        query = line.strip().lstrip("-*0123456789. ").strip().strip('"')
        if query and len(query) < 100:
            queries.append(query)
    return queries[:3]


async def generate_search_queries(title: str, content: str, query_type: str, *, key_people: list[str] = ()) -> list[str]:
    people = ", ".join(key_people) if key_people else "none identified"
    prompt = (
        f"Analyze this article and generate 2-3 highly targeted search queries to find {_QUERY_TARGETS[query_type]}.\n"
        f"Key people mentioned: {people}.\n"
        "If specific people are mentioned, at least one query MUST include a full name.\n\n"
        f"Title: {title}\n\nContent:\n{content[:2000]}\n\n"
        "Return only the queries, one per line, no numbering or explanation."
    )
    return parse_queries(await anthropic.complete(prompt=prompt, max_tokens=400))


def parse_selection(raw: str, results: list[dict[str, Any]], max_results: int) -> list[dict[str, Any]]:
    picks: list[dict[str, Any]] = []
    for number in re.findall(r"\d+", raw or ""):
        idx = int(number) - 1
        if 0 <= idx < len(results) and results[idx] not in picks:
            picks.append(results[idx])
        if len(picks) >= max_results:
            break
    return picks or results[:max_results]


async def select_best_results(
    title: str,
    content: str,
    results: list[dict[str, Any]],
    *,
    max_results: int = 3,
    result_type: str = "results",
) -> list[dict[str, Any]]:
    if len(results) <= max_results or not anthropic.is_configured():
        return results[:max_results]

    listing = "\n".join(f"{i}. {r.get('title', '')} - {r.get('url', '')}" for i, r in enumerate(results, start=1))
    prompt = (
        f'Given this article about "{title}", select the {max_results} most relevant {result_type} from the list below.\n\n'
        f"Article excerpt:\n{content[:800]}\n\n"
        f"Available {result_type}:\n{listing}\n\n"
        "Strongly prefer content by or featuring people mentioned in the article, then credibility, "
        "then direct relevance to longevity and health.\n"
        f'Respond with just the numbers of your top {max_results} picks, comma-separated (e.g. "1, 3, 5").'
    )
    try:
        raw = await anthropic.complete(prompt=prompt, max_tokens=150)
    except anthropic.AnthropicError as exc:
        logger.warning("select_best_results_failed type=%s error=%s", result_type, exc)
        return results[:max_results]
    return parse_selection(raw, results, max_results)
