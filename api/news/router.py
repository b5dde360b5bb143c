"""
News ingestion and dashboard endpoints.
"""

from __future__ import annotations

import json
from typing import Any, AsyncIterator
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from fastapi.responses import StreamingResponse

from auth import dependencies as auth_dependencies

from . import repository, schemas, service

router = APIRouter()


async def _ndjson(events: AsyncIterator[dict[str, Any]]) -> AsyncIterator[bytes]:
    async for event in events:
        yield (json.dumps(event, default=str) + "\n").encode("utf-8")


def _ingest_response() -> StreamingResponse:
    service.require_configured()
    return StreamingResponse(
        _ndjson(service.ingest_news()),
        media_type="application/x-ndjson",
        headers={"Cache-Control": "no-cache"},
    )


@router.get("/news/ingest")
async def ingest_get(_: dict = Depends(auth_dependencies.require_cron_or_admin)) -> StreamingResponse:
    return _ingest_response()


@router.post("/news/ingest")
async def ingest_post(_: dict = Depends(auth_dependencies.require_cron_or_admin)) -> StreamingResponse:
    return _ingest_response()


@router.get("/news")
async def list_news(
    status: str | None = Query(default=None),
    source: str | None = Query(default=None),
    search: str | None = Query(default=None, max_length=200),
    limit: int = Query(default=50, ge=1, le=200),
    offset: int = Query(default=0, ge=0),
    _: dict = Depends(auth_dependencies.get_current_admin),
) -> dict:
    items = await repository.list_news(
        status=status,
        source=source,
        search=(search or "").strip() or None,
        limit=limit,
        offset=offset,
    )
    return {"items": items, "limit": limit, "offset": offset, "count": len(items)}


@router.delete("/news/clear")
async def clear_news(_: dict = Depends(auth_dependencies.get_current_admin)) -> dict:
    return await service.clear_news()


@router.patch("/news/{article_id}")
async def update_news(
    article_id: UUID,
    payload: schemas.NewsUpdate,
    _: dict = Depends(auth_dependencies.get_current_admin),
) -> dict:
    return await service.update_news(article_id, payload.status)


@router.delete("/news/{article_id}")
async def delete_news(article_id: UUID, _: dict = Depends(auth_dependencies.get_current_admin)) -> dict:
    return await service.delete_news(article_id)
