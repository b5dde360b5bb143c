"""
External content search endpoints used by the article editor.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query

from auth import dependencies as auth_dependencies
from core import google_books, serper, youtube

router = APIRouter(dependencies=[Depends(auth_dependencies.get_current_admin)])


@router.get("/youtube-search")
async def youtube_search(
    videoId: str | None = Query(default=None, max_length=50),
    q: str | None = Query(default=None, max_length=300),
    maxResults: int = Query(default=10, ge=1, le=50),
    order: str = Query(default="relevance"),
    videoDuration: str | None = Query(default=None),
) -> dict:
    if not youtube.is_configured():
        raise HTTPException(status_code=503, detail="YouTube API key not configured")

    try:
        if videoId:
            video = await youtube.get_video(videoId)
            if video is None:
                raise HTTPException(status_code=404, detail="Video not found")
            return {"video": video}
        if q:
            videos = await youtube.search_videos(q, max_results=maxResults, order=order, video_duration=videoDuration)
            return {"videos": videos, "count": len(videos)}
    except youtube.YouTubeError as exc:
        raise HTTPException(status_code=502, detail=str(exc)) from exc

    raise HTTPException(status_code=400, detail="Provide videoId or q")


@router.get("/search-books")
async def search_books(
    q: str = Query(default="", max_length=300),
    limit: int = Query(default=10, ge=1, le=40),
) -> dict:
    if not q.strip():
        raise HTTPException(status_code=400, detail="Query parameter q is required")
    books = await google_books.search_books(q.strip(), limit=limit)
    return {"books": books, "count": len(books)}


@router.get("/search-papers")
async def search_papers(
    q: str = Query(default="", max_length=300),
    limit: int = Query(default=10, ge=1, le=20),
) -> dict:
    if not q.strip():
        raise HTTPException(status_code=400, detail="Query parameter q is required")
    if not serper.is_configured():
        raise HTTPException(status_code=503, detail="Serper API key not configured")
    try:
        papers = await serper.search_scholar(q.strip(), limit=limit)
    except serper.SerperError as exc:
        raise HTTPException(status_code=502, detail=str(exc)) from exc
    return {"papers": papers, "count": len(papers)}
