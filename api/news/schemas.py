"""
News API schemas.
"""

from __future__ import annotations

from pydantic import BaseModel


class NewsUpdate(BaseModel):
    status: str | None = None
