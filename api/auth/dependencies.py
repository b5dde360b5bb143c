"""
Auth dependencies for protected FastAPI routes.
"""

from __future__ import annotations

from fastapi import Depends, Header, HTTPException, status

from core import settings

from . import security, service


def _extract_bearer_token(authorization: str | None) -> str:
    raw = (authorization or "").strip()
    if not raw:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing Authorization header.",
        )

    parts = raw.split(" ", 1)
    if len(parts) != 2:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid Authorization header format.",
        )

    scheme, token = parts[0].strip().lower(), parts[1].strip()
    if scheme != "bearer" or not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authorization must be: Bearer <token>.",
        )
    return token


async def get_bearer_token(authorization: str | None = Header(default=None)) -> str:
    return _extract_bearer_token(authorization)


async def get_current_admin(access_token: str = Depends(get_bearer_token)) -> dict:
    return await service.get_admin_from_access_token(access_token)


async def require_cron_or_admin(
    authorization: str | None = Header(default=None),
    x_cron_secret: str | None = Header(default=None),
) -> dict:
    """
    Accept the scheduler's shared secret, or fall back to an admin token.
    """
    if settings.cron_secret():
        if security.matches_cron_secret(x_cron_secret):
            return {"source": "cron"}
        raw = (authorization or "").strip()
        if raw.lower().startswith("bearer ") and security.matches_cron_secret(raw[7:]):
            return {"source": "cron"}

    admin = await service.get_admin_from_access_token(_extract_bearer_token(authorization))
    return {"source": "admin", "admin": admin}
