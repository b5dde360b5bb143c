"""
Admin authentication logic.
"""

from __future__ import annotations

import logging

from fastapi import HTTPException, status

from . import repository, schemas, security

logger = logging.getLogger(__name__)


def _to_admin_response(row: dict) -> schemas.AdminResponse:
    return schemas.AdminResponse(
        id=int(row["id"]),
        email=str(row["email"]),
        name=row.get("name"),
        is_active=bool(row["is_active"]),
        created_at=row["created_at"],
    )


async def login(payload: schemas.LoginRequest) -> schemas.LoginResponse:
    row = await repository.get_admin_by_email(payload.email)
    if row is None or not security.verify_password(payload.password, str(row.get("password_hash") or "")):
        logger.info("admin_login_failed email=%s", repository.normalize_email(payload.email))
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password.",
        )

    if not bool(row.get("is_active", False)):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin account is inactive.",
        )

    await repository.touch_last_login(int(row["id"]))
    token = security.build_access_token(admin_id=int(row["id"]), email=str(row["email"]))
    return schemas.LoginResponse(admin=_to_admin_response(row), access_token=token)


async def get_admin_from_access_token(access_token: str) -> dict:
    try:
        payload = security.decode_access_token(access_token)
    except security.AuthSecurityError as exc:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(exc)) from exc

    subject = str(payload.get("sub") or "").strip()
    if not subject.isdigit():
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid access token subject.",
        )

    row = await repository.get_admin_by_id(int(subject))
    if row is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Admin not found.")
    if not bool(row.get("is_active", False)):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin account is inactive.")
    return row


def me(admin_row: dict) -> schemas.AdminResponse:
    return _to_admin_response(admin_row)
