"""
Password hashing and access-token helpers.
"""

from __future__ import annotations

import hmac
import time
from typing import Any

import bcrypt
import jwt

from core import settings


class AuthSecurityError(RuntimeError):
    pass


def jwt_secret() -> str:
    # Set JWT_SECRET in any deployed environment.
    return settings.env_str("JWT_SECRET") or "dev-change-this-secret"


def jwt_algorithm() -> str:
    return settings.env_str("JWT_ALG") or "HS256"


def access_token_expire_minutes() -> int:
    return settings.env_int("ACCESS_TOKEN_EXPIRE_MIN", 12 * 60)


def hash_password(plain_password: str) -> str:
    password = (plain_password or "").encode("utf-8")
    if not password:
        raise AuthSecurityError("Password is empty.")
    return bcrypt.hashpw(password, bcrypt.gensalt()).decode("utf-8")


def verify_password(plain_password: str, password_hash: str) -> bool:
    password = (plain_password or "").encode("utf-8")
    hashed = (password_hash or "").encode("utf-8")
    if not password or not hashed:
        return False
    try:
        return bcrypt.checkpw(password, hashed)
    except ValueError:
        return False


def build_access_token(*, admin_id: int, email: str) -> str:
    issued_at = int(time.time())
    payload = {
        "sub": str(admin_id),
        "email": email,
        "type": "access",
        "iat": issued_at,
        "exp": issued_at + access_token_expire_minutes() * 60,
    }
    return jwt.encode(payload, jwt_secret(), algorithm=jwt_algorithm())


def decode_access_token(token: str) -> dict[str, Any]:
    raw = (token or "").strip()
    if not raw:
        raise AuthSecurityError("Access token is empty.")

    try:
        payload = jwt.decode(raw, jwt_secret(), algorithms=[jwt_algorithm()])
    except jwt.InvalidTokenError as exc:
        raise AuthSecurityError("Invalid access token.") from exc

    if str(payload.get("type") or "").lower() != "access":
        raise AuthSecurityError("Token is not an access token.")
    return payload


def matches_cron_secret(candidate: str | None) -> bool:
    secret = settings.cron_secret()
    if not secret or not candidate:
        return False
    return hmac.compare_digest(secret.encode("utf-8"), candidate.strip().encode("utf-8"))
