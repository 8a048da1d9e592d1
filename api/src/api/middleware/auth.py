"""JWT helpers for tokens issued on behalf of the host application."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from jose import jwt
from legalnotices.config import get_settings

DEFAULT_TOKEN_TTL = timedelta(hours=8)


def create_access_token(
    user_id: str,
    role: str,
    lang: str | None = None,
    expires_delta: timedelta | None = None,
) -> str:
    settings = get_settings()
    expire = datetime.now(timezone.utc) + (expires_delta or DEFAULT_TOKEN_TTL)
    payload = {
        "sub": user_id,
        "exp": expire,
        "role": role,
    }
    if lang:
        payload["lang"] = lang
    return jwt.encode(payload, settings.secret_key, algorithm=settings.jwt_algorithm)
