"""Verification of platform-issued bearer tokens (JWT)."""

from typing import Any

import jwt

from purgehub.core.config import settings

BEARER_PREFIX = "Bearer "


def extract_bearer_token(authorization: str | None) -> str | None:
    """Return the token part of an Authorization header, or None if absent/empty."""
    if not authorization or not authorization.strip():
        return None
    value = authorization.strip()
    if value.lower().startswith(BEARER_PREFIX.lower()):
        value = value[len(BEARER_PREFIX):].strip()
    return value or None


def decode_access_token(token: str) -> dict[str, Any]:
    """
    Decode and validate a platform JWT; return payload (sub, email, role, aud, exp).
    Raises jwt.PyJWTError on invalid or expired token.
    """
    secret = settings.SUPABASE_JWT_SECRET.get_secret_value()
    return jwt.decode(
        token,
        secret,
        algorithms=[settings.JWT_ALGORITHM],
        audience=settings.JWT_AUDIENCE,
        options={"require": ["sub", "exp"]},
    )
