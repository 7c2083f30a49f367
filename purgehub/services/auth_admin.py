"""Client for the platform auth admin API: resolve and delete authentication records."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING
from uuid import UUID

import httpx
from pydantic import ValidationError

from purgehub.schemas.auth import AuthUser
from purgehub.services.errors import AuthApiError

if TYPE_CHECKING:
    from purgehub.core.config import Settings

logger = logging.getLogger(__name__)

ADMIN_USERS_PATH = "/auth/v1/admin/users"
HEALTH_PATH = "/auth/v1/health"


def _error_detail(resp: httpx.Response) -> str:
    try:
        body = resp.json()
        detail = body.get("msg") or body.get("message") or body.get("error_description") or body.get("error")
    except Exception:
        detail = None
    if not detail:
        detail = resp.text[:500] if resp.text else "Unknown error"
    return str(detail)


class AuthAdminClient:
    """
    Privileged calls against the auth service, authenticated with the service role key.

    One short-lived httpx.AsyncClient per call; the deletion workflow makes at most three.
    """

    def __init__(self, settings: Settings) -> None:
        self.base_url = settings.SUPABASE_URL.rstrip("/")
        self.timeout = max(1.0, min(120.0, settings.AUTH_REQUEST_TIMEOUT_SEC))
        key = settings.SUPABASE_SERVICE_ROLE_KEY.get_secret_value()
        self._headers = {
            "apikey": key,
            "Authorization": f"Bearer {key}",
        }

    def _user_url(self, user_id: UUID) -> str:
        return f"{self.base_url}{ADMIN_USERS_PATH}/{user_id}"

    async def ping(self) -> bool:
        try:
            async with httpx.AsyncClient(headers=self._headers) as client:
                resp = await client.get(f"{self.base_url}{HEALTH_PATH}", timeout=self.timeout)
        except httpx.HTTPError as e:
            logger.warning("Auth service health check failed: %s", e)
            return False
        return resp.status_code < 400

    async def get_user(self, user_id: UUID) -> AuthUser | None:
        """Return the auth record for user_id, or None if it does not exist."""
        try:
            async with httpx.AsyncClient(headers=self._headers) as client:
                resp = await client.get(self._user_url(user_id), timeout=self.timeout)
        except httpx.HTTPError as e:
            raise AuthApiError(f"Auth service unreachable: {e!s}") from e
        if resp.status_code == 404:
            return None
        if resp.status_code >= 400:
            raise AuthApiError(
                f"Auth service returned {resp.status_code}: {_error_detail(resp)}",
                resp.status_code,
            )
        data = resp.json()
        # Some versions wrap the record as {"user": {...}}.
        if isinstance(data, dict) and isinstance(data.get("user"), dict):
            data = data["user"]
        try:
            return AuthUser.model_validate(data)
        except ValidationError as e:
            raise AuthApiError("Auth service returned a malformed user record.") from e

    async def delete_user(self, user_id: UUID) -> None:
        """Delete the auth record. An already-absent record counts as deleted."""
        try:
            async with httpx.AsyncClient(headers=self._headers) as client:
                resp = await client.delete(self._user_url(user_id), timeout=self.timeout)
        except httpx.HTTPError as e:
            raise AuthApiError(f"Auth service unreachable: {e!s}") from e
        if resp.status_code == 404:
            logger.info("Auth record %s already absent", user_id)
            return
        if resp.status_code >= 400:
            raise AuthApiError(
                f"Auth service returned {resp.status_code}: {_error_detail(resp)}",
                resp.status_code,
            )


def get_auth_admin_client() -> AuthAdminClient:
    """FastAPI dependency; overridden in tests."""
    from purgehub.core.config import get_settings

    return AuthAdminClient(get_settings())
