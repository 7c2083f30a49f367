"""Schemas for the authenticated caller and authorization flags."""

from uuid import UUID

from pydantic import BaseModel, Field


class CurrentUser(BaseModel):
    """Authenticated caller resolved from a platform bearer token."""

    id: UUID
    email: str | None = None


class AuthorizationFlags(BaseModel):
    """Two independent answers; is_principal implies nothing about is_admin."""

    is_admin: bool = False
    is_principal: bool = False


class AdminContext(BaseModel):
    """Caller plus flags, resolved once per admin request."""

    user: CurrentUser
    flags: AuthorizationFlags
    token: str = Field(..., repr=False, description="Caller bearer token (forwarded to the deletion workflow).")

    @property
    def user_id(self) -> UUID:
        return self.user.id


class MeResponse(BaseModel):
    """Response for GET /auth/me. Presentation hints only; every action is re-checked server-side."""

    id: UUID
    email: str | None = None
    is_admin: bool
    is_principal: bool


class AuthUser(BaseModel):
    """Account record as returned by the platform auth admin API (fields we use)."""

    model_config = {"extra": "ignore"}

    id: UUID
    email: str | None = None
