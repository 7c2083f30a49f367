"""Pydantic request/response schemas."""

from purgehub.schemas.auth import AdminContext, AuthorizationFlags, CurrentUser, MeResponse
from purgehub.schemas.deletion import (
    DeleteAccountError,
    DeleteAccountRequest,
    DeleteAccountSuccess,
)
from purgehub.schemas.health import HealthResponse
from purgehub.schemas.moderation import (
    BannedEmailCreate,
    BannedEmailOut,
    BanRequest,
    ProfileOut,
    ReportCreate,
    ReportOut,
    RoleChangeResponse,
    StatsResponse,
)

__all__ = [
    "AdminContext",
    "AuthorizationFlags",
    "BanRequest",
    "BannedEmailCreate",
    "BannedEmailOut",
    "CurrentUser",
    "DeleteAccountError",
    "DeleteAccountRequest",
    "DeleteAccountSuccess",
    "HealthResponse",
    "MeResponse",
    "ProfileOut",
    "ReportCreate",
    "ReportOut",
    "RoleChangeResponse",
    "StatsResponse",
]
