"""Request/response schemas for the admin console endpoints."""

from datetime import datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

ReportStatus = Literal["pending", "resolved", "dismissed"]

REASON_MAX_LENGTH = 1000
EMAIL_MAX_LENGTH = 320


class ProfileSummary(BaseModel):
    """Minimal profile shown next to a report."""

    model_config = ConfigDict(from_attributes=True)

    user_id: UUID
    username: str
    display_name: str | None = None
    avatar_url: str | None = None


class ProfileOut(BaseModel):
    """Profile row for the admin users list, with presentation hints."""

    model_config = ConfigDict(from_attributes=True)

    user_id: UUID
    username: str
    display_name: str | None = None
    avatar_url: str | None = None
    is_banned: bool
    ban_reason: str | None = None
    is_verified: bool
    certification_type: str | None = None
    is_admin: bool = False
    is_self: bool = False
    can_moderate: bool = False


class ReportCreate(BaseModel):
    """Body for POST /reports (any authenticated account)."""

    reason: str = Field(..., min_length=1, max_length=REASON_MAX_LENGTH)
    reported_user_id: UUID | None = None
    reported_post_id: UUID | None = None

    @field_validator("reason")
    @classmethod
    def strip_reason(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("reason must not be blank")
        return v

    @model_validator(mode="after")
    def require_target(self) -> "ReportCreate":
        if self.reported_user_id is None and self.reported_post_id is None:
            raise ValueError("A report needs reported_user_id or reported_post_id")
        return self


class ReportOut(BaseModel):
    """Report with reporter/reported profile summaries."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    reason: str
    status: ReportStatus
    reporter_id: UUID
    reported_user_id: UUID | None = None
    reported_post_id: UUID | None = None
    created_at: datetime
    reporter: ProfileSummary | None = None
    reported_user: ProfileSummary | None = None
    can_moderate_target: bool = False


class ReportsListResponse(BaseModel):
    reports: list[ReportOut]


class BanRequest(BaseModel):
    """Body for POST /admin/users/{user_id}/ban. Blank reason falls back to the default."""

    reason: str | None = Field(default=None, max_length=REASON_MAX_LENGTH)


class UsersListResponse(BaseModel):
    users: list[ProfileOut]


class RoleChangeResponse(BaseModel):
    """Promotion/demotion outcome; changed=False means the role was already in the requested state."""

    user_id: UUID
    is_admin: bool
    changed: bool
    message: str


class BannedEmailCreate(BaseModel):
    """Body for POST /admin/banned-emails. Address is stored lower-cased."""

    email: str = Field(..., min_length=3, max_length=EMAIL_MAX_LENGTH)
    reason: str | None = Field(default=None, max_length=REASON_MAX_LENGTH)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        v = v.strip().lower()
        local, sep, domain = v.partition("@")
        if not sep or not local or not domain or " " in v:
            raise ValueError("email must be an e-mail address")
        return v


class BannedEmailOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    email: str
    banned_by: UUID | None = None
    reason: str | None = None
    created_at: datetime


class BannedEmailsListResponse(BaseModel):
    banned_emails: list[BannedEmailOut]


class StatsResponse(BaseModel):
    """Aggregate counts for the console overview."""

    users: int = Field(..., ge=0, description="Number of profiles.")
    posts: int = Field(..., ge=0)
    pending_reports: int = Field(..., ge=0)
    banned_emails: int = Field(..., ge=0)


class MessageResponse(BaseModel):
    message: str
