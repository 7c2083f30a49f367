"""Admin console endpoints. Every route requires the admin role; role changes require the principal."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Body, Depends, Query
from sqlalchemy.orm import Session

from purgehub.api.v1.auth import require_admin, require_principal
from purgehub.core.config import Settings, get_settings
from purgehub.core.database import get_db
from purgehub.models.report import REPORT_DISMISSED, REPORT_RESOLVED
from purgehub.schemas.auth import AdminContext
from purgehub.schemas.deletion import DeleteAccountRequest
from purgehub.schemas.moderation import (
    BannedEmailCreate,
    BannedEmailOut,
    BannedEmailsListResponse,
    BanRequest,
    MessageResponse,
    ProfileOut,
    ReportOut,
    ReportsListResponse,
    ReportStatus,
    RoleChangeResponse,
    StatsResponse,
    UsersListResponse,
)
from purgehub.services import moderation
from purgehub.services.account_deletion import delete_account
from purgehub.services.auth_admin import AuthAdminClient, get_auth_admin_client
from purgehub.services.ban_ledger import list_banned_emails

router = APIRouter()

AdminCtx = Annotated[AdminContext, Depends(require_admin)]
PrincipalCtx = Annotated[AdminContext, Depends(require_principal)]
DB = Annotated[Session, Depends(get_db)]
AppSettings = Annotated[Settings, Depends(get_settings)]


@router.get("/stats", response_model=StatsResponse)
def get_stats(ctx: AdminCtx, db: DB) -> StatsResponse:
    """Counts of users (profiles), posts, pending reports and banned e-mails."""
    return moderation.get_stats(db)


@router.get("/reports", response_model=ReportsListResponse)
def get_reports(
    ctx: AdminCtx,
    db: DB,
    status: Annotated[ReportStatus | None, Query()] = None,
) -> ReportsListResponse:
    """Reports newest first, optionally filtered by status."""
    return ReportsListResponse(reports=moderation.list_reports(db, ctx, status))


@router.post("/reports/{report_id}/resolve", response_model=ReportOut)
def resolve_report(report_id: UUID, ctx: AdminCtx, db: DB) -> ReportOut:
    return moderation.set_report_status(db, ctx, report_id, REPORT_RESOLVED)


@router.post("/reports/{report_id}/dismiss", response_model=ReportOut)
def dismiss_report(report_id: UUID, ctx: AdminCtx, db: DB) -> ReportOut:
    return moderation.set_report_status(db, ctx, report_id, REPORT_DISMISSED)


@router.get("/users", response_model=UsersListResponse)
def get_users(
    ctx: AdminCtx,
    db: DB,
    settings: AppSettings,
    search: Annotated[str | None, Query(max_length=255)] = None,
) -> UsersListResponse:
    """
    Newest profiles, or a case-insensitive search on username / display name.

    Each row carries is_admin, is_self and can_moderate so the console only offers
    actions the server will accept.
    """
    return UsersListResponse(users=moderation.list_profiles(db, ctx, settings, search))


@router.post("/users/{user_id}/ban", response_model=ProfileOut)
def ban_user(
    user_id: UUID,
    ctx: AdminCtx,
    db: DB,
    settings: AppSettings,
    body: BanRequest | None = None,
) -> ProfileOut:
    return moderation.ban_user(db, ctx, user_id, settings, body.reason if body else None)


@router.post("/users/{user_id}/unban", response_model=ProfileOut)
def unban_user(user_id: UUID, ctx: AdminCtx, db: DB) -> ProfileOut:
    return moderation.unban_user(db, ctx, user_id)


@router.post("/users/{user_id}/promote", response_model=RoleChangeResponse)
def promote_user(user_id: UUID, ctx: PrincipalCtx, db: DB) -> RoleChangeResponse:
    """Grant admin (principal only). Already-admin is reported with changed=false."""
    return moderation.promote_user(db, ctx, user_id)


@router.post("/users/{user_id}/demote", response_model=RoleChangeResponse)
def demote_user(user_id: UUID, ctx: PrincipalCtx, db: DB) -> RoleChangeResponse:
    """Revoke admin (principal only, never on itself)."""
    return moderation.demote_user(db, ctx, user_id)


@router.delete("/users/{user_id}", response_model=MessageResponse)
async def delete_user(
    user_id: UUID,
    ctx: AdminCtx,
    db: DB,
    settings: AppSettings,
    auth_client: Annotated[AuthAdminClient, Depends(get_auth_admin_client)],
    reason: Annotated[str | None, Body(embed=True, max_length=1000)] = None,
) -> MessageResponse:
    """
    Permanently delete an account: all its data, its auth record, and ban its e-mail.

    Runs the same privileged workflow as the standalone deletion function, with the
    caller's own bearer token, so every check is repeated there.
    """
    await delete_account(
        db,
        auth_client,
        f"Bearer {ctx.token}",
        DeleteAccountRequest(userId=str(user_id), reason=reason),
        settings,
    )
    return MessageResponse(message="Account permanently deleted")


@router.get("/banned-emails", response_model=BannedEmailsListResponse)
def get_banned_emails(ctx: AdminCtx, db: DB) -> BannedEmailsListResponse:
    return BannedEmailsListResponse(
        banned_emails=[BannedEmailOut.model_validate(b) for b in list_banned_emails(db)]
    )


@router.post("/banned-emails", response_model=BannedEmailOut, status_code=201)
def post_banned_email(
    body: BannedEmailCreate,
    ctx: AdminCtx,
    db: DB,
    settings: AppSettings,
) -> BannedEmailOut:
    """Ban an address directly. Re-banning updates the reason and banning admin."""
    return BannedEmailOut.model_validate(moderation.ban_email(db, ctx, body, settings))


@router.delete("/banned-emails/{entry_id}", response_model=MessageResponse)
def delete_banned_email(entry_id: UUID, ctx: AdminCtx, db: DB) -> MessageResponse:
    removed = moderation.unban_email(db, ctx, entry_id)
    return MessageResponse(message="Email unbanned" if removed else "Email was not banned")
