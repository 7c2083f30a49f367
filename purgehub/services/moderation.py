"""Admin console operations: reports, profiles, bans, role changes, ban ledger, stats."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING
from uuid import UUID

from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session

from purgehub.models import BannedEmail, Post, Profile, Report
from purgehub.models.report import REPORT_PENDING
from purgehub.models.role import ROLE_ADMIN
from purgehub.schemas.auth import AdminContext, CurrentUser
from purgehub.schemas.moderation import (
    BannedEmailCreate,
    ProfileOut,
    ProfileSummary,
    ReportCreate,
    ReportOut,
    RoleChangeResponse,
    StatsResponse,
)
from purgehub.services import events
from purgehub.services.ban_ledger import (
    count_banned_emails,
    get_banned_email,
    remove_banned_email,
    upsert_banned_email,
)
from purgehub.services.errors import (
    ForbiddenTargetError,
    InvalidTransitionError,
    NotFoundError,
    PrincipalOnlyError,
    ValidationFailedError,
)
from purgehub.services.policy import can_moderate, ensure_can_moderate, protected_account_ids
from purgehub.services.roles import grant_role, revoke_role, user_ids_with_role

if TYPE_CHECKING:
    from purgehub.core.config import Settings

logger = logging.getLogger(__name__)


# --- stats -----------------------------------------------------------------


def _count(session: Session, model: type, *criteria) -> int:
    stmt = select(func.count()).select_from(model)
    if criteria:
        stmt = stmt.where(*criteria)
    return session.execute(stmt).scalar_one()


def get_stats(session: Session) -> StatsResponse:
    return StatsResponse(
        users=_count(session, Profile),
        posts=_count(session, Post),
        pending_reports=_count(session, Report, Report.status == REPORT_PENDING),
        banned_emails=count_banned_emails(session),
    )


# --- reports ---------------------------------------------------------------


def next_report_status(current: str, requested: str) -> str:
    """
    Validate a report transition and return the status to store.

    pending -> resolved | dismissed. Re-applying the current terminal status is allowed
    (no-op overwrite); anything else, including a return to pending, is refused.
    """
    if requested == REPORT_PENDING:
        raise InvalidTransitionError("Reports cannot return to pending")
    if current == REPORT_PENDING or current == requested:
        return requested
    raise InvalidTransitionError(f"Report already {current}")


def _profiles_by_user_id(session: Session, user_ids: set[UUID]) -> dict[UUID, Profile]:
    if not user_ids:
        return {}
    rows = session.query(Profile).filter(Profile.user_id.in_(user_ids)).all()
    return {p.user_id: p for p in rows}


def _report_out(
    report: Report,
    profiles: dict[UUID, Profile],
    protected_ids: set[UUID],
    ctx: AdminContext,
) -> ReportOut:
    reporter = profiles.get(report.reporter_id)
    reported = profiles.get(report.reported_user_id) if report.reported_user_id else None
    return ReportOut(
        id=report.id,
        reason=report.reason,
        status=report.status,
        reporter_id=report.reporter_id,
        reported_user_id=report.reported_user_id,
        reported_post_id=report.reported_post_id,
        created_at=report.created_at,
        reporter=ProfileSummary.model_validate(reporter) if reporter else None,
        reported_user=ProfileSummary.model_validate(reported) if reported else None,
        can_moderate_target=(
            reported is not None
            and can_moderate(
                ctx.user_id,
                ctx.flags.is_principal,
                reported.user_id,
                reported.user_id in protected_ids,
            )
        ),
    )


def list_reports(
    session: Session,
    ctx: AdminContext,
    status: str | None = None,
) -> list[ReportOut]:
    """All reports (optionally one status), newest first, with reporter/reported profiles."""
    query = session.query(Report)
    if status:
        query = query.filter(Report.status == status)
    reports = query.order_by(Report.created_at.desc()).all()

    ids = {r.reporter_id for r in reports} | {
        r.reported_user_id for r in reports if r.reported_user_id
    }
    profiles = _profiles_by_user_id(session, ids)
    protected_ids = protected_account_ids(session)
    return [_report_out(r, profiles, protected_ids, ctx) for r in reports]


def create_report(session: Session, caller: CurrentUser, body: ReportCreate) -> Report:
    """File a report as caller. Any authenticated account may do this."""
    if body.reported_user_id is not None and body.reported_user_id == caller.id:
        raise ValidationFailedError("Cannot report yourself")
    if body.reported_post_id is not None and session.get(Post, body.reported_post_id) is None:
        raise NotFoundError("Post not found")
    report = Report(
        reason=body.reason,
        status=REPORT_PENDING,
        reporter_id=caller.id,
        reported_user_id=body.reported_user_id,
        reported_post_id=body.reported_post_id,
    )
    session.add(report)
    session.commit()
    session.refresh(report)
    events.publish("report_created", caller.id, report.id)
    return report


def set_report_status(
    session: Session,
    ctx: AdminContext,
    report_id: UUID,
    status: str,
) -> ReportOut:
    """Resolve or dismiss a report."""
    report = session.get(Report, report_id)
    if report is None:
        raise NotFoundError("Report not found")
    report.status = next_report_status(report.status, status)
    session.commit()
    session.refresh(report)
    events.publish(f"report_{status}", ctx.user_id, report.id)

    ids = {report.reporter_id} | ({report.reported_user_id} if report.reported_user_id else set())
    return _report_out(
        report,
        _profiles_by_user_id(session, ids),
        protected_account_ids(session),
        ctx,
    )


# --- profiles --------------------------------------------------------------


def _profile_out(
    profile: Profile,
    admin_ids: set[UUID],
    protected_ids: set[UUID],
    ctx: AdminContext,
) -> ProfileOut:
    out = ProfileOut.model_validate(profile)
    out.is_admin = profile.user_id in admin_ids
    out.is_self = profile.user_id == ctx.user_id
    out.can_moderate = can_moderate(
        ctx.user_id,
        ctx.flags.is_principal,
        profile.user_id,
        profile.user_id in protected_ids,
    )
    return out


def list_profiles(
    session: Session,
    ctx: AdminContext,
    settings: Settings,
    search: str | None = None,
) -> list[ProfileOut]:
    """
    Newest profiles, or a case-insensitive substring search on username / display name.
    """
    term = (search or "").strip()
    query = session.query(Profile)
    if term:
        query = query.filter(
            or_(
                Profile.username.icontains(term, autoescape=True),
                Profile.display_name.icontains(term, autoescape=True),
            )
        ).order_by(Profile.username).limit(settings.USER_SEARCH_LIMIT)
    else:
        query = query.order_by(Profile.created_at.desc()).limit(settings.USER_LIST_LIMIT)
    admin_ids = user_ids_with_role(session, ROLE_ADMIN)
    protected_ids = protected_account_ids(session)
    return [_profile_out(p, admin_ids, protected_ids, ctx) for p in query.all()]


def _get_profile(session: Session, user_id: UUID) -> Profile:
    profile = session.query(Profile).filter(Profile.user_id == user_id).first()
    if profile is None:
        raise NotFoundError("Profile not found")
    return profile


def ban_user(
    session: Session,
    ctx: AdminContext,
    user_id: UUID,
    settings: Settings,
    reason: str | None = None,
) -> ProfileOut:
    """Flag the account as banned. Data is kept; a blank reason falls back to the default."""
    ensure_can_moderate(session, ctx.user_id, ctx.flags.is_principal, user_id)
    profile = _get_profile(session, user_id)
    profile.is_banned = True
    profile.ban_reason = (reason or "").strip() or settings.DEFAULT_BAN_REASON
    session.commit()
    session.refresh(profile)
    events.publish("user_banned", ctx.user_id, user_id)
    return _profile_out(
        profile,
        user_ids_with_role(session, ROLE_ADMIN),
        protected_account_ids(session),
        ctx,
    )


def unban_user(session: Session, ctx: AdminContext, user_id: UUID) -> ProfileOut:
    """Clear the ban flag and reason. No history is kept."""
    ensure_can_moderate(session, ctx.user_id, ctx.flags.is_principal, user_id)
    profile = _get_profile(session, user_id)
    profile.is_banned = False
    profile.ban_reason = None
    session.commit()
    session.refresh(profile)
    events.publish("user_unbanned", ctx.user_id, user_id)
    return _profile_out(
        profile,
        user_ids_with_role(session, ROLE_ADMIN),
        protected_account_ids(session),
        ctx,
    )


# --- roles -----------------------------------------------------------------


def promote_user(session: Session, ctx: AdminContext, user_id: UUID) -> RoleChangeResponse:
    """Grant admin. Principal only; promoting an existing admin is an informational success."""
    if not ctx.flags.is_principal:
        raise PrincipalOnlyError("Only the principal admin can promote")
    _get_profile(session, user_id)
    changed = grant_role(session, user_id, ROLE_ADMIN)
    if changed:
        events.publish("admin_promoted", ctx.user_id, user_id)
    return RoleChangeResponse(
        user_id=user_id,
        is_admin=True,
        changed=changed,
        message="User promoted to admin" if changed else "Already admin",
    )


def demote_user(session: Session, ctx: AdminContext, user_id: UUID) -> RoleChangeResponse:
    """Revoke admin. Principal only, never on itself; demoting a non-admin succeeds."""
    if not ctx.flags.is_principal:
        raise PrincipalOnlyError("Only the principal admin can demote")
    if user_id == ctx.user_id:
        raise ForbiddenTargetError("Cannot demote yourself")
    changed = revoke_role(session, user_id, ROLE_ADMIN)
    if changed:
        events.publish("admin_demoted", ctx.user_id, user_id)
    return RoleChangeResponse(
        user_id=user_id,
        is_admin=False,
        changed=changed,
        message="Admin demoted" if changed else "Not an admin",
    )


# --- ban ledger ------------------------------------------------------------


def ban_email(
    session: Session,
    ctx: AdminContext,
    body: BannedEmailCreate,
    settings: Settings,
) -> BannedEmail:
    """Add (or refresh) an address in the ledger."""
    reason = (body.reason or "").strip() or settings.DEFAULT_BAN_REASON
    upsert_banned_email(session, body.email, ctx.user_id, reason)
    session.commit()
    entry = get_banned_email(session, body.email)
    events.publish("email_banned", ctx.user_id, entry.id if entry else None)
    return entry


def unban_email(session: Session, ctx: AdminContext, entry_id: UUID) -> bool:
    """Remove a ledger entry; absent entries are not an error."""
    removed = remove_banned_email(session, entry_id)
    session.commit()
    if removed:
        events.publish("email_unbanned", ctx.user_id, entry_id)
    return removed
