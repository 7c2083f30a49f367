"""
Privileged account deletion: verify the caller, erase everything the target owns, ban its
e-mail, then delete its authentication record.

Ordering:
  1-4  caller token, caller admin role, userId, target resolution (no writes)
  5    dependent records (comments, likes, favorites, follows, messages, notifications,
       group memberships, stories, filed reports), unordered among themselves
  6    posts, 7 profile, 8 role assignments, 9 ban ledger
  10   auth record, strictly last

Steps 5-9 share one database transaction committed before step 10. Every step deletes by
account id, so re-running after a failure is safe.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING
from uuid import UUID

import jwt
from sqlalchemy.orm import Session

from purgehub.core.security import decode_access_token, extract_bearer_token
from purgehub.models import (
    Comment,
    Follow,
    GroupMember,
    Message,
    Notification,
    Post,
    PostFavorite,
    PostLike,
    Profile,
    Report,
    Story,
    UserRole,
)
from purgehub.models.role import ROLE_ADMIN, ROLE_SUPER_ADMIN
from purgehub.schemas.auth import AuthUser
from purgehub.schemas.deletion import DeleteAccountRequest
from purgehub.services import events
from purgehub.services.ban_ledger import upsert_banned_email
from purgehub.services.errors import (
    AdminOnlyError,
    NotFoundError,
    UnauthorizedError,
    ValidationFailedError,
)
from purgehub.services.policy import ensure_can_moderate
from purgehub.services.roles import has_role

if TYPE_CHECKING:
    from purgehub.core.config import Settings
    from purgehub.services.auth_admin import AuthAdminClient

logger = logging.getLogger(__name__)

# (model, account-reference column) pairs with no ordering dependency on each other.
DEPENDENT_RECORDS = (
    (Comment, Comment.user_id),
    (PostLike, PostLike.user_id),
    (PostFavorite, PostFavorite.user_id),
    (Follow, Follow.follower_id),
    (Follow, Follow.following_id),
    (Message, Message.sender_id),
    (Notification, Notification.user_id),
    (Notification, Notification.related_user_id),
    (GroupMember, GroupMember.user_id),
    (Story, Story.user_id),
    (Report, Report.reporter_id),
)

# Deleted after the dependents, in this order.
OWNED_RECORDS = (
    (Post, Post.user_id),
    (Profile, Profile.user_id),
    (UserRole, UserRole.user_id),
)


def _delete_where(session: Session, model: type, column, user_id: UUID) -> int:
    return (
        session.query(model)
        .filter(column == user_id)
        .delete(synchronize_session=False)
    )


def erase_account_records(session: Session, user_id: UUID) -> dict[str, int]:
    """
    Delete every row that references user_id (steps 5-8). Does not commit.

    Returns deleted row counts keyed by "table.column".
    """
    counts: dict[str, int] = {}
    for model, column in DEPENDENT_RECORDS + OWNED_RECORDS:
        key = f"{model.__tablename__}.{column.key}"
        counts[key] = counts.get(key, 0) + _delete_where(session, model, column, user_id)
    return counts


async def authenticate_caller(
    auth_client: AuthAdminClient,
    authorization: str | None,
) -> AuthUser:
    """Step 1: the bearer token must decode and its subject must still exist."""
    token = extract_bearer_token(authorization)
    if token is None:
        raise UnauthorizedError()
    try:
        payload = decode_access_token(token)
        caller_id = UUID(str(payload["sub"]))
    except (jwt.PyJWTError, KeyError, ValueError) as e:
        raise UnauthorizedError() from e
    caller = await auth_client.get_user(caller_id)
    if caller is None:
        raise UnauthorizedError()
    return caller


def _parse_target_id(body: DeleteAccountRequest) -> UUID:
    raw = (body.user_id or "").strip()
    if not raw:
        raise ValidationFailedError("userId required")
    try:
        return UUID(raw)
    except ValueError as e:
        raise ValidationFailedError("userId must be a UUID") from e


async def delete_account(
    session: Session,
    auth_client: AuthAdminClient,
    authorization: str | None,
    body: DeleteAccountRequest,
    settings: Settings,
) -> UUID:
    """
    Run the whole workflow for body.user_id on behalf of the bearer of authorization.

    Returns the deleted account id. Raises a ModerationError subclass on refusal, or the
    underlying storage/auth error; nothing is rolled back once step 9 has been committed.
    """
    caller = await authenticate_caller(auth_client, authorization)

    if not has_role(session, caller.id, ROLE_ADMIN):
        raise AdminOnlyError()

    target_id = _parse_target_id(body)
    ensure_can_moderate(
        session,
        caller.id,
        has_role(session, caller.id, ROLE_SUPER_ADMIN),
        target_id,
    )

    target = await auth_client.get_user(target_id)
    if target is None:
        raise NotFoundError("User not found")

    reason = (body.reason or "").strip() or settings.DEFAULT_DELETE_REASON
    try:
        counts = erase_account_records(session, target_id)
        if target.email:
            upsert_banned_email(session, target.email, caller.id, reason)
        session.commit()
    except Exception:
        session.rollback()
        raise
    logger.info(
        "Erased account %s: rows_deleted=%s email_banned=%s",
        target_id,
        sum(counts.values()),
        bool(target.email),
    )

    await auth_client.delete_user(target_id)
    events.publish("account_deleted", caller.id, target_id, reason=repr(reason))
    return target_id
