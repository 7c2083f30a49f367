"""
Authorization decisions shared by every moderation entrypoint.

`check_authorization` answers who the caller is; `can_moderate` decides whether a destructive
action (ban, unban, delete) may target a given account. Both the console endpoints and the
privileged deletion function call these, so the UI hints and the enforcement never drift.
"""

from uuid import UUID

from sqlalchemy.orm import Session

from purgehub.models.role import ROLE_ADMIN, ROLE_SUPER_ADMIN
from purgehub.schemas.auth import AuthorizationFlags, CurrentUser
from purgehub.services.errors import ForbiddenTargetError
from purgehub.services.roles import has_role, user_ids_with_role


def check_authorization(session: Session, caller: CurrentUser | None) -> AuthorizationFlags:
    """Resolve is_admin and is_principal for caller. No caller means neither, without error."""
    if caller is None:
        return AuthorizationFlags()
    return AuthorizationFlags(
        is_admin=has_role(session, caller.id, ROLE_ADMIN),
        is_principal=has_role(session, caller.id, ROLE_SUPER_ADMIN),
    )


def can_moderate(
    caller_id: UUID | None,
    caller_is_principal: bool,
    target_id: UUID,
    target_is_protected: bool,
) -> bool:
    """
    Target-mutability policy. Pure.

    - Self-target: never.
    - Protected target (admin or principal): only the principal.
    - Any other target: allowed.
    """
    if caller_id is None or target_id == caller_id:
        return False
    if target_is_protected:
        return caller_is_principal
    return True


def is_protected_account(session: Session, user_id: UUID) -> bool:
    """Admins and the principal are protected targets, whichever role rows they hold."""
    return has_role(session, user_id, ROLE_ADMIN) or has_role(session, user_id, ROLE_SUPER_ADMIN)


def protected_account_ids(session: Session) -> set[UUID]:
    return user_ids_with_role(session, ROLE_ADMIN) | user_ids_with_role(session, ROLE_SUPER_ADMIN)


def ensure_can_moderate(
    session: Session,
    caller_id: UUID,
    caller_is_principal: bool,
    target_id: UUID,
) -> None:
    """Look up whether the target is protected and raise ForbiddenTargetError if the policy refuses."""
    target_is_protected = is_protected_account(session, target_id)
    if not can_moderate(caller_id, caller_is_principal, target_id, target_is_protected):
        raise ForbiddenTargetError()
