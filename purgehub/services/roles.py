"""Role store queries: membership checks, grants and revocations."""

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from purgehub.models import UserRole
from purgehub.models.role import ROLE_ADMIN


def has_role(session: Session, user_id: UUID, role: str) -> bool:
    """True if user_id holds role."""
    stmt = select(UserRole.id).where(UserRole.user_id == user_id, UserRole.role == role).limit(1)
    return session.execute(stmt).first() is not None


def user_ids_with_role(session: Session, role: str = ROLE_ADMIN) -> set[UUID]:
    """All account ids holding role (one query; used to annotate lists)."""
    stmt = select(UserRole.user_id).where(UserRole.role == role)
    return set(session.execute(stmt).scalars().all())


def grant_role(session: Session, user_id: UUID, role: str) -> bool:
    """
    Insert (user_id, role) and commit. Returns False when the grant already existed.

    The unique constraint decides: a conflicting insert is rolled back and reported, not raised.
    """
    session.add(UserRole(user_id=user_id, role=role))
    try:
        session.commit()
    except IntegrityError:
        session.rollback()
        return False
    return True


def revoke_role(session: Session, user_id: UUID, role: str) -> bool:
    """Delete (user_id, role) and commit. Returns False when there was nothing to delete."""
    deleted = (
        session.query(UserRole)
        .filter(UserRole.user_id == user_id, UserRole.role == role)
        .delete(synchronize_session=False)
    )
    session.commit()
    return deleted > 0
