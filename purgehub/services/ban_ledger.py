"""Ban ledger: e-mail deny-list with upsert-on-conflict writes."""

import uuid
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.orm import Session

from purgehub.models import BannedEmail


def normalize_email(email: str) -> str:
    return email.strip().lower()


def _insert(session: Session):
    """Dialect-specific INSERT supporting ON CONFLICT (Postgres in production, SQLite in tests)."""
    if session.get_bind().dialect.name == "sqlite":
        return sqlite.insert
    return postgresql.insert


def upsert_banned_email(
    session: Session,
    email: str,
    banned_by: UUID | None,
    reason: str | None,
) -> None:
    """
    Record email in the ledger. On conflict the banning admin and reason are overwritten,
    so the latest ban wins and the address appears exactly once. Does not commit.
    """
    insert = _insert(session)
    stmt = insert(BannedEmail).values(
        id=uuid.uuid4(),
        email=normalize_email(email),
        banned_by=banned_by,
        reason=reason,
    )
    stmt = stmt.on_conflict_do_update(
        index_elements=[BannedEmail.email],
        set_={
            "banned_by": stmt.excluded.banned_by,
            "reason": stmt.excluded.reason,
        },
    )
    session.execute(stmt)


def get_banned_email(session: Session, email: str) -> BannedEmail | None:
    return (
        session.query(BannedEmail)
        .filter(BannedEmail.email == normalize_email(email))
        .first()
    )


def list_banned_emails(session: Session) -> list[BannedEmail]:
    return session.query(BannedEmail).order_by(BannedEmail.created_at.desc()).all()


def count_banned_emails(session: Session) -> int:
    return session.execute(select(func.count()).select_from(BannedEmail)).scalar_one()


def remove_banned_email(session: Session, entry_id: UUID) -> bool:
    """Unban by ledger id. Returns False if the entry was already gone. Does not commit."""
    deleted = (
        session.query(BannedEmail)
        .filter(BannedEmail.id == entry_id)
        .delete(synchronize_session=False)
    )
    return deleted > 0
