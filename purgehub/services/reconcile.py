"""Orphan sweep: erase rows that still reference accounts whose profile no longer exists."""

import logging
from typing import TYPE_CHECKING
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import Session

from purgehub.models import Post, Profile
from purgehub.services.account_deletion import DEPENDENT_RECORDS, erase_account_records

if TYPE_CHECKING:
    from purgehub.core.config import Settings

logger = logging.getLogger(__name__)

# Role rows are not a source: a bootstrap grant may exist before the profile does.
ORPHAN_SOURCES = DEPENDENT_RECORDS + ((Post, Post.user_id),)


def find_orphan_account_ids(session: Session) -> set[UUID]:
    """Account ids referenced by dependent rows or posts but with no profile row."""
    known = select(Profile.user_id)
    orphans: set[UUID] = set()
    for _model, column in ORPHAN_SOURCES:
        stmt = select(column).where(column.is_not(None), column.not_in(known)).distinct()
        orphans.update(session.execute(stmt).scalars().all())
    return orphans


def run_reconciliation(session: Session, settings: "Settings") -> tuple[int, int]:
    """
    Sweep orphaned rows left by an interrupted deletion.

    Returns (orphan_accounts, rows_deleted). Idempotent: safe to run repeatedly.
    """
    if not settings.RECONCILE_ENABLED:
        logger.info("Reconciliation is disabled (RECONCILE_ENABLED=false); skipping.")
        return (0, 0)

    orphans = find_orphan_account_ids(session)
    rows_deleted = 0
    for user_id in sorted(orphans, key=str):
        counts = erase_account_records(session, user_id)
        rows_deleted += sum(counts.values())
    session.commit()

    if orphans:
        logger.info(
            "Reconciliation run: orphan_accounts=%s, rows_deleted=%s",
            len(orphans),
            rows_deleted,
        )
    return (len(orphans), rows_deleted)
