"""
Orphan sweep job. Run from cron, e.g.:

  python -m purgehub.reconcile

Hourly: 5 * * * * cd /srv/purgehub && .venv/bin/python -m purgehub.reconcile
"""

import logging
import sys

from purgehub.core.config import get_settings
from purgehub.core.database import session_scope
from purgehub.services.reconcile import run_reconciliation

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)


def main() -> int:
    """Erase rows that reference accounts without a profile. Exit code 1 on failure."""
    try:
        with session_scope() as db:
            orphans, rows_deleted = run_reconciliation(db, get_settings())
    except Exception as e:
        logger.exception("Reconciliation job failed: %s", e)
        return 1
    logger.info(
        "Reconciliation completed: orphan_accounts=%s rows_deleted=%s",
        orphans,
        rows_deleted,
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
