"""Moderation write events. Logged as one line each; a realtime channel would publish these."""

import logging
from uuid import UUID

logger = logging.getLogger(__name__)


def publish(
    event: str,
    actor_id: UUID | None,
    target_id: UUID | str | None = None,
    **fields: object,
) -> None:
    """Emit `moderation.<event>` with actor, target and any extra key=value fields."""
    extra = " ".join(f"{k}={v}" for k, v in sorted(fields.items()))
    logger.info(
        "moderation.%s actor=%s target=%s%s",
        event,
        actor_id,
        target_id,
        f" {extra}" if extra else "",
    )
