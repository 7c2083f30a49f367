"""ORM model for the ban ledger: e-mail addresses barred from re-registering."""

import uuid

from sqlalchemy import Column, DateTime, String, Text, Uuid, func

from purgehub.models.base import Base


class BannedEmail(Base):
    """One banned address (stored lower-cased, unique)."""

    __tablename__ = "banned_emails"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    email = Column(String(320), nullable=False, unique=True, index=True)
    banned_by = Column(Uuid, nullable=True)
    reason = Column(Text, nullable=True)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
