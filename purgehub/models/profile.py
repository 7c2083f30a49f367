"""ORM model for per-account profiles and their moderation state."""

import uuid

from sqlalchemy import Boolean, Column, DateTime, String, Text, Uuid, func

from purgehub.models.base import Base


class Profile(Base):
    """
    Public profile of one account, created at signup.

    ban_reason is set iff is_banned is true (kept by the moderation service, not the database).
    """

    __tablename__ = "profiles"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, nullable=False, unique=True, index=True)
    username = Column(String(255), nullable=False, index=True)
    display_name = Column(String(255), nullable=True)
    avatar_url = Column(String(2048), nullable=True)
    is_banned = Column(Boolean, nullable=False, default=False)
    ban_reason = Column(Text, nullable=True)
    is_verified = Column(Boolean, nullable=False, default=False)
    certification_type = Column(String(32), nullable=True)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
