"""ORM model for the role store (account -> named role grants)."""

import uuid

from sqlalchemy import Column, DateTime, String, UniqueConstraint, Uuid, func

from purgehub.models.base import Base

ROLE_ADMIN = "admin"
ROLE_SUPER_ADMIN = "super_admin"
ROLE_VALUES: frozenset[str] = frozenset({ROLE_ADMIN, ROLE_SUPER_ADMIN})


class UserRole(Base):
    """
    One role grant. An account holds a given role at most once.

    role: 'admin' (moderation console) or 'super_admin' (the principal, may promote/demote admins)
    """

    __tablename__ = "user_roles"
    __table_args__ = (UniqueConstraint("user_id", "role", name="uq_user_roles_user_id_role"),)

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, nullable=False, index=True)
    role = Column(String(32), nullable=False)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
