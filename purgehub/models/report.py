"""ORM model for user-submitted reports against an account or a post."""

import uuid

from sqlalchemy import CheckConstraint, Column, DateTime, String, Text, Uuid, func

from purgehub.models.base import Base

REPORT_PENDING = "pending"
REPORT_RESOLVED = "resolved"
REPORT_DISMISSED = "dismissed"
REPORT_STATUSES = (REPORT_PENDING, REPORT_RESOLVED, REPORT_DISMISSED)


class Report(Base):
    """Complaint filed by reporter_id; moves once from pending to resolved or dismissed."""

    __tablename__ = "reports"
    __table_args__ = (
        CheckConstraint(
            "status IN ('pending', 'resolved', 'dismissed')",
            name="ck_reports_status",
        ),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    reason = Column(Text, nullable=False)
    status = Column(String(16), nullable=False, default=REPORT_PENDING, index=True)
    reporter_id = Column(Uuid, nullable=False, index=True)
    reported_user_id = Column(Uuid, nullable=True, index=True)
    reported_post_id = Column(Uuid, nullable=True)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
