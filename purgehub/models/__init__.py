"""SQLAlchemy ORM models."""

from purgehub.models.banned_email import BannedEmail
from purgehub.models.base import Base
from purgehub.models.profile import Profile
from purgehub.models.report import Report
from purgehub.models.role import UserRole
from purgehub.models.social import (
    Comment,
    Follow,
    GroupMember,
    Message,
    Notification,
    Post,
    PostFavorite,
    PostLike,
    Story,
)

__all__ = [
    "Base",
    "BannedEmail",
    "Comment",
    "Follow",
    "GroupMember",
    "Message",
    "Notification",
    "Post",
    "PostFavorite",
    "PostLike",
    "Profile",
    "Report",
    "Story",
    "UserRole",
]
