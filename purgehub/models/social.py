"""
ORM models for the social tables that reference accounts.

Only the columns the moderation service reads or deletes by are mapped; the tables are
owned by the platform schema.
"""

import uuid

from sqlalchemy import Column, DateTime, ForeignKey, String, Text, Uuid, func

from purgehub.models.base import Base


def _created_at() -> Column:
    return Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class Post(Base):
    __tablename__ = "posts"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, nullable=False, index=True)
    content = Column(Text, nullable=True)
    created_at = _created_at()


class Comment(Base):
    __tablename__ = "comments"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    post_id = Column(Uuid, ForeignKey("posts.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(Uuid, nullable=False, index=True)
    content = Column(Text, nullable=False)
    created_at = _created_at()


class PostLike(Base):
    __tablename__ = "post_likes"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    post_id = Column(Uuid, ForeignKey("posts.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(Uuid, nullable=False, index=True)
    created_at = _created_at()


class PostFavorite(Base):
    __tablename__ = "post_favorites"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    post_id = Column(Uuid, ForeignKey("posts.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(Uuid, nullable=False, index=True)
    created_at = _created_at()


class Follow(Base):
    __tablename__ = "follows"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    follower_id = Column(Uuid, nullable=False, index=True)
    following_id = Column(Uuid, nullable=False, index=True)
    created_at = _created_at()


class Message(Base):
    __tablename__ = "messages"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    sender_id = Column(Uuid, nullable=False, index=True)
    group_id = Column(Uuid, nullable=True, index=True)
    receiver_id = Column(Uuid, nullable=True)
    content = Column(Text, nullable=True)
    created_at = _created_at()


class Notification(Base):
    __tablename__ = "notifications"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, nullable=False, index=True)
    related_user_id = Column(Uuid, nullable=True, index=True)
    type = Column(String(32), nullable=False, default="info")
    created_at = _created_at()


class GroupMember(Base):
    __tablename__ = "group_members"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    group_id = Column(Uuid, nullable=False, index=True)
    user_id = Column(Uuid, nullable=False, index=True)
    created_at = _created_at()


class Story(Base):
    __tablename__ = "stories"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, nullable=False, index=True)
    media_url = Column(String(2048), nullable=True)
    created_at = _created_at()
