"""Social tables referencing accounts: posts and everything the account deletion cascades over.

Revision ID: 20261001100000
Revises: 20261001000000
Create Date: 2026-10-01

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "20261001100000"
down_revision: Union[str, None] = "20261001000000"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _created_at() -> sa.Column:
    return sa.Column(
        "created_at",
        sa.DateTime(timezone=True),
        nullable=False,
        server_default=sa.text("now()"),
    )


def _post_ref() -> sa.Column:
    return sa.Column(
        "post_id",
        sa.Uuid(),
        sa.ForeignKey("posts.id", ondelete="CASCADE"),
        nullable=False,
    )


# table -> account-reference columns that get an index
INDEXED_COLUMNS = {
    "posts": ["user_id"],
    "comments": ["post_id", "user_id"],
    "post_likes": ["post_id", "user_id"],
    "post_favorites": ["post_id", "user_id"],
    "follows": ["follower_id", "following_id"],
    "messages": ["sender_id", "group_id"],
    "notifications": ["user_id", "related_user_id"],
    "group_members": ["group_id", "user_id"],
    "stories": ["user_id"],
}


def upgrade() -> None:
    op.create_table(
        "posts",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("content", sa.Text(), nullable=True),
        _created_at(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_table(
        "comments",
        sa.Column("id", sa.Uuid(), nullable=False),
        _post_ref(),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        _created_at(),
        sa.PrimaryKeyConstraint("id"),
    )
    for name in ("post_likes", "post_favorites"):
        op.create_table(
            name,
            sa.Column("id", sa.Uuid(), nullable=False),
            _post_ref(),
            sa.Column("user_id", sa.Uuid(), nullable=False),
            _created_at(),
            sa.PrimaryKeyConstraint("id"),
        )
    op.create_table(
        "follows",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("follower_id", sa.Uuid(), nullable=False),
        sa.Column("following_id", sa.Uuid(), nullable=False),
        _created_at(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_table(
        "messages",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("sender_id", sa.Uuid(), nullable=False),
        sa.Column("group_id", sa.Uuid(), nullable=True),
        sa.Column("receiver_id", sa.Uuid(), nullable=True),
        sa.Column("content", sa.Text(), nullable=True),
        _created_at(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_table(
        "notifications",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("related_user_id", sa.Uuid(), nullable=True),
        sa.Column("type", sa.String(length=32), nullable=False, server_default="info"),
        _created_at(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_table(
        "group_members",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("group_id", sa.Uuid(), nullable=False),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        _created_at(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_table(
        "stories",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("media_url", sa.String(length=2048), nullable=True),
        _created_at(),
        sa.PrimaryKeyConstraint("id"),
    )
    for table, columns in INDEXED_COLUMNS.items():
        for column in columns:
            op.create_index(op.f(f"ix_{table}_{column}"), table, [column], unique=False)


def downgrade() -> None:
    for table, columns in INDEXED_COLUMNS.items():
        for column in columns:
            op.drop_index(op.f(f"ix_{table}_{column}"), table_name=table)
    for table in (
        "stories",
        "group_members",
        "notifications",
        "messages",
        "follows",
        "post_favorites",
        "post_likes",
        "comments",
        "posts",
    ):
        op.drop_table(table)
