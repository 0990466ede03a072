"""SQLAlchemy Core table definitions for the database schema."""

from sqlalchemy import (
    Boolean,
    Column,
    ForeignKey,
    Index,
    Integer,
    MetaData,
    Table,
    Text,
    func,
)
from sqlalchemy.dialects.postgresql import JSONB, TIMESTAMP

from .enums import challenge_status_enum

# Naming convention for constraints (helps Alembic generate better names)
convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}
metadata = MetaData(naming_convention=convention)


# =====================================================
# 1. USERS
# =====================================================
users = Table(
    "users",
    metadata,
    Column("user_id", Integer, primary_key=True, autoincrement=True),
    Column("email", Text),
    Column("display_name", Text),
    Column("is_admin", Boolean, server_default="false"),
    Column("created_at", TIMESTAMP(timezone=True), server_default=func.now()),
    Column("updated_at", TIMESTAMP(timezone=True), server_default=func.now()),
    Index("idx_users_email", "email"),
)


# =====================================================
# 2. CHALLENGES
# =====================================================
challenges = Table(
    "challenges",
    metadata,
    Column("challenge_id", Integer, primary_key=True, autoincrement=True),
    Column(
        "owner_id",
        Integer,
        ForeignKey("users.user_id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("title", Text, nullable=False),
    Column("status", challenge_status_enum, server_default="draft"),
    Column("start_at", TIMESTAMP(timezone=True)),
    Column("end_at", TIMESTAMP(timezone=True)),
    Column("archived_at", TIMESTAMP(timezone=True)),
    Column("content_updated_at", TIMESTAMP(timezone=True)),  # last document save
    Column("created_at", TIMESTAMP(timezone=True), server_default=func.now()),
    Column("updated_at", TIMESTAMP(timezone=True), server_default=func.now()),
    Index("idx_challenges_owner_id", "owner_id"),
    Index("idx_challenges_status_end_at", "status", "end_at"),
)


# =====================================================
# 3. CONTENT_BLOCKS
# =====================================================
# Block ids are generated by the application (UUID strings)
content_blocks = Table(
    "content_blocks",
    metadata,
    Column("block_id", Text, primary_key=True),
    Column(
        "challenge_id",
        Integer,
        ForeignKey("challenges.challenge_id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("block_type", Text, nullable=False),
    Column("content", JSONB, nullable=False, server_default="{}"),
    Column("sort_order", Integer, nullable=False),
    Column("created_at", TIMESTAMP(timezone=True), server_default=func.now()),
    Column("updated_at", TIMESTAMP(timezone=True), server_default=func.now()),
    Index("idx_content_blocks_challenge_id_sort_order", "challenge_id", "sort_order"),
)


# =====================================================
# 4. SUBMISSIONS
# =====================================================
submissions = Table(
    "submissions",
    metadata,
    Column("submission_id", Integer, primary_key=True, autoincrement=True),
    Column(
        "block_id",
        Text,
        ForeignKey("content_blocks.block_id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column(
        "challenge_id",
        Integer,
        ForeignKey("challenges.challenge_id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column(
        "user_id",
        Integer,
        ForeignKey("users.user_id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("content", Text),
    Column("media_url", Text),
    Column("created_at", TIMESTAMP(timezone=True), server_default=func.now()),
    Index("idx_submissions_challenge_id_user_id", "challenge_id", "user_id"),
    Index("idx_submissions_block_id", "block_id"),
)


# =====================================================
# 5. SUBMISSION_COMMENTS
# =====================================================
submission_comments = Table(
    "submission_comments",
    metadata,
    Column("comment_id", Integer, primary_key=True, autoincrement=True),
    Column(
        "submission_id",
        Integer,
        ForeignKey("submissions.submission_id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column(
        "author_id",
        Integer,
        ForeignKey("users.user_id", ondelete="SET NULL"),
    ),
    Column("content", Text, nullable=False),
    Column("created_at", TIMESTAMP(timezone=True), server_default=func.now()),
    Index("idx_submission_comments_submission_id", "submission_id"),
)
