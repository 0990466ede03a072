"""Initial schema: users, challenges, content blocks, submissions.

Revision ID: 001
Revises:
Create Date: 2026-10-19

Content blocks carry their type tag and a JSONB content payload; the
application keeps sort_order strictly increasing per challenge.
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

challenge_status = postgresql.ENUM(
    "draft", "scheduled", "active", "archived", name="challenge_status"
)


def upgrade() -> None:
    challenge_status.create(op.get_bind(), checkfirst=True)

    op.create_table(
        "users",
        sa.Column("user_id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("email", sa.Text(), nullable=True),
        sa.Column("display_name", sa.Text(), nullable=True),
        sa.Column("is_admin", sa.Boolean(), server_default="false", nullable=True),
        sa.Column(
            "created_at",
            postgresql.TIMESTAMP(timezone=True),
            server_default=sa.text("now()"),
            nullable=True,
        ),
        sa.Column(
            "updated_at",
            postgresql.TIMESTAMP(timezone=True),
            server_default=sa.text("now()"),
            nullable=True,
        ),
        sa.PrimaryKeyConstraint("user_id", name=op.f("pk_users")),
    )
    op.create_index("idx_users_email", "users", ["email"], unique=False)

    op.create_table(
        "challenges",
        sa.Column("challenge_id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("owner_id", sa.Integer(), nullable=False),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column(
            "status",
            postgresql.ENUM(name="challenge_status", create_type=False),
            server_default="draft",
            nullable=True,
        ),
        sa.Column("start_at", postgresql.TIMESTAMP(timezone=True), nullable=True),
        sa.Column("end_at", postgresql.TIMESTAMP(timezone=True), nullable=True),
        sa.Column("archived_at", postgresql.TIMESTAMP(timezone=True), nullable=True),
        sa.Column(
            "content_updated_at", postgresql.TIMESTAMP(timezone=True), nullable=True
        ),
        sa.Column(
            "created_at",
            postgresql.TIMESTAMP(timezone=True),
            server_default=sa.text("now()"),
            nullable=True,
        ),
        sa.Column(
            "updated_at",
            postgresql.TIMESTAMP(timezone=True),
            server_default=sa.text("now()"),
            nullable=True,
        ),
        sa.ForeignKeyConstraint(
            ["owner_id"],
            ["users.user_id"],
            name=op.f("fk_challenges_owner_id_users"),
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("challenge_id", name=op.f("pk_challenges")),
    )
    op.create_index("idx_challenges_owner_id", "challenges", ["owner_id"], unique=False)
    op.create_index(
        "idx_challenges_status_end_at", "challenges", ["status", "end_at"], unique=False
    )

    op.create_table(
        "content_blocks",
        sa.Column("block_id", sa.Text(), nullable=False),
        sa.Column("challenge_id", sa.Integer(), nullable=False),
        sa.Column("block_type", sa.Text(), nullable=False),
        sa.Column(
            "content",
            postgresql.JSONB(astext_type=sa.Text()),
            server_default="{}",
            nullable=False,
        ),
        sa.Column("sort_order", sa.Integer(), nullable=False),
        sa.Column(
            "created_at",
            postgresql.TIMESTAMP(timezone=True),
            server_default=sa.text("now()"),
            nullable=True,
        ),
        sa.Column(
            "updated_at",
            postgresql.TIMESTAMP(timezone=True),
            server_default=sa.text("now()"),
            nullable=True,
        ),
        sa.ForeignKeyConstraint(
            ["challenge_id"],
            ["challenges.challenge_id"],
            name=op.f("fk_content_blocks_challenge_id_challenges"),
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("block_id", name=op.f("pk_content_blocks")),
    )
    op.create_index(
        "idx_content_blocks_challenge_id_sort_order",
        "content_blocks",
        ["challenge_id", "sort_order"],
        unique=False,
    )

    op.create_table(
        "submissions",
        sa.Column("submission_id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("block_id", sa.Text(), nullable=False),
        sa.Column("challenge_id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("content", sa.Text(), nullable=True),
        sa.Column("media_url", sa.Text(), nullable=True),
        sa.Column(
            "created_at",
            postgresql.TIMESTAMP(timezone=True),
            server_default=sa.text("now()"),
            nullable=True,
        ),
        sa.ForeignKeyConstraint(
            ["block_id"],
            ["content_blocks.block_id"],
            name=op.f("fk_submissions_block_id_content_blocks"),
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["challenge_id"],
            ["challenges.challenge_id"],
            name=op.f("fk_submissions_challenge_id_challenges"),
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["user_id"],
            ["users.user_id"],
            name=op.f("fk_submissions_user_id_users"),
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("submission_id", name=op.f("pk_submissions")),
    )
    op.create_index(
        "idx_submissions_challenge_id_user_id",
        "submissions",
        ["challenge_id", "user_id"],
        unique=False,
    )
    op.create_index("idx_submissions_block_id", "submissions", ["block_id"], unique=False)

    op.create_table(
        "submission_comments",
        sa.Column("comment_id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("submission_id", sa.Integer(), nullable=False),
        sa.Column("author_id", sa.Integer(), nullable=True),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column(
            "created_at",
            postgresql.TIMESTAMP(timezone=True),
            server_default=sa.text("now()"),
            nullable=True,
        ),
        sa.ForeignKeyConstraint(
            ["submission_id"],
            ["submissions.submission_id"],
            name=op.f("fk_submission_comments_submission_id_submissions"),
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["author_id"],
            ["users.user_id"],
            name=op.f("fk_submission_comments_author_id_users"),
            ondelete="SET NULL",
        ),
        sa.PrimaryKeyConstraint("comment_id", name=op.f("pk_submission_comments")),
    )
    op.create_index(
        "idx_submission_comments_submission_id",
        "submission_comments",
        ["submission_id"],
        unique=False,
    )


def downgrade() -> None:
    op.drop_index(
        "idx_submission_comments_submission_id", table_name="submission_comments"
    )
    op.drop_table("submission_comments")
    op.drop_index("idx_submissions_block_id", table_name="submissions")
    op.drop_index("idx_submissions_challenge_id_user_id", table_name="submissions")
    op.drop_table("submissions")
    op.drop_index(
        "idx_content_blocks_challenge_id_sort_order", table_name="content_blocks"
    )
    op.drop_table("content_blocks")
    op.drop_index("idx_challenges_status_end_at", table_name="challenges")
    op.drop_index("idx_challenges_owner_id", table_name="challenges")
    op.drop_table("challenges")
    op.drop_index("idx_users_email", table_name="users")
    op.drop_table("users")
    challenge_status.drop(op.get_bind(), checkfirst=True)
