"""create users, watchlist, analysis and gene sequence tables

Revision ID: 3f9c2a7d1b04
Revises:
Create Date: 2026-10-19 09:12:40.118204

"""

from collections.abc import Sequence

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "3f9c2a7d1b04"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False
        ),
        sa.Column(
            "updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False
        ),
    ]


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("username", sa.String(length=255), nullable=True),
        sa.Column("password_hash", sa.String(length=255), nullable=True),
        sa.Column("first_name", sa.String(length=255), nullable=False, server_default=""),
        sa.Column("last_name", sa.String(length=255), nullable=False, server_default=""),
        sa.Column("dob", sa.String(length=32), nullable=False, server_default=""),
        sa.Column("avatar", sa.String(length=1024), nullable=False, server_default=""),
        sa.Column("google_id", sa.String(length=255), nullable=True),
        sa.Column("is_email_verified", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column(
            "subscription_plan", sa.String(length=20), nullable=False, server_default="basic"
        ),
        sa.Column(
            "subscription_status", sa.String(length=20), nullable=False, server_default="active"
        ),
        sa.Column("tokens_daily_limit", sa.Integer(), nullable=False, server_default="10"),
        sa.Column("tokens_used_today", sa.Integer(), nullable=False, server_default="0"),
        sa.Column(
            "tokens_last_reset", sa.Date(), nullable=False, server_default=sa.func.current_date()
        ),
        sa.Column("tokens_total_used", sa.Integer(), nullable=False, server_default="0"),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_users_id"), "users", ["id"], unique=False)
    op.create_index(op.f("ix_users_email"), "users", ["email"], unique=True)
    op.create_index(op.f("ix_users_google_id"), "users", ["google_id"], unique=True)

    op.create_table(
        "watchlist_items",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("item_type", sa.String(length=32), nullable=False),
        sa.Column("reference_id", sa.String(length=255), nullable=True),
        sa.Column("title", sa.String(length=255), nullable=True),
        sa.Column("summary", sa.Text(), nullable=True),
        sa.Column("data_preview", sa.Text(), nullable=True),
        sa.Column("score", sa.Float(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_watchlist_items_id"), "watchlist_items", ["id"], unique=False)
    op.create_index(
        op.f("ix_watchlist_items_user_id"), "watchlist_items", ["user_id"], unique=False
    )

    op.create_table(
        "ai_analyses",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("analysis_type", sa.String(length=50), nullable=False),
        sa.Column("input_type", sa.String(length=50), nullable=False),
        sa.Column("results", sa.JSON(), nullable=False),
        sa.Column("model_used", sa.String(length=100), nullable=True),
        sa.Column("processing_time_ms", sa.Integer(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_ai_analyses_id"), "ai_analyses", ["id"], unique=False)
    op.create_index(op.f("ix_ai_analyses_user_id"), "ai_analyses", ["user_id"], unique=False)

    op.create_table(
        "gene_sequences",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("sequence_id", sa.String(length=64), nullable=False),
        sa.Column("dna_sequence", sa.Text(), nullable=False),
        sa.Column("sequence_type", sa.String(length=10), nullable=False),
        sa.Column(
            "analysis_status", sa.String(length=20), nullable=False, server_default="pending"
        ),
        sa.Column("analysis_results", sa.JSON(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_gene_sequences_id"), "gene_sequences", ["id"], unique=False)
    op.create_index(
        op.f("ix_gene_sequences_user_id"), "gene_sequences", ["user_id"], unique=False
    )
    op.create_index(
        op.f("ix_gene_sequences_sequence_id"), "gene_sequences", ["sequence_id"], unique=False
    )


def downgrade() -> None:
    op.drop_table("gene_sequences")
    op.drop_table("ai_analyses")
    op.drop_table("watchlist_items")
    op.drop_table("users")
