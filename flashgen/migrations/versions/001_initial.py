"""Initial migration: generations, flashcards and generation error logs.

Revision ID: 001_initial
Revises:
Create Date: 2026-10-18
"""
from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "001_initial"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    """Create all initial tables."""
    # Create enum types
    op.execute("""
        CREATE TYPE generation_status AS ENUM (
            'pending', 'accepted', 'rejected'
        )
    """)
    op.execute("""
        CREATE TYPE source_type AS ENUM (
            'ai_full', 'ai_edited', 'manual'
        )
    """)

    # =====================
    # Generations table
    # =====================
    op.create_table(
        "generations",
        sa.Column("id", sa.BigInteger(), sa.Identity(always=False), nullable=False),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("source_text_length", sa.Integer(), nullable=False),
        sa.Column("generation_duration", sa.Integer(), nullable=True),
        sa.Column("flashcards_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("accepted_unedited_count", sa.Integer(), nullable=True),
        sa.Column("accepted_edited_count", sa.Integer(), nullable=True),
        sa.Column(
            "status",
            postgresql.ENUM(
                "pending",
                "accepted",
                "rejected",
                name="generation_status",
                create_type=False,
            ),
            nullable=False,
            server_default="pending",
        ),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_generations")),
    )
    op.create_index(op.f("ix_generations_user_id"), "generations", ["user_id"], unique=False)

    # =====================
    # Flashcards table
    # =====================
    op.create_table(
        "flashcards",
        sa.Column("id", sa.BigInteger(), sa.Identity(always=False), nullable=False),
        sa.Column("front_text", sa.String(200), nullable=False),
        sa.Column("back_text", sa.String(500), nullable=False),
        sa.Column(
            "source_type",
            postgresql.ENUM(
                "ai_full",
                "ai_edited",
                "manual",
                name="source_type",
                create_type=False,
            ),
            nullable=False,
        ),
        sa.Column("generation_id", sa.BigInteger(), nullable=True),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.ForeignKeyConstraint(
            ["generation_id"],
            ["generations.id"],
            name=op.f("fk_flashcards_generation_id_generations"),
            ondelete="SET NULL",
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_flashcards")),
    )
    op.create_index(
        op.f("ix_flashcards_generation_id"), "flashcards", ["generation_id"], unique=False
    )
    op.create_index(op.f("ix_flashcards_user_id"), "flashcards", ["user_id"], unique=False)

    # =====================
    # Generation error logs table
    # =====================
    op.create_table(
        "generation_error_logs",
        sa.Column("id", sa.BigInteger(), sa.Identity(always=False), nullable=False),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("generation_id", sa.BigInteger(), nullable=True),
        sa.Column("error_code", sa.String(100), nullable=False),
        sa.Column("error_message", sa.Text(), nullable=False),
        sa.Column("source_text_length", sa.Integer(), nullable=False),
        sa.Column("model", sa.String(100), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.ForeignKeyConstraint(
            ["generation_id"],
            ["generations.id"],
            name=op.f("fk_generation_error_logs_generation_id_generations"),
            ondelete="SET NULL",
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_generation_error_logs")),
    )
    op.create_index(
        op.f("ix_generation_error_logs_user_id"),
        "generation_error_logs",
        ["user_id"],
        unique=False,
    )


def downgrade() -> None:
    """Drop all tables."""
    # Drop tables in reverse order of creation (respecting foreign keys)
    op.drop_table("generation_error_logs")
    op.drop_table("flashcards")
    op.drop_table("generations")

    # Drop enum types
    op.execute("DROP TYPE IF EXISTS source_type")
    op.execute("DROP TYPE IF EXISTS generation_status")
