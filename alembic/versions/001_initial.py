"""Initial schema: accounts, lesson progress, achievements, todos.

Revision ID: 001_initial
Revises: None
Create Date: 2026-10-19
"""

from collections.abc import Sequence

import sqlalchemy as sa

from alembic import op

revision: str = "001_initial"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    """Create all tables."""
    # --- users ---
    op.create_table(
        "users",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("email", sa.String(320), nullable=False),
        sa.Column("password_hash", sa.String(256), nullable=False),
        sa.Column("first_name", sa.String(100), nullable=False),
        sa.Column("last_name", sa.String(100), nullable=False),
        sa.Column("avatar", sa.Text(), nullable=True),
        sa.Column("theme", sa.String(32), nullable=True),
        sa.Column("credits", sa.BigInteger(), server_default="0", nullable=False),
        sa.Column("total_conversation_time", sa.BigInteger(), server_default="0", nullable=False),
        sa.Column("completed_lessons", sa.Integer(), server_default="0", nullable=False),
        sa.Column("terms_accepted", sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column("study_start_date", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.UniqueConstraint("email", name="uq_users_email"),
        sa.CheckConstraint("credits >= 0", name="ck_users_credits_non_negative"),
        sa.CheckConstraint("total_conversation_time >= 0", name="ck_users_conversation_time_non_negative"),
        sa.CheckConstraint("completed_lessons >= 0", name="ck_users_completed_lessons_non_negative"),
    )

    # --- lesson_progress ---
    op.create_table(
        "lesson_progress",
        sa.Column("user_id", sa.String(36), nullable=False),
        sa.Column("lesson_topic", sa.String(100), nullable=False),
        sa.Column("current_step", sa.Integer(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("user_id", "lesson_topic", name="pk_lesson_progress"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE", name="fk_lesson_progress_user_id_users"),
        sa.CheckConstraint("current_step BETWEEN 1 AND 5", name="ck_lesson_progress_current_step_range"),
    )

    # --- achievements ---
    op.create_table(
        "achievements",
        sa.Column("user_id", sa.String(36), nullable=False),
        sa.Column("achievement_id", sa.String(100), nullable=False),
        sa.Column("unlocked_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("user_id", "achievement_id", name="pk_achievements"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE", name="fk_achievements_user_id_users"),
    )
    op.create_index("ix_achievements_user_unlocked", "achievements", ["user_id", "unlocked_at"])

    # --- todos ---
    op.create_table(
        "todos",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("user_id", sa.String(36), nullable=False),
        sa.Column("text", sa.Text(), nullable=False),
        sa.Column("is_header", sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column("duration", sa.Integer(), server_default="0", nullable=False),
        sa.Column("order", sa.Integer(), nullable=False),
        sa.Column("status", sa.String(16), server_default="todo", nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE", name="fk_todos_user_id_users"),
        sa.CheckConstraint("status IN ('todo', 'inProgress', 'completed')", name="ck_todos_status_valid"),
        sa.CheckConstraint("duration >= 0", name="ck_todos_duration_non_negative"),
    )
    op.create_index("ix_todos_user_id_order", "todos", ["user_id", "order"])


def downgrade() -> None:
    """Drop all tables."""
    op.drop_index("ix_todos_user_id_order", table_name="todos")
    op.drop_table("todos")
    op.drop_index("ix_achievements_user_unlocked", table_name="achievements")
    op.drop_table("achievements")
    op.drop_table("lesson_progress")
    op.drop_table("users")
