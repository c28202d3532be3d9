"""Initial schema: users, lessons, scenarios, progress, quiz scores, feedback.

Revision ID: 001_initial_schema
Revises:
Create Date: 2026-10-18
"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

revision: str = "001_initial_schema"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    # --- Users ---
    op.create_table(
        "users",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("username", sa.String(64), nullable=False, unique=True),
        sa.Column("password_hash", sa.String(256), nullable=False),
        sa.Column("security_question", sa.String(255), nullable=True),
        sa.Column("security_answer_hash", sa.String(256), nullable=True),
        sa.Column("is_admin", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    # --- Content ---
    op.create_table(
        "lessons",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("content", sa.Text, nullable=False),
        sa.Column("media_type", sa.String(32), nullable=True),
        sa.Column("media_url", sa.String(1024), nullable=True),
        sa.Column("difficulty", sa.Integer, nullable=False, server_default="1"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_lessons_difficulty", "lessons", ["difficulty"])

    op.create_table(
        "scenarios",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("description", sa.Text, nullable=False),
        sa.Column("media_type", sa.String(32), nullable=True),
        sa.Column("media_url", sa.String(1024), nullable=True),
        sa.Column("difficulty", sa.Integer, nullable=False, server_default="1"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_scenarios_difficulty", "scenarios", ["difficulty"])

    op.create_table(
        "scenario_choices",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "scenario_id", sa.Integer, sa.ForeignKey("scenarios.id", ondelete="CASCADE"), nullable=False
        ),
        sa.Column("choice_text", sa.Text, nullable=False),
        sa.Column("outcome", sa.Text, nullable=True),
        sa.Column("survivability", sa.Integer, nullable=True),
    )
    op.create_index("ix_scenario_choices_scenario_id", "scenario_choices", ["scenario_id"])

    # --- Progress ---
    op.create_table(
        "user_progress",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("user_id", sa.Integer, sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column(
            "scenario_id", sa.Integer, sa.ForeignKey("scenarios.id", ondelete="CASCADE"), nullable=False
        ),
        sa.Column(
            "choice_id", sa.Integer, sa.ForeignKey("scenario_choices.id", ondelete="SET NULL"), nullable=True
        ),
        sa.Column("outcome", sa.Text, nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("idx_user_progress_user", "user_progress", ["user_id", "scenario_id"])

    op.create_table(
        "user_lesson_progress",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("user_id", sa.Integer, sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("lesson_id", sa.Integer, sa.ForeignKey("lessons.id", ondelete="CASCADE"), nullable=False),
        sa.Column("completed", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.UniqueConstraint("user_id", "lesson_id", name="uq_user_lesson_progress"),
    )

    op.create_table(
        "user_quiz_scores",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("user_id", sa.Integer, sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("lesson_id", sa.Integer, sa.ForeignKey("lessons.id", ondelete="SET NULL"), nullable=True),
        sa.Column("score", sa.Float, nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("idx_user_quiz_scores_user", "user_quiz_scores", ["user_id"])

    # --- Feedback ---
    op.create_table(
        "feedback",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("user_id", sa.Integer, sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("content_type", sa.String(16), nullable=False),
        sa.Column("content_id", sa.Integer, nullable=False),
        sa.Column("rating", sa.Integer, nullable=False),
        sa.Column("comment", sa.Text, nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.CheckConstraint("rating BETWEEN 1 AND 5", name="ck_feedback_rating"),
        sa.CheckConstraint("content_type IN ('lesson', 'scenario')", name="ck_feedback_content_type"),
    )


def downgrade() -> None:
    op.drop_table("feedback")
    op.drop_index("idx_user_quiz_scores_user", table_name="user_quiz_scores")
    op.drop_table("user_quiz_scores")
    op.drop_table("user_lesson_progress")
    op.drop_index("idx_user_progress_user", table_name="user_progress")
    op.drop_table("user_progress")
    op.drop_index("ix_scenario_choices_scenario_id", table_name="scenario_choices")
    op.drop_table("scenario_choices")
    op.drop_index("ix_scenarios_difficulty", table_name="scenarios")
    op.drop_table("scenarios")
    op.drop_index("ix_lessons_difficulty", table_name="lessons")
    op.drop_table("lessons")
    op.drop_table("users")
