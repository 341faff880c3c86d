"""Initial schema — participants and problems.

Revision ID: 001_initial
Revises: None
Create Date: 2026-10-18

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "participants",
        sa.Column("id", sa.String(40), primary_key=True),
        sa.Column("email", sa.String(320), nullable=False),
        sa.Column("username", sa.String(50), nullable=False),
        sa.Column("study_group", sa.String(20), nullable=False),
        sa.Column("academic_level", sa.String(20), nullable=False),
        sa.Column("data_science_experience", sa.String(20), nullable=False),
        sa.Column("consent_given", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column("consent_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column("last_active_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("withdrew_from_study", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("withdrawal_reason", sa.Text, nullable=True),
        sa.Column("withdrawal_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("sessions", sa.JSON, nullable=False),
        sa.Column("version", sa.Integer, nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_participants_email", "participants", ["email"], unique=True)

    op.create_table(
        "problems",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column(
            "owner_id", sa.String(40),
            sa.ForeignKey("participants.id", ondelete="CASCADE"), nullable=False,
        ),
        sa.Column("task_prompt", sa.Text, nullable=False),
        sa.Column("task_category", sa.String(20), nullable=False),
        sa.Column("initial_statement", sa.Text, nullable=False),
        sa.Column("current_statement", sa.Text, nullable=False),
        sa.Column("final_statement", sa.Text, nullable=True),
        sa.Column("reasoning", sa.Text, nullable=False, server_default=""),
        sa.Column("status", sa.String(20), nullable=False, server_default="in-progress"),
        sa.Column("started_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("ended_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("duration_minutes", sa.Integer, nullable=True),
        sa.Column("abandon_reason", sa.Text, nullable=True),
        sa.Column("interactions", sa.JSON, nullable=False),
        sa.Column("evaluation", sa.JSON, nullable=True),
        sa.Column("device_info", sa.JSON, nullable=True),
        sa.Column("version", sa.Integer, nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_problems_owner_id", "problems", ["owner_id"])
    op.create_index("ix_problems_status", "problems", ["status"])


def downgrade() -> None:
    op.drop_index("ix_problems_status", table_name="problems")
    op.drop_index("ix_problems_owner_id", table_name="problems")
    op.drop_table("problems")
    op.drop_index("ix_participants_email", table_name="participants")
    op.drop_table("participants")
