"""init plans and plan_tasks

Revision ID: 20261018_01
Revises:
Create Date: 2026-10-18 09:00:00
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision = "20261018_01"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "plans",
        sa.Column("plan_id", sa.String(length=36), nullable=False),
        sa.Column("agent_id", sa.String(length=256), nullable=False),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("overall_goal", sa.Text(), nullable=True),
        sa.Column("scope_description", sa.Text(), nullable=True),
        sa.Column("status", sa.String(length=64), nullable=True),
        sa.Column("version", sa.Integer(), server_default=sa.text("1"), nullable=True),
        sa.Column("plan_type", sa.String(length=64), nullable=True),
        sa.Column("refined_prompt_id", sa.String(length=64), nullable=True),
        sa.Column("analysis_report_id", sa.String(length=64), nullable=True),
        sa.Column("metadata", sa.Text(), nullable=True),
        sa.Column("creation_timestamp", sa.BigInteger(), nullable=False),
        sa.Column("last_updated_timestamp", sa.BigInteger(), nullable=False),
        sa.CheckConstraint("length(title) > 0", name="ck_plans_title_not_empty"),
        sa.PrimaryKeyConstraint("plan_id"),
    )
    op.create_index("ix_plans_agent_status", "plans", ["agent_id", "status"], unique=False)
    op.create_index(
        "ix_plans_agent_created", "plans", ["agent_id", "creation_timestamp"], unique=False
    )

    op.create_table(
        "plan_tasks",
        sa.Column("task_id", sa.String(length=36), nullable=False),
        sa.Column("plan_id", sa.String(length=36), nullable=False),
        sa.Column("agent_id", sa.String(length=256), nullable=False),
        sa.Column("task_number", sa.Integer(), nullable=False),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("purpose", sa.Text(), nullable=True),
        sa.Column("action_description", sa.Text(), nullable=True),
        sa.Column("verification_method", sa.Text(), nullable=True),
        sa.Column("code_content", sa.Text(), nullable=True),
        sa.Column("estimated_effort_hours", sa.Integer(), nullable=True),
        sa.Column("status", sa.String(length=64), nullable=True),
        sa.Column("files_involved", sa.Text(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("creation_timestamp", sa.BigInteger(), nullable=False),
        sa.Column("last_updated_timestamp", sa.BigInteger(), nullable=False),
        sa.Column("completion_timestamp", sa.BigInteger(), nullable=True),
        sa.CheckConstraint("length(title) > 0", name="ck_plan_tasks_title_not_empty"),
        sa.ForeignKeyConstraint(["plan_id"], ["plans.plan_id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("task_id"),
        sa.UniqueConstraint("plan_id", "task_number", name="uq_plan_tasks_plan_task_number"),
    )
    op.create_index(
        "ix_plan_tasks_plan_number", "plan_tasks", ["plan_id", "task_number"], unique=False
    )
    op.create_index(
        "ix_plan_tasks_agent_status", "plan_tasks", ["agent_id", "status"], unique=False
    )


def downgrade() -> None:
    op.drop_index("ix_plan_tasks_agent_status", table_name="plan_tasks")
    op.drop_index("ix_plan_tasks_plan_number", table_name="plan_tasks")
    op.drop_table("plan_tasks")
    op.drop_index("ix_plans_agent_created", table_name="plans")
    op.drop_index("ix_plans_agent_status", table_name="plans")
    op.drop_table("plans")
