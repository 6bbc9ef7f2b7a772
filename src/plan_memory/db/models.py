"""
plan_memory.db.models

Core persistence schema.

Responsibilities:
- Define ORM models for the plan/task hierarchy:
  - Plan: top-level agent work item
  - PlanTask: ordered unit of work owned by exactly one plan
- Encode the integrity rules the engine must enforce (FK cascade, non-empty
  titles, unique task numbers per plan).
"""

from __future__ import annotations

from sqlalchemy import (
    BigInteger,
    CheckConstraint,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column

from plan_memory.db.base import Base
from plan_memory.db.fields import new_id

DEFAULT_PLAN_STATUS = "DRAFT"
DEFAULT_TASK_STATUS = "PLANNED"


class Plan(Base):
    __tablename__ = "plans"

    plan_id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    agent_id: Mapped[str] = mapped_column(String(256), nullable=False)

    title: Mapped[str] = mapped_column(Text, nullable=False)
    overall_goal: Mapped[str | None] = mapped_column(Text, nullable=True)
    scope_description: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str | None] = mapped_column(
        String(64), nullable=True, default=DEFAULT_PLAN_STATUS
    )
    version: Mapped[int | None] = mapped_column(
        Integer, nullable=True, default=1, server_default=text("1")
    )
    plan_type: Mapped[str | None] = mapped_column(String(64), nullable=True)
    refined_prompt_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    analysis_report_id: Mapped[str | None] = mapped_column(String(64), nullable=True)

    # "metadata" is reserved on declarative classes, hence the attribute name.
    metadata_json: Mapped[str | None] = mapped_column("metadata", Text, nullable=True)

    creation_timestamp: Mapped[int] = mapped_column(BigInteger, nullable=False)
    last_updated_timestamp: Mapped[int] = mapped_column(BigInteger, nullable=False)

    __table_args__ = (
        CheckConstraint("length(title) > 0", name="ck_plans_title_not_empty"),
        Index("ix_plans_agent_status", "agent_id", "status"),
        Index("ix_plans_agent_created", "agent_id", "creation_timestamp"),
    )


class PlanTask(Base):
    __tablename__ = "plan_tasks"

    task_id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    plan_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("plans.plan_id", ondelete="CASCADE"), nullable=False
    )
    agent_id: Mapped[str] = mapped_column(String(256), nullable=False)

    task_number: Mapped[int] = mapped_column(Integer, nullable=False)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    purpose: Mapped[str | None] = mapped_column(Text, nullable=True)
    action_description: Mapped[str | None] = mapped_column(Text, nullable=True)
    verification_method: Mapped[str | None] = mapped_column(Text, nullable=True)
    code_content: Mapped[str | None] = mapped_column(Text, nullable=True)
    estimated_effort_hours: Mapped[int | None] = mapped_column(Integer, nullable=True)
    status: Mapped[str | None] = mapped_column(
        String(64), nullable=True, default=DEFAULT_TASK_STATUS
    )

    files_involved_json: Mapped[str | None] = mapped_column("files_involved", Text, nullable=True)
    notes_json: Mapped[str | None] = mapped_column("notes", Text, nullable=True)

    creation_timestamp: Mapped[int] = mapped_column(BigInteger, nullable=False)
    last_updated_timestamp: Mapped[int] = mapped_column(BigInteger, nullable=False)
    completion_timestamp: Mapped[int | None] = mapped_column(BigInteger, nullable=True)

    __table_args__ = (
        CheckConstraint("length(title) > 0", name="ck_plan_tasks_title_not_empty"),
        UniqueConstraint("plan_id", "task_number", name="uq_plan_tasks_plan_task_number"),
        Index("ix_plan_tasks_plan_number", "plan_id", "task_number"),
        Index("ix_plan_tasks_agent_status", "agent_id", "status"),
    )


# --- Module Notes -----------------------------------------------------------
# Cascade delete lives in the FK (`ondelete="CASCADE"`), not in an ORM relationship:
# plan deletes are issued as Core DELETE statements and the engine removes tasks.
# SQLite only honours it with `PRAGMA foreign_keys=ON` (see `db.session`).
