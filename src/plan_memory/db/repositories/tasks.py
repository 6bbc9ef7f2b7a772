"""
plan_memory.db.repositories.tasks

Repository for `PlanTask` entities.

Responsibilities:
- Insert tasks under an existing plan, copying the owning agent id.
- Fetch one task or list a plan's tasks by `task_number`, scoped to one agent.
- Update task status only while both the task and its plan still exist.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from plan_memory.db.fields import encode_json, new_id, now_ms
from plan_memory.db.models import DEFAULT_TASK_STATUS, Plan, PlanTask
from plan_memory.db.records import TaskRecord
from plan_memory.db.repositories.base import flush_checked, require_title


class TaskRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def insert(
        self,
        *,
        agent_id: str,
        plan_id: str,
        task_data: Mapping[str, Any],
        operation: str = "addTaskToPlan",
    ) -> TaskRecord:
        title = require_title(task_data.get("title"), operation=operation)
        ts = now_ms()
        task = PlanTask(
            task_id=new_id(),
            plan_id=plan_id,
            agent_id=agent_id,
            task_number=task_data.get("task_number"),
            title=title,
            description=task_data.get("description"),
            purpose=task_data.get("purpose"),
            action_description=task_data.get("action_description"),
            verification_method=task_data.get("verification_method"),
            code_content=task_data.get("code_content"),
            estimated_effort_hours=task_data.get("estimated_effort_hours"),
            status=task_data.get("status") or DEFAULT_TASK_STATUS,
            files_involved_json=encode_json(task_data.get("files_involved")),
            notes_json=encode_json(task_data.get("notes")),
            creation_timestamp=ts,
            last_updated_timestamp=ts,
            completion_timestamp=None,
        )
        self._session.add(task)
        await flush_checked(self._session, entity="Task")
        return TaskRecord.from_row(task)

    async def get(self, *, agent_id: str, task_id: str) -> TaskRecord | None:
        task = await self._get_row(agent_id=agent_id, task_id=task_id)
        return TaskRecord.from_row(task) if task is not None else None

    async def list_for_plan(
        self, *, agent_id: str, plan_id: str, status: str | None = None
    ) -> list[TaskRecord]:
        stmt = select(PlanTask).where(PlanTask.agent_id == agent_id, PlanTask.plan_id == plan_id)
        if status is not None:
            stmt = stmt.where(PlanTask.status == status)
        stmt = stmt.order_by(PlanTask.task_number.asc())
        rows = (await self._session.execute(stmt)).scalars().all()
        return [TaskRecord.from_row(row) for row in rows]

    async def set_status(
        self,
        *,
        agent_id: str,
        task_id: str,
        status: str,
        completion_timestamp: int | None = None,
    ) -> bool:
        task = await self._get_row(agent_id=agent_id, task_id=task_id, for_update=True)
        if task is None:
            return False

        # Checked separately from the task lookup: a task must never be written
        # while its plan is gone, even where cascade delete did not run.
        plan_stmt = select(Plan.plan_id).where(
            Plan.agent_id == agent_id, Plan.plan_id == task.plan_id
        )
        if (await self._session.execute(plan_stmt)).scalar_one_or_none() is None:
            return False

        task.status = status
        task.last_updated_timestamp = max(now_ms(), task.last_updated_timestamp)
        if completion_timestamp is not None:
            task.completion_timestamp = completion_timestamp
        await flush_checked(self._session, entity="Task")
        return True

    async def _get_row(
        self, *, agent_id: str, task_id: str, for_update: bool = False
    ) -> PlanTask | None:
        stmt = select(PlanTask).where(PlanTask.agent_id == agent_id, PlanTask.task_id == task_id)
        if for_update:
            stmt = stmt.with_for_update()
        return (await self._session.execute(stmt)).scalar_one_or_none()
