"""
plan_memory.services.plan_tasks

Plan/task lifecycle service (transaction + persistence owner).

Responsibilities:
- Create a plan and its tasks as one atomic unit, rolling back on any failure.
- Expose the agent-scoped read and single-row write operations.
- Guard task additions against missing parent plans and invalid input.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError

from plan_memory.db.database import Database
from plan_memory.db.records import PlanRecord, TaskRecord
from plan_memory.db.repositories.base import require_title
from plan_memory.db.repositories.plans import PlanRepo
from plan_memory.db.repositories.tasks import TaskRepo
from plan_memory.errors import NotFoundError, PlanMemoryError
from plan_memory.observability.logging import bind_agent, get_logger

log = get_logger(__name__)


class PlanCreation(BaseModel):
    plan_id: str
    # Same order as the `tasks_data` passed in.
    task_ids: list[str]


class PlanTaskService:
    def __init__(self, database: Database) -> None:
        self._db = database

    async def create_plan_with_tasks(
        self,
        agent_id: str,
        plan_data: Mapping[str, Any],
        tasks_data: Sequence[Mapping[str, Any]],
    ) -> PlanCreation:
        """
        Insert the plan and every task inside a single transaction.

        Either `1 + len(tasks_data)` rows are persisted or none are. The error
        that aborted the transaction (ValidationError, ConstraintViolation or an
        engine error) is re-raised after rollback.
        """

        with bind_agent(agent_id):
            async with self._db.session() as session:
                try:
                    async with session.begin():
                        plans = PlanRepo(session)
                        tasks = TaskRepo(session)
                        plan = await plans.insert(
                            agent_id=agent_id,
                            plan_data=plan_data,
                            operation="createPlanWithTasks",
                        )
                        task_ids: list[str] = []
                        for task_data in tasks_data:
                            task = await tasks.insert(
                                agent_id=plan.agent_id,
                                plan_id=plan.plan_id,
                                task_data=task_data,
                                operation="createPlanWithTasks",
                            )
                            task_ids.append(task.task_id)
                except (PlanMemoryError, SQLAlchemyError) as exc:
                    log.warning(
                        "plan_create_rolled_back",
                        task_count=len(tasks_data),
                        error_type=type(exc).__name__,
                        error=str(exc),
                    )
                    raise

            log.info("plan_created", plan_id=plan.plan_id, task_count=len(task_ids))
            return PlanCreation(plan_id=plan.plan_id, task_ids=task_ids)

    async def get_plan(self, agent_id: str, plan_id: str) -> PlanRecord | None:
        async with self._db.session() as session:
            return await PlanRepo(session).get(agent_id=agent_id, plan_id=plan_id)

    async def get_plans(self, agent_id: str, status: str | None = None) -> list[PlanRecord]:
        async with self._db.session() as session:
            return await PlanRepo(session).list_for_agent(agent_id=agent_id, status=status)

    async def update_plan_status(self, agent_id: str, plan_id: str, new_status: str) -> bool:
        with bind_agent(agent_id):
            async with self._db.session() as session:
                updated = await PlanRepo(session).set_status(
                    agent_id=agent_id, plan_id=plan_id, status=new_status
                )
                await session.commit()
            log.info("plan_status_updated", plan_id=plan_id, status=new_status, updated=updated)
            return updated

    async def delete_plan(self, agent_id: str, plan_id: str) -> bool:
        with bind_agent(agent_id):
            async with self._db.session() as session:
                deleted = await PlanRepo(session).delete(agent_id=agent_id, plan_id=plan_id)
                await session.commit()
            log.info("plan_deleted", plan_id=plan_id, deleted=deleted)
            return deleted

    async def get_plan_tasks(
        self, agent_id: str, plan_id: str, status: str | None = None
    ) -> list[TaskRecord]:
        async with self._db.session() as session:
            return await TaskRepo(session).list_for_plan(
                agent_id=agent_id, plan_id=plan_id, status=status
            )

    async def get_task(self, agent_id: str, task_id: str) -> TaskRecord | None:
        async with self._db.session() as session:
            return await TaskRepo(session).get(agent_id=agent_id, task_id=task_id)

    async def update_task_status(
        self,
        agent_id: str,
        task_id: str,
        new_status: str,
        completion_timestamp: int | None = None,
    ) -> bool:
        with bind_agent(agent_id):
            async with self._db.session() as session:
                updated = await TaskRepo(session).set_status(
                    agent_id=agent_id,
                    task_id=task_id,
                    status=new_status,
                    completion_timestamp=completion_timestamp,
                )
                await session.commit()
            if not updated:
                log.info("task_status_not_updated", task_id=task_id, reason="task_or_plan_missing")
            else:
                log.info("task_status_updated", task_id=task_id, status=new_status)
            return updated

    async def add_task_to_plan(
        self, agent_id: str, plan_id: str, task_data: Mapping[str, Any]
    ) -> str:
        with bind_agent(agent_id):
            async with self._db.session() as session:
                if not await PlanRepo(session).exists(agent_id=agent_id, plan_id=plan_id):
                    raise NotFoundError(entity="Plan", entity_id=plan_id, agent_id=agent_id)
                require_title(task_data.get("title"), operation="addTaskToPlan")

                # A failed insert leaves nothing behind: the session rolls back on close.
                task = await TaskRepo(session).insert(
                    agent_id=agent_id,
                    plan_id=plan_id,
                    task_data=task_data,
                    operation="addTaskToPlan",
                )
                await session.commit()
            log.info("task_added", plan_id=plan_id, task_id=task.task_id)
            return task.task_id


# --- Module Notes -----------------------------------------------------------
# Only `create_plan_with_tasks` opens an explicit multi-statement transaction;
# every other write is a single statement committed on its own. Isolation between
# concurrent callers is left to the engine.
