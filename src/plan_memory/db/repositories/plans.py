"""
plan_memory.db.repositories.plans

Repository for `Plan` entities.

Responsibilities:
- Insert, fetch and list plans scoped to one agent.
- Update plan status with monotonic `last_updated_timestamp` bookkeeping.
- Delete plans, leaving task removal to the FK cascade.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from sqlalchemy import delete, literal_column, select
from sqlalchemy.ext.asyncio import AsyncSession

from plan_memory.db.fields import encode_json, new_id, now_ms
from plan_memory.db.models import DEFAULT_PLAN_STATUS, Plan
from plan_memory.db.records import PlanRecord
from plan_memory.db.repositories.base import flush_checked, require_title


class PlanRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def insert(
        self,
        *,
        agent_id: str,
        plan_data: Mapping[str, Any],
        plan_id: str | None = None,
        operation: str = "createPlan",
    ) -> PlanRecord:
        title = require_title(plan_data.get("title"), operation=operation)
        ts = now_ms()
        plan = Plan(
            plan_id=plan_id or new_id(),
            agent_id=agent_id,
            title=title,
            overall_goal=plan_data.get("overall_goal"),
            scope_description=plan_data.get("scope_description"),
            status=plan_data.get("status") or DEFAULT_PLAN_STATUS,
            version=plan_data.get("version") or 1,
            plan_type=plan_data.get("plan_type"),
            refined_prompt_id=plan_data.get("refined_prompt_id"),
            analysis_report_id=plan_data.get("analysis_report_id"),
            metadata_json=encode_json(plan_data.get("metadata")),
            creation_timestamp=ts,
            last_updated_timestamp=ts,
        )
        self._session.add(plan)
        await flush_checked(self._session, entity="Plan")
        return PlanRecord.from_row(plan)

    async def get(self, *, agent_id: str, plan_id: str) -> PlanRecord | None:
        plan = await self._get_row(agent_id=agent_id, plan_id=plan_id)
        return PlanRecord.from_row(plan) if plan is not None else None

    async def exists(self, *, agent_id: str, plan_id: str) -> bool:
        stmt = select(Plan.plan_id).where(Plan.agent_id == agent_id, Plan.plan_id == plan_id)
        return (await self._session.execute(stmt)).scalar_one_or_none() is not None

    async def list_for_agent(self, *, agent_id: str, status: str | None = None) -> list[PlanRecord]:
        stmt = select(Plan).where(Plan.agent_id == agent_id)
        if status is not None:
            stmt = stmt.where(Plan.status == status)
        # rowid breaks ties between plans created in the same millisecond.
        stmt = stmt.order_by(Plan.creation_timestamp.asc(), literal_column("plans.rowid").asc())
        rows = (await self._session.execute(stmt)).scalars().all()
        return [PlanRecord.from_row(row) for row in rows]

    async def set_status(self, *, agent_id: str, plan_id: str, status: str) -> bool:
        plan = await self._get_row(agent_id=agent_id, plan_id=plan_id, for_update=True)
        if plan is None:
            return False
        plan.status = status
        plan.last_updated_timestamp = max(now_ms(), plan.last_updated_timestamp)
        await flush_checked(self._session, entity="Plan")
        return True

    async def delete(self, *, agent_id: str, plan_id: str) -> bool:
        # Core DELETE: the engine's ON DELETE CASCADE removes the plan's tasks.
        stmt = delete(Plan).where(Plan.agent_id == agent_id, Plan.plan_id == plan_id)
        result = await self._session.execute(stmt)
        return result.rowcount > 0

    async def _get_row(
        self, *, agent_id: str, plan_id: str, for_update: bool = False
    ) -> Plan | None:
        stmt = select(Plan).where(Plan.agent_id == agent_id, Plan.plan_id == plan_id)
        if for_update:
            stmt = stmt.with_for_update()
        return (await self._session.execute(stmt)).scalar_one_or_none()


# --- Module Notes -----------------------------------------------------------
# Status is free-form; no transition table is enforced here or anywhere else.
