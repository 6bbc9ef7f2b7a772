"""
tests.test_smoke

Minimal smoke test: the core boots, serves one round trip, and shuts down.
"""

from __future__ import annotations

import pytest

from plan_memory.core import open_core


@pytest.mark.asyncio
async def test_core_round_trip(settings) -> None:
    async with open_core(settings) as core:
        created = await core.plans.create_plan_with_tasks(
            "agent-smoke", {"title": "Smoke"}, [{"task_number": 1, "title": "check"}]
        )
        tasks = await core.plans.get_plan_tasks("agent-smoke", created.plan_id)
        assert [t.task_id for t in tasks] == created.task_ids

    assert not core.database.is_open
