"""
tests.conftest

Shared fixtures: a fresh file-backed SQLite database per test, the services
wired to it, and raw-SQL helpers that seed rows without going through the
repositories under test.
"""

from __future__ import annotations

import uuid
from collections.abc import AsyncIterator, Awaitable, Callable
from pathlib import Path
from typing import Any

import pytest
import pytest_asyncio
from sqlalchemy import text

from plan_memory.db.database import Database
from plan_memory.db.fields import now_ms
from plan_memory.services.database_admin import DatabaseAdmin
from plan_memory.services.plan_tasks import PlanTaskService
from plan_memory.settings import Settings


@pytest.fixture
def db_path(tmp_path: Path) -> Path:
    return tmp_path / "memory.db"


@pytest.fixture
def settings(db_path: Path) -> Settings:
    return Settings(env="test", database_url=f"sqlite+aiosqlite:///{db_path}")


@pytest_asyncio.fixture
async def database(settings: Settings) -> AsyncIterator[Database]:
    db = Database(settings)
    await db.init()
    try:
        yield db
    finally:
        await db.close()


@pytest.fixture
def service(database: Database) -> PlanTaskService:
    return PlanTaskService(database)


@pytest.fixture
def admin(database: Database) -> DatabaseAdmin:
    return DatabaseAdmin(database)


@pytest.fixture
def insert_plan(database: Database) -> Callable[..., Awaitable[str]]:
    async def _insert(
        *,
        agent_id: str,
        title: str = "Plan",
        status: str | None = None,
        ts: int | None = None,
        last_updated: int | None = None,
        metadata: str | None = None,
    ) -> str:
        plan_id = str(uuid.uuid4())
        created = ts if ts is not None else now_ms()
        async with database.engine.begin() as conn:
            await conn.execute(
                text(
                    "INSERT INTO plans (plan_id, agent_id, title, status, metadata, "
                    "creation_timestamp, last_updated_timestamp) "
                    "VALUES (:plan_id, :agent_id, :title, :status, :metadata, :created, :updated)"
                ),
                {
                    "plan_id": plan_id,
                    "agent_id": agent_id,
                    "title": title,
                    "status": status,
                    "metadata": metadata,
                    "created": created,
                    "updated": last_updated if last_updated is not None else created,
                },
            )
        return plan_id

    return _insert


@pytest.fixture
def insert_task(database: Database) -> Callable[..., Awaitable[str]]:
    async def _insert(
        *,
        agent_id: str,
        plan_id: str,
        task_number: int,
        title: str = "Task",
        status: str | None = "PLANNED",
        ts: int | None = None,
        notes: str | None = None,
        files_involved: str | None = None,
    ) -> str:
        task_id = str(uuid.uuid4())
        created = ts if ts is not None else now_ms()
        async with database.engine.begin() as conn:
            await conn.execute(
                text(
                    "INSERT INTO plan_tasks (task_id, plan_id, agent_id, task_number, title, "
                    "status, notes, files_involved, creation_timestamp, last_updated_timestamp) "
                    "VALUES (:task_id, :plan_id, :agent_id, :task_number, :title, :status, "
                    ":notes, :files_involved, :created, :created)"
                ),
                {
                    "task_id": task_id,
                    "plan_id": plan_id,
                    "agent_id": agent_id,
                    "task_number": task_number,
                    "title": title,
                    "status": status,
                    "notes": notes,
                    "files_involved": files_involved,
                    "created": created,
                },
            )
        return task_id

    return _insert


@pytest.fixture
def fetch_row(database: Database) -> Callable[[str, str, str], Awaitable[dict[str, Any] | None]]:
    async def _fetch(table: str, key_column: str, key: str) -> dict[str, Any] | None:
        async with database.engine.connect() as conn:
            row = (
                await conn.execute(
                    text(f"SELECT * FROM {table} WHERE {key_column} = :key"), {"key": key}
                )
            ).mappings().one_or_none()
        return dict(row) if row is not None else None

    return _fetch


@pytest.fixture
def count_rows(database: Database) -> Callable[[str, str], Awaitable[int]]:
    async def _count(table: str, agent_id: str) -> int:
        async with database.engine.connect() as conn:
            return (
                await conn.execute(
                    text(f"SELECT COUNT(*) FROM {table} WHERE agent_id = :agent_id"),
                    {"agent_id": agent_id},
                )
            ).scalar_one()

    return _count


# --- Module Notes -----------------------------------------------------------
# Tests use a real file on disk (not :memory:) so every pooled connection sees the
# same data and backup/restore have something to copy.
