"""
tests.test_database_admin

Backup, restore and CSV export against a real database file.
"""

from __future__ import annotations

import csv

import pytest
from sqlalchemy import text

from plan_memory.db.database import Database
from plan_memory.errors import StorageIOError
from plan_memory.services.database_admin import DatabaseAdmin
from plan_memory.services.plan_tasks import PlanTaskService
from plan_memory.settings import Settings


@pytest.mark.asyncio
async def test_backup_copies_committed_data(admin, service, tmp_path) -> None:
    await service.create_plan_with_tasks("agent-backup", {"title": "Keep me"}, [])
    destination = tmp_path / "backup.db"

    message = await admin.backup_database(destination)

    assert str(destination) in message
    assert destination.read_bytes().startswith(b"SQLite format 3\x00")

    backup_settings = Settings(env="test", database_url=f"sqlite+aiosqlite:///{destination}")
    async with Database(backup_settings) as backup_db:
        plans = await PlanTaskService(backup_db).get_plans("agent-backup")
    assert [p.title for p in plans] == ["Keep me"]


@pytest.mark.asyncio
async def test_backup_overwrites_existing_destination(admin, service, tmp_path) -> None:
    destination = tmp_path / "backup.db"
    destination.write_text("stale backup")
    await service.create_plan_with_tasks("agent-rebackup", {"title": "Fresh"}, [])

    await admin.backup_database(destination)

    backup_settings = Settings(env="test", database_url=f"sqlite+aiosqlite:///{destination}")
    async with Database(backup_settings) as backup_db:
        plans = await PlanTaskService(backup_db).get_plans("agent-rebackup")
    assert [p.title for p in plans] == ["Fresh"]
    assert not list(tmp_path.glob(".backup.db.*.tmp"))


@pytest.mark.asyncio
async def test_backup_while_another_session_is_open(admin, service, database, tmp_path) -> None:
    await service.create_plan_with_tasks("agent-busy", {"title": "Committed"}, [])
    destination = tmp_path / "busy.db"

    async with database.session() as session:
        await session.execute(text("SELECT 1"))
        await admin.backup_database(destination)

    backup_settings = Settings(env="test", database_url=f"sqlite+aiosqlite:///{destination}")
    async with Database(backup_settings) as backup_db:
        plans = await PlanTaskService(backup_db).get_plans("agent-busy")
    assert [p.title for p in plans] == ["Committed"]


@pytest.mark.asyncio
async def test_backup_to_unwritable_destination_fails(admin, tmp_path) -> None:
    with pytest.raises(StorageIOError):
        await admin.backup_database(tmp_path / "missing-dir" / "backup.db")


@pytest.mark.asyncio
async def test_backup_requires_file_database() -> None:
    admin = DatabaseAdmin(Database(Settings(database_url="sqlite+aiosqlite:///:memory:")))

    with pytest.raises(StorageIOError):
        await admin.backup_database("/tmp/never-written.db")


@pytest.mark.asyncio
async def test_restore_replaces_live_data(admin, service, database, tmp_path) -> None:
    agent_id = "agent-restore"
    await service.create_plan_with_tasks(agent_id, {"title": "Before backup"}, [])
    backup = tmp_path / "snapshot.db"
    await admin.backup_database(backup)
    await service.create_plan_with_tasks(agent_id, {"title": "After backup"}, [])

    await admin.restore_database(backup)

    assert database.is_open
    plans = await service.get_plans(agent_id)
    assert [p.title for p in plans] == ["Before backup"]
    # Re-initialised connections still enforce cascade delete.
    assert await service.delete_plan(agent_id, plans[0].plan_id) is True
    assert await database.foreign_key_violations() == []


@pytest.mark.asyncio
async def test_restore_rejects_non_sqlite_file(admin, service, database, tmp_path) -> None:
    await service.create_plan_with_tasks("agent-bad-restore", {"title": "Live"}, [])
    bogus = tmp_path / "bogus.db"
    bogus.write_text("definitely not a database")

    with pytest.raises(StorageIOError):
        await admin.restore_database(bogus)

    assert database.is_open
    assert len(await service.get_plans("agent-bad-restore")) == 1


@pytest.mark.asyncio
async def test_restore_rejects_corrupt_body_and_keeps_live_database(
    admin, service, database, db_path, tmp_path
) -> None:
    await service.create_plan_with_tasks("agent-corrupt", {"title": "Live"}, [])
    corrupt = tmp_path / "corrupt.db"
    corrupt.write_bytes(b"SQLite format 3\x00" + b"\xff" * 8192)
    live_bytes = db_path.read_bytes()

    with pytest.raises(StorageIOError):
        await admin.restore_database(corrupt)

    assert database.is_open
    assert db_path.read_bytes() == live_bytes
    assert [p.title for p in await service.get_plans("agent-corrupt")] == ["Live"]
    assert not list(db_path.parent.glob(f".{db_path.name}.*.tmp"))


@pytest.mark.asyncio
async def test_restore_missing_source_fails(admin, tmp_path) -> None:
    with pytest.raises(StorageIOError):
        await admin.restore_database(tmp_path / "nope.db")


@pytest.mark.asyncio
async def test_export_writes_header_and_rows(admin, service, tmp_path) -> None:
    result = await service.create_plan_with_tasks(
        "agent-export",
        {"title": "Exported"},
        [
            {"task_number": 1, "title": "one", "files_involved": ["a.py"]},
            {"task_number": 2, "title": "two"},
        ],
    )
    destination = tmp_path / "tasks.csv"

    message = await admin.export_data_to_csv("plan_tasks", destination)

    assert "plan_tasks" in message
    with destination.open(newline="", encoding="utf-8") as fh:
        rows = list(csv.reader(fh))
    header, body = rows[0], rows[1:]
    assert header[:5] == ["task_id", "plan_id", "agent_id", "task_number", "title"]
    assert "files_involved" in header
    assert [row[header.index("task_id")] for row in body] == result.task_ids
    assert body[0][header.index("files_involved")] == '["a.py"]'


@pytest.mark.asyncio
async def test_export_unknown_table_fails(admin, tmp_path) -> None:
    with pytest.raises(StorageIOError, match="Invalid table name"):
        await admin.export_data_to_csv("sqlite_master; DROP TABLE plans", tmp_path / "x.csv")


@pytest.mark.asyncio
async def test_export_to_unwritable_path_fails(admin, tmp_path) -> None:
    with pytest.raises(StorageIOError):
        await admin.export_data_to_csv("plans", tmp_path / "missing-dir" / "plans.csv")
