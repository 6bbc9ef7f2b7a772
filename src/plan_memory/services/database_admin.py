"""
plan_memory.services.database_admin

Whole-database maintenance operations.

Responsibilities:
- Snapshot the live SQLite database to a backup file through the engine.
- Swap a verified backup in for the live database, cycling the shared resource.
- Dump a table to CSV (header row + all rows in storage order).
"""

from __future__ import annotations

import asyncio
import csv
import os
import shutil
import uuid
from collections.abc import Sequence
from pathlib import Path

import aiosqlite
from sqlalchemy import select, text
from sqlalchemy.exc import DBAPIError

from plan_memory.db import models  # noqa: F401  # register tables on Base.metadata
from plan_memory.db.base import Base
from plan_memory.db.database import Database
from plan_memory.errors import StorageIOError
from plan_memory.observability.logging import get_logger

log = get_logger(__name__)


class DatabaseAdmin:
    def __init__(self, database: Database) -> None:
        self._db = database

    async def backup_database(self, destination_path: str | Path) -> str:
        self._require_sqlite_file()
        destination = Path(destination_path)
        staging = _staging_path(destination)
        try:
            # VACUUM cannot run inside a transaction block.
            async with self._db.engine.connect() as conn:
                conn = await conn.execution_options(isolation_level="AUTOCOMMIT")
                await conn.execute(text("VACUUM INTO :dest"), {"dest": str(staging)})
            await asyncio.to_thread(os.replace, staging, destination)
        except (DBAPIError, OSError) as exc:
            await asyncio.to_thread(staging.unlink, missing_ok=True)
            raise StorageIOError(f"Failed to back up database to {destination}: {exc}") from exc

        log.info("database_backed_up", destination=str(destination))
        return f"Database backed up successfully to {destination}"

    async def restore_database(self, source_path: str | Path) -> str:
        """
        Replace the live database with `source_path`.

        The source must pass `PRAGMA integrity_check` and is staged beside the
        live file before anything is closed. The shared `Database` is only closed
        for the final atomic rename and is re-initialised afterwards, even when
        the rename fails.
        """

        target = self._require_sqlite_file()
        source = Path(source_path)
        await _check_sqlite_file(source)

        staging = _staging_path(target)
        try:
            await asyncio.to_thread(shutil.copyfile, source, staging)
        except OSError as exc:
            await asyncio.to_thread(staging.unlink, missing_ok=True)
            raise StorageIOError(f"Failed to restore database from {source}: {exc}") from exc

        was_open = self._db.is_open
        await self._db.close()
        try:
            await asyncio.to_thread(os.replace, staging, target)
        except OSError as exc:
            await asyncio.to_thread(staging.unlink, missing_ok=True)
            raise StorageIOError(f"Failed to restore database from {source}: {exc}") from exc
        finally:
            if was_open:
                await self._db.init()
        log.info("database_restored", source=str(source))
        return f"Database restored successfully from {source}"

    async def export_data_to_csv(self, table_name: str, destination_path: str | Path) -> str:
        table = Base.metadata.tables.get(table_name)
        if table is None:
            known = ", ".join(sorted(Base.metadata.tables))
            raise StorageIOError(f"Invalid table name '{table_name}'. Expected one of: {known}.")

        destination = Path(destination_path)
        # No ORDER BY: rows come back in the engine's natural storage order.
        async with self._db.engine.connect() as conn:
            result = await conn.execute(select(table))
            header = list(result.keys())
            rows = [tuple(row) for row in result.all()]

        try:
            await asyncio.to_thread(_write_csv, destination, header, rows)
        except OSError as exc:
            raise StorageIOError(f"Failed to export '{table_name}' to {destination}: {exc}") from exc

        log.info("table_exported", table=table_name, rows=len(rows), destination=str(destination))
        return f"Data from table '{table_name}' exported successfully to {destination}"

    def _require_sqlite_file(self) -> Path:
        path = self._db.sqlite_path
        if path is None:
            raise StorageIOError("Backup and restore need a file-backed SQLite database.")
        return path


async def _check_sqlite_file(path: Path) -> None:
    uri = f"{path.resolve().as_uri()}?mode=ro"
    try:
        async with aiosqlite.connect(uri, uri=True) as conn:
            async with conn.execute("PRAGMA integrity_check") as cursor:
                rows = await cursor.fetchall()
    except aiosqlite.Error as exc:
        raise StorageIOError(f"{path} is not a readable SQLite database: {exc}") from exc
    if [tuple(row) for row in rows] != [("ok",)]:
        problems = "; ".join(str(row[0]) for row in rows[:5])
        raise StorageIOError(f"{path} failed the SQLite integrity check: {problems}")


def _staging_path(path: Path) -> Path:
    return path.with_name(f".{path.name}.{uuid.uuid4().hex}.tmp")


def _write_csv(path: Path, header: Sequence[str], rows: Sequence[Sequence[object]]) -> None:
    with path.open("w", newline="", encoding="utf-8") as fh:
        writer = csv.writer(fh)
        writer.writerow(header)
        writer.writerows(rows)


# --- Module Notes -----------------------------------------------------------
# Backups go through `VACUUM INTO` on a pooled connection, so the snapshot is a
# single read transaction. It is written to a staging file in the destination
# directory and renamed into place, because `VACUUM INTO` refuses existing files.
# Restore opens the source read-only with aiosqlite and runs a full integrity
# check first; a rejected source leaves the live file and the open engine alone.
