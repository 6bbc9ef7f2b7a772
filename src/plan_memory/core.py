"""
plan_memory.core

Composition root for embedding the persistence core in a host process.

Responsibilities:
- Configure structured logging once at process startup.
- Initialise the shared `Database` and wire the services to it.
- Close the database on shutdown, including when the host fails.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass

from plan_memory.db.database import Database
from plan_memory.observability.logging import configure_logging, get_logger
from plan_memory.services.database_admin import DatabaseAdmin
from plan_memory.services.plan_tasks import PlanTaskService
from plan_memory.settings import Settings, get_settings

log = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class MemoryCore:
    settings: Settings
    database: Database
    plans: PlanTaskService
    admin: DatabaseAdmin


@asynccontextmanager
async def open_core(settings: Settings | None = None) -> AsyncIterator[MemoryCore]:
    settings = settings or get_settings()
    configure_logging(service_name=settings.service_name, level=settings.log_level)

    database = Database(settings)
    await database.init()
    log.info("startup", env=settings.env)
    try:
        yield MemoryCore(
            settings=settings,
            database=database,
            plans=PlanTaskService(database),
            admin=DatabaseAdmin(database),
        )
    finally:
        await database.close()
        log.info("shutdown")


# --- Module Notes -----------------------------------------------------------
# The layer that maps inbound tool requests onto `MemoryCore.plans` lives outside
# this package; it is expected to run `validation.validate` before calling in.
