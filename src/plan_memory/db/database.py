"""
plan_memory.db.database

The process-wide storage resource.

Responsibilities:
- Own the async engine and session factory with an explicit init/close lifecycle.
- Refuse to come up unless foreign-key enforcement is actually active.
- Expose the on-disk location of file-backed SQLite databases for admin tooling.
"""

from __future__ import annotations

from pathlib import Path
from types import TracebackType

from sqlalchemy import text
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from plan_memory.db.init_db import init_db
from plan_memory.db.session import create_engine, create_sessionmaker
from plan_memory.errors import StorageError
from plan_memory.observability.logging import get_logger
from plan_memory.settings import Settings

log = get_logger(__name__)


class Database:
    """
    Shared handle to the storage engine.

    `init()` opens the engine, checks `PRAGMA foreign_keys` and (in dev/test)
    creates the schema. `close()` disposes pooled connections. Both are
    idempotent, so restore can cycle the resource in place.
    """

    def __init__(self, settings: Settings) -> None:
        self._settings = settings
        self._engine: AsyncEngine | None = None
        self._sessionmaker: async_sessionmaker[AsyncSession] | None = None

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def is_open(self) -> bool:
        return self._engine is not None

    @property
    def engine(self) -> AsyncEngine:
        if self._engine is None:
            raise StorageError("Database is not initialised; call init() first.")
        return self._engine

    @property
    def sessionmaker(self) -> async_sessionmaker[AsyncSession]:
        if self._sessionmaker is None:
            raise StorageError("Database is not initialised; call init() first.")
        return self._sessionmaker

    def session(self) -> AsyncSession:
        return self.sessionmaker()

    @property
    def sqlite_path(self) -> Path | None:
        url = make_url(self._settings.database_url)
        if url.get_backend_name() != "sqlite":
            return None
        if not url.database or url.database == ":memory:":
            return None
        return Path(url.database)

    async def init(self) -> None:
        if self._engine is not None:
            return

        sqlite_path = self.sqlite_path
        if sqlite_path is not None:
            sqlite_path.parent.mkdir(parents=True, exist_ok=True)

        engine = create_engine(self._settings)
        try:
            if engine.dialect.name == "sqlite":
                await self._require_foreign_keys(engine)
            if self._settings.env in ("dev", "test"):
                await init_db(engine)
        except Exception:
            await engine.dispose()
            raise

        self._engine = engine
        self._sessionmaker = create_sessionmaker(engine)
        log.info("database_initialized", backend=engine.dialect.name, env=self._settings.env)

    async def close(self) -> None:
        engine = self._engine
        if engine is None:
            return
        self._engine = None
        self._sessionmaker = None
        await engine.dispose()
        log.info("database_closed")

    async def foreign_key_violations(self) -> list[tuple[object, ...]]:
        """Rows that reference a missing parent (`PRAGMA foreign_key_check`)."""
        async with self.engine.connect() as conn:
            rows = (await conn.execute(text("PRAGMA foreign_key_check"))).all()
        return [tuple(row) for row in rows]

    async def __aenter__(self) -> Database:
        await self.init()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.close()

    @staticmethod
    async def _require_foreign_keys(engine: AsyncEngine) -> None:
        async with engine.connect() as conn:
            enabled = (await conn.execute(text("PRAGMA foreign_keys"))).scalar_one()
        if enabled != 1:
            raise StorageError("SQLite foreign key enforcement could not be enabled.")


# --- Module Notes -----------------------------------------------------------
# Every connection gets `PRAGMA foreign_keys=ON` from the listener installed in
# `db.session.create_engine`; `_require_foreign_keys` only proves it took effect.
