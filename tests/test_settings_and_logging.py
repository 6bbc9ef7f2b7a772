"""
tests.test_settings_and_logging

Env-driven configuration and structured-log context binding.
"""

from __future__ import annotations

import json
import logging

import structlog

from plan_memory.observability.logging import bind_agent, configure_logging, get_logger
from plan_memory.settings import Settings


def test_settings_read_prefixed_environment(monkeypatch) -> None:
    monkeypatch.setenv("PLAN_MEMORY_ENV", "prod")
    monkeypatch.setenv("PLAN_MEMORY_DATABASE_URL", "sqlite+aiosqlite:////var/lib/memory.db")
    monkeypatch.setenv("PLAN_MEMORY_LOG_LEVEL", "debug")

    settings = Settings()

    assert settings.env == "prod"
    assert settings.database_url == "sqlite+aiosqlite:////var/lib/memory.db"
    assert settings.log_level == "debug"


def test_settings_defaults(monkeypatch) -> None:
    monkeypatch.delenv("PLAN_MEMORY_ENV", raising=False)
    monkeypatch.delenv("PLAN_MEMORY_DATABASE_URL", raising=False)

    settings = Settings()

    assert settings.env == "dev"
    assert settings.database_url.startswith("sqlite+aiosqlite://")


def test_bind_agent_scopes_context() -> None:
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(request_id="r-1")

    with bind_agent("agent-42"):
        assert structlog.contextvars.get_contextvars() == {
            "request_id": "r-1",
            "agent_id": "agent-42",
        }

    assert structlog.contextvars.get_contextvars() == {"request_id": "r-1"}
    structlog.contextvars.clear_contextvars()


def test_configure_logging_renders_json(caplog) -> None:
    configure_logging(service_name="plan-memory-test", level="INFO")
    caplog.set_level(logging.INFO)

    get_logger("tests.logging").info("hello", plan_id="p-1")

    payloads = [json.loads(r.getMessage()) for r in caplog.records if r.name == "tests.logging"]
    assert payloads[-1]["event"] == "hello"
    assert payloads[-1]["plan_id"] == "p-1"
    assert payloads[-1]["service"] == "plan-memory-test"
    assert payloads[-1]["level"] == "info"
