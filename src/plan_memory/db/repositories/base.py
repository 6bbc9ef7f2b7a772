"""
plan_memory.db.repositories.base

Checks shared by the plan and task repositories.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from plan_memory.errors import ConstraintViolation, ValidationError


def require_title(title: Any, *, operation: str) -> str:
    if not isinstance(title, str) or not title.strip():
        raise ValidationError(
            f"Invalid input for {operation}: 'title' is required and must be a non-empty string."
        )
    return title


async def flush_checked(session: AsyncSession, *, entity: str) -> None:
    try:
        await session.flush()
    except IntegrityError as exc:
        raise ConstraintViolation(f"{entity} rejected by storage engine: {exc.orig}") from exc
