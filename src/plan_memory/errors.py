"""
plan_memory.errors

Exception taxonomy for the persistence core.

Responsibilities:
- Distinguish malformed input, missing parents, engine-level constraint
  rejections and file-system failures so callers can react to each.
"""

from __future__ import annotations


class PlanMemoryError(Exception):
    """Base class for every error raised by this package."""


class ValidationError(PlanMemoryError):
    """Input rejected before any write was attempted."""


class NotFoundError(PlanMemoryError):
    def __init__(self, *, entity: str, entity_id: str, agent_id: str) -> None:
        super().__init__(f"{entity} with ID {entity_id} not found for agent {agent_id}.")
        self.entity = entity
        self.entity_id = entity_id
        self.agent_id = agent_id


class ConstraintViolation(PlanMemoryError):
    """The storage engine refused a row (NOT NULL, CHECK, UNIQUE, FOREIGN KEY)."""


class StorageError(PlanMemoryError):
    """The storage resource could not be brought into a usable state."""


class StorageIOError(StorageError, OSError):
    """Backup, restore or export failed on the file system."""


# --- Module Notes -----------------------------------------------------------
# Boolean operations (status updates, deletes) report "no matching row" with
# `False`; exceptions are reserved for bad input and integrity failures.
