"""
plan_memory.db.records

Read models returned by repositories.

Responsibilities:
- Detach rows from the session so callers never trigger lazy loads.
- Decode opaque text columns (`metadata`, `files_involved`, `notes`) on read.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from plan_memory.db.fields import decode_json
from plan_memory.db.models import Plan, PlanTask


class PlanRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    plan_id: str
    agent_id: str
    title: str
    overall_goal: str | None = None
    scope_description: str | None = None
    status: str | None = None
    version: int | None = None
    plan_type: str | None = None
    refined_prompt_id: str | None = None
    analysis_report_id: str | None = None
    metadata: Any = None
    creation_timestamp: int
    last_updated_timestamp: int

    @classmethod
    def from_row(cls, row: Plan) -> PlanRecord:
        return cls(
            plan_id=row.plan_id,
            agent_id=row.agent_id,
            title=row.title,
            overall_goal=row.overall_goal,
            scope_description=row.scope_description,
            status=row.status,
            version=row.version,
            plan_type=row.plan_type,
            refined_prompt_id=row.refined_prompt_id,
            analysis_report_id=row.analysis_report_id,
            metadata=decode_json(row.metadata_json),
            creation_timestamp=row.creation_timestamp,
            last_updated_timestamp=row.last_updated_timestamp,
        )


class TaskRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    task_id: str
    plan_id: str
    agent_id: str
    task_number: int
    title: str
    description: str | None = None
    purpose: str | None = None
    action_description: str | None = None
    verification_method: str | None = None
    code_content: str | None = None
    estimated_effort_hours: int | None = None
    status: str | None = None
    files_involved: list[str] = Field(default_factory=list)
    notes: Any = None
    creation_timestamp: int
    last_updated_timestamp: int
    completion_timestamp: int | None = None

    @classmethod
    def from_row(cls, row: PlanTask) -> TaskRecord:
        files = decode_json(row.files_involved_json)
        return cls(
            task_id=row.task_id,
            plan_id=row.plan_id,
            agent_id=row.agent_id,
            task_number=row.task_number,
            title=row.title,
            description=row.description,
            purpose=row.purpose,
            action_description=row.action_description,
            verification_method=row.verification_method,
            code_content=row.code_content,
            estimated_effort_hours=row.estimated_effort_hours,
            status=row.status,
            files_involved=files if isinstance(files, list) else [],
            notes=decode_json(row.notes_json),
            creation_timestamp=row.creation_timestamp,
            last_updated_timestamp=row.last_updated_timestamp,
            completion_timestamp=row.completion_timestamp,
        )
