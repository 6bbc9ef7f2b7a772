"""
plan_memory.validation

Named request schemas for the layer in front of the persistence core.

Responsibilities:
- Describe each public operation's arguments as a Pydantic model.
- Offer `validate(schema_name, payload)` returning `{valid, errors}` without raising.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError


class _Args(BaseModel):
    model_config = ConfigDict(extra="forbid")


class _AgentArgs(_Args):
    agent_id: str = Field(min_length=1)


class PlanInput(_Args):
    title: str = Field(min_length=1)
    overall_goal: str | None = None
    scope_description: str | None = None
    status: str | None = None
    version: int | None = Field(default=None, ge=1)
    plan_type: str | None = None
    refined_prompt_id: str | None = None
    analysis_report_id: str | None = None
    metadata: Any = None


class TaskInput(_Args):
    task_number: int
    title: str = Field(min_length=1)
    description: str | None = None
    purpose: str | None = None
    action_description: str | None = None
    files_involved: list[str] | None = None
    verification_method: str | None = None
    code_content: str | None = None
    estimated_effort_hours: int | None = Field(default=None, ge=0)
    status: str | None = None
    notes: Any = None


class CreatePlanWithTasksArgs(_AgentArgs):
    plan_data: PlanInput
    tasks_data: list[TaskInput] = Field(default_factory=list)


class GetPlanArgs(_AgentArgs):
    plan_id: str = Field(min_length=1)


class GetPlansArgs(_AgentArgs):
    status: str | None = None


class UpdatePlanStatusArgs(_AgentArgs):
    plan_id: str = Field(min_length=1)
    new_status: str


class DeletePlanArgs(_AgentArgs):
    plan_id: str = Field(min_length=1)


class GetPlanTasksArgs(_AgentArgs):
    plan_id: str = Field(min_length=1)
    status: str | None = None


class GetTaskArgs(_AgentArgs):
    task_id: str = Field(min_length=1)


class UpdateTaskStatusArgs(_AgentArgs):
    task_id: str = Field(min_length=1)
    new_status: str
    completion_timestamp: int | None = Field(default=None, ge=0)


class AddTaskToPlanArgs(_AgentArgs):
    plan_id: str = Field(min_length=1)
    task_data: TaskInput


class ExportDataToCsvArgs(_Args):
    table_name: str = Field(min_length=1)
    file_path: str = Field(min_length=1)


class BackupDatabaseArgs(_Args):
    backup_file_path: str = Field(min_length=1)


class RestoreDatabaseArgs(_Args):
    backup_file_path: str = Field(min_length=1)


SCHEMAS: dict[str, type[BaseModel]] = {
    "createPlanWithTasks": CreatePlanWithTasksArgs,
    "getPlan": GetPlanArgs,
    "getPlans": GetPlansArgs,
    "updatePlanStatus": UpdatePlanStatusArgs,
    "deletePlan": DeletePlanArgs,
    "getPlanTasks": GetPlanTasksArgs,
    "getTask": GetTaskArgs,
    "updateTaskStatus": UpdateTaskStatusArgs,
    "addTaskToPlan": AddTaskToPlanArgs,
    "exportDataToCsv": ExportDataToCsvArgs,
    "backupDatabase": BackupDatabaseArgs,
    "restoreDatabase": RestoreDatabaseArgs,
}


@dataclass(frozen=True, slots=True)
class ValidationResult:
    valid: bool
    errors: list[dict[str, Any]] = field(default_factory=list)


def validate(schema_name: str, payload: Any) -> ValidationResult:
    model = SCHEMAS.get(schema_name)
    if model is None:
        return ValidationResult(
            valid=False,
            errors=[{"loc": [], "msg": f"Unknown schema '{schema_name}'", "type": "unknown_schema"}],
        )
    try:
        model.model_validate(payload)
    except PydanticValidationError as exc:
        return ValidationResult(
            valid=False,
            errors=[
                {"loc": list(err["loc"]), "msg": err["msg"], "type": err["type"]}
                for err in exc.errors()
            ],
        )
    return ValidationResult(valid=True)


# --- Module Notes -----------------------------------------------------------
# The core re-checks titles itself; passing this gate is not a precondition for
# calling `PlanTaskService`.
