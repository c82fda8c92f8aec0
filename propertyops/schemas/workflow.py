"""Workflow rule API schemas."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from propertyops.application.dtos.workflow_action import parse_action
from propertyops.domain.exceptions import ValidationException
from propertyops.shared.enums import ConditionOperator, WorkflowTrigger


def _validate_actions(actions: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """Every action must parse as a known variant; the stored shape is kept as sent."""
    for index, action in enumerate(actions):
        try:
            parse_action(action)
        except ValidationException as e:
            raise ValueError(f"actions[{index}]: {e.message}") from e
    return actions


class WorkflowCondition(BaseModel):
    """One condition: dotted field path, operator and comparison value."""

    field: str = Field(..., min_length=1, max_length=255)
    operator: ConditionOperator
    value: Any = None


class WorkflowRuleCreateRequest(BaseModel):
    """Request body for creating a workflow rule."""

    name: str = Field(..., min_length=1, max_length=255)
    trigger: WorkflowTrigger
    actions: list[dict[str, Any]] = Field(..., min_length=1)
    description: str | None = None
    is_active: bool = True
    priority: int = 0
    conditions: list[WorkflowCondition] | None = None
    property_ids: list[str] = Field(default_factory=list)
    owner_ids: list[str] = Field(default_factory=list)
    schedule_cron: str | None = Field(default=None, max_length=128)

    @field_validator("actions")
    @classmethod
    def _check_actions(cls, v: list[dict[str, Any]]) -> list[dict[str, Any]]:
        return _validate_actions(v)


# Columns that may not be cleared with an explicit null.
_NON_NULLABLE = ("name", "trigger", "actions", "is_active", "priority", "property_ids", "owner_ids")


class WorkflowRuleUpdate(BaseModel):
    """Request body for updating a workflow rule (partial). Counters are not writable."""

    model_config = ConfigDict(extra="forbid")

    name: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = None
    trigger: WorkflowTrigger | None = None
    is_active: bool | None = None
    priority: int | None = None
    conditions: list[WorkflowCondition] | None = None
    actions: list[dict[str, Any]] | None = Field(default=None, min_length=1)
    property_ids: list[str] | None = None
    owner_ids: list[str] | None = None
    schedule_cron: str | None = Field(default=None, max_length=128)

    @field_validator("actions")
    @classmethod
    def _check_actions(
        cls, v: list[dict[str, Any]] | None
    ) -> list[dict[str, Any]] | None:
        return None if v is None else _validate_actions(v)

    @model_validator(mode="after")
    def _reject_null_for_required(self) -> "WorkflowRuleUpdate":
        for name in _NON_NULLABLE:
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{name} cannot be null")
        return self

    def changes(self) -> dict[str, Any]:
        """Only the fields the client sent, as column values."""
        return self.model_dump(mode="json", exclude_unset=True)


class WorkflowRuleResponse(BaseModel):
    """Workflow rule response."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    description: str | None
    trigger: str
    is_active: bool
    priority: int
    conditions: list[dict[str, Any]] | None
    actions: list[dict[str, Any]]
    property_ids: list[str]
    owner_ids: list[str]
    schedule_cron: str | None
    execution_count: int
    last_executed_at: datetime | None
    created_at: datetime
    updated_at: datetime


class WorkflowExecutionResponse(BaseModel):
    """Workflow execution response."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    workflow_rule_id: str
    trigger_type: str
    trigger_entity_id: str
    status: str
    error_message: str | None
    execution_log: dict[str, Any] | None
    executed_at: datetime | None


class WorkflowExecutionListResponse(BaseModel):
    """Paginated execution history for one rule, newest first."""

    executions: list[WorkflowExecutionResponse]
    total: int
    limit: int
    offset: int
