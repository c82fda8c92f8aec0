"""Application DTOs (dataclasses and pydantic action variants; no ORM)."""

from propertyops.application.dtos.notification import NotificationRequest
from propertyops.application.dtos.task import TaskResult
from propertyops.application.dtos.workflow import (
    ActionResult,
    TriggerContext,
    WorkflowExecutionResult,
    WorkflowRunSummary,
)
from propertyops.application.dtos.workflow_action import ActionConfig, parse_action

__all__ = [
    "ActionConfig",
    "ActionResult",
    "NotificationRequest",
    "TaskResult",
    "TriggerContext",
    "WorkflowExecutionResult",
    "WorkflowRunSummary",
    "parse_action",
]
