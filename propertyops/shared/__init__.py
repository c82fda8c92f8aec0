"""Shared enums, telemetry and utilities. No business logic."""

from propertyops.shared.enums import (
    ConditionOperator,
    EntityType,
    NotificationChannel,
    NotificationType,
    TaskStatus,
    TaskType,
    WorkflowActionType,
    WorkflowExecutionStatus,
    WorkflowTrigger,
)

__all__ = [
    "ConditionOperator",
    "EntityType",
    "NotificationChannel",
    "NotificationType",
    "TaskStatus",
    "TaskType",
    "WorkflowActionType",
    "WorkflowExecutionStatus",
    "WorkflowTrigger",
]
