"""ORM models. Import this package so every table is registered on Base.metadata."""

from propertyops.infrastructure.persistence.models.booking import Booking
from propertyops.infrastructure.persistence.models.issue import Issue
from propertyops.infrastructure.persistence.models.task import Task
from propertyops.infrastructure.persistence.models.workflow import (
    WorkflowExecution,
    WorkflowRule,
)

__all__ = [
    "Booking",
    "Issue",
    "Task",
    "WorkflowExecution",
    "WorkflowRule",
]
