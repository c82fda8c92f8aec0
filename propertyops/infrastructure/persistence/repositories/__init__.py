"""SQLAlchemy repositories (implement the application-layer ports)."""

from propertyops.infrastructure.persistence.repositories.booking_repo import (
    BookingRepository,
)
from propertyops.infrastructure.persistence.repositories.issue_repo import (
    IssueRepository,
)
from propertyops.infrastructure.persistence.repositories.task_repo import TaskRepository
from propertyops.infrastructure.persistence.repositories.workflow_repo import (
    WorkflowExecutionRepository,
    WorkflowRuleRepository,
)

__all__ = [
    "BookingRepository",
    "IssueRepository",
    "TaskRepository",
    "WorkflowExecutionRepository",
    "WorkflowRuleRepository",
]
