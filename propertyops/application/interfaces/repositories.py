"""Repository interfaces (ports) for the application layer.

Protocols define contracts that infrastructure implementations must fulfill (DIP).
All types reference domain entities or application DTOs only; no ORM imports.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from propertyops.application.dtos.task import TaskResult
    from propertyops.application.dtos.workflow import WorkflowExecutionResult
    from propertyops.domain.entities.workflow import WorkflowRuleEntity


# Rule store interface
class IWorkflowRuleRepository(Protocol):
    """Protocol for the workflow rule store used by the engine."""

    async def get_active_by_trigger(self, trigger: str) -> list[WorkflowRuleEntity]:
        """Return active rules for trigger ordered by priority desc, then id asc."""

    async def record_execution(self, rule_id: str, executed_at: datetime) -> None:
        """Atomically increment execution_count and stamp last_executed_at."""


# Execution audit store interface
class IWorkflowExecutionRepository(Protocol):
    """Protocol for the write-once workflow execution audit trail."""

    async def create_execution(
        self,
        *,
        workflow_rule_id: str,
        trigger_type: str,
        trigger_entity_id: str,
        status: str,
        error_message: str | None,
        execution_log: dict[str, Any],
        executed_at: datetime,
    ) -> WorkflowExecutionResult:
        """Insert one execution record and return it."""


# Task store interface
class ITaskRepository(Protocol):
    """Protocol for tasks created or changed by workflow actions."""

    async def create_task(
        self,
        *,
        property_id: str,
        booking_id: str | None,
        task_type: str,
        title: str,
        description: str,
        status: str,
        scheduled_at: datetime | None,
        due_at: datetime,
        assigned_to_user_id: str | None,
        cost_estimate: float | None,
    ) -> TaskResult:
        """Create a task and return it."""

    async def assign(self, task_id: str, user_id: str) -> None:
        """Set the task's assignee. Raises ResourceNotFoundException if missing."""

    async def update_status(self, entity_id: str, status: str) -> None:
        """Set the task's status. Raises ResourceNotFoundException if missing."""


# Booking store interface
class IBookingRepository(Protocol):
    """Protocol for booking status updates from workflow actions."""

    async def update_status(self, entity_id: str, status: str) -> None:
        """Set the booking's status. Raises ResourceNotFoundException if missing."""


# Issue store interface
class IIssueRepository(Protocol):
    """Protocol for issue status/priority updates from workflow actions."""

    async def update_status(self, entity_id: str, status: str) -> None:
        """Set the issue's status. Raises ResourceNotFoundException if missing."""

    async def update_priority(self, entity_id: str, priority: str) -> None:
        """Set the issue's priority. Raises ResourceNotFoundException if missing."""
