"""Service interfaces (ports) for the application layer."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from propertyops.application.dtos.notification import NotificationRequest
    from propertyops.application.dtos.workflow import (
        TriggerContext,
        WorkflowRunSummary,
    )


# Workflow engine interface
class IWorkflowEngine(Protocol):
    """Protocol for evaluating and running workflow rules for a trigger."""

    async def execute_workflows(
        self, trigger: str, context: TriggerContext
    ) -> WorkflowRunSummary:
        """Run every active, in-scope, matching rule for trigger; return aggregate counts."""


# Notification service interface (workflow SEND_* actions)
class INotificationService(Protocol):
    """Protocol for the multi-channel owner notification service."""

    async def send_notification(self, request: NotificationRequest) -> None:
        """Deliver the notification on each requested channel. Raises on failure."""
