"""DTOs for workflow-created tasks (no dependency on ORM)."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class TaskResult:
    """Task created or updated by a workflow action."""

    id: str
    property_id: str
    booking_id: str | None
    task_type: str
    title: str
    description: str
    status: str
    scheduled_at: datetime | None
    due_at: datetime | None
    assigned_to_user_id: str | None
    cost_estimate: float | None
