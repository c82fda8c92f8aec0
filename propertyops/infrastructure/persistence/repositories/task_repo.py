"""Task repository for workflow CREATE_TASK, ASSIGN_TASK and UPDATE_STATUS actions."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession

from propertyops.application.dtos.task import TaskResult
from propertyops.infrastructure.persistence.models.task import Task
from propertyops.infrastructure.persistence.repositories.base import BaseRepository


def _to_result(t: Task) -> TaskResult:
    """Map Task ORM to TaskResult DTO."""
    return TaskResult(
        id=t.id,
        property_id=t.property_id,
        booking_id=t.booking_id,
        task_type=t.type,
        title=t.title,
        description=t.description,
        status=t.status,
        scheduled_at=t.scheduled_at,
        due_at=t.due_at,
        assigned_to_user_id=t.assigned_to_user_id,
        cost_estimate=t.cost_estimate,
    )


class TaskRepository(BaseRepository[Task]):
    """Task repository. Implements ITaskRepository."""

    resource_type = "task"

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Task)

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
        """Create a task (in a savepoint) and return the result DTO."""
        async with self.savepoint():
            task = await self.create(
                Task(
                    property_id=property_id,
                    booking_id=booking_id,
                    type=task_type,
                    title=title,
                    description=description,
                    status=status,
                    scheduled_at=scheduled_at,
                    due_at=due_at,
                    assigned_to_user_id=assigned_to_user_id,
                    cost_estimate=cost_estimate,
                )
            )
        return _to_result(task)

    async def assign(self, task_id: str, user_id: str) -> None:
        await self.update_fields(task_id, assigned_to_user_id=user_id)

    async def update_status(self, entity_id: str, status: str) -> None:
        await self.update_fields(entity_id, status=status)
