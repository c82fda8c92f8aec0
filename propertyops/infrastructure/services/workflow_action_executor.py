"""Workflow action executor: runs one action config against the right collaborator.

Each handler returns an ActionResult instead of raising. Parse failures,
store errors and unexpected exceptions are converted to failed results at
the dispatch boundary so sibling actions are never affected.
"""

from __future__ import annotations

import asyncio
from typing import Any

from pydantic import BaseModel

from propertyops.application.dtos.notification import NotificationRequest
from propertyops.application.dtos.workflow import ActionResult, TriggerContext
from propertyops.application.dtos.workflow_action import (
    ActionConfig,
    AssignTaskAction,
    CreateTaskAction,
    DirectMessageAction,
    SendEmailAction,
    SendNotificationAction,
    SendSmsAction,
    SendWhatsAppAction,
    UpdatePriorityAction,
    UpdateStatusAction,
    parse_action,
)
from propertyops.application.interfaces.repositories import (
    IBookingRepository,
    IIssueRepository,
    ITaskRepository,
)
from propertyops.application.interfaces.services import INotificationService
from propertyops.domain.exceptions import (
    UnsupportedEntityTypeException,
    ValidationException,
)
from propertyops.shared.enums import (
    EntityType,
    NotificationChannel,
    NotificationType,
    TaskStatus,
    TaskType,
)
from propertyops.shared.telemetry.logging import get_logger
from propertyops.shared.utils.datetime import utc_now

logger = get_logger(__name__)


class WorkflowActionExecutor:
    """Dispatches CREATE_TASK, ASSIGN_TASK, SEND_*, UPDATE_STATUS and UPDATE_PRIORITY."""

    def __init__(
        self,
        task_repo: ITaskRepository,
        booking_repo: IBookingRepository,
        issue_repo: IIssueRepository,
        notification_service: INotificationService,
        *,
        action_timeout_seconds: float | None = None,
    ) -> None:
        self._task_repo = task_repo
        self._booking_repo = booking_repo
        self._issue_repo = issue_repo
        self._notification_service = notification_service
        self._action_timeout_seconds = action_timeout_seconds
        # Stores share one AsyncSession, which allows a single operation at a time.
        self._store_lock = asyncio.Lock()

    async def execute(
        self, action: ActionConfig | dict[str, Any], context: TriggerContext
    ) -> ActionResult:
        """Run one action (raw stored dict or parsed config) and return its outcome."""
        try:
            config = action if isinstance(action, BaseModel) else parse_action(action)
        except ValidationException as e:
            return ActionResult.failed(e.message)

        deadline: asyncio.Timeout | None = None
        try:
            if self._action_timeout_seconds is None:
                return await self._dispatch(config, context)
            async with asyncio.timeout(self._action_timeout_seconds) as deadline:
                return await self._dispatch(config, context)
        except TimeoutError as e:
            # A handler's own TimeoutError (driver, provider) is an ordinary failure.
            if deadline is None or not deadline.expired():
                return self._failed(config, context, e)
            logger.warning(
                "Workflow action %s timed out after %ss (%s %s)",
                config.type,
                self._action_timeout_seconds,
                context.entity_type,
                context.entity_id,
            )
            return ActionResult.failed(
                f"Action timed out after {self._action_timeout_seconds:g}s"
            )
        except Exception as e:
            return self._failed(config, context, e)

    @staticmethod
    def _failed(
        config: ActionConfig, context: TriggerContext, error: Exception
    ) -> ActionResult:
        logger.warning(
            "Workflow action %s failed (%s %s): %s",
            config.type,
            context.entity_type,
            context.entity_id,
            error,
        )
        return ActionResult.failed(str(error) or "Action execution failed")

    async def _dispatch(
        self, action: ActionConfig, context: TriggerContext
    ) -> ActionResult:
        match action:
            case CreateTaskAction():
                return await self._create_task(action, context)
            case AssignTaskAction():
                async with self._store_lock:
                    await self._task_repo.assign(
                        action.params.task_id, action.params.user_id
                    )
                return ActionResult.ok(task_id=action.params.task_id)
            case SendNotificationAction():
                return await self._send_notification(action, context)
            case SendEmailAction() | SendSmsAction() | SendWhatsAppAction():
                return await self._send_direct_message(action, context)
            case UpdateStatusAction():
                return await self._update_status(action, context)
            case UpdatePriorityAction():
                return await self._update_priority(action, context)
            case _:
                return ActionResult.failed(f"Unknown action type: {action.type}")

    async def _create_task(
        self, action: CreateTaskAction, context: TriggerContext
    ) -> ActionResult:
        if not context.property_id:
            return ActionResult.failed("Property ID required for task creation")
        params = action.params
        async with self._store_lock:
            task = await self._task_repo.create_task(
                property_id=context.property_id,
                booking_id=(
                    context.entity_id
                    if context.entity_type == EntityType.BOOKING
                    else None
                ),
                task_type=(params.task_type or TaskType.OTHER).value,
                title=params.title or "Auto-generated task",
                description=params.description or "",
                status=TaskStatus.PENDING.value,
                scheduled_at=params.scheduled_at,
                due_at=params.due_at or utc_now(),
                assigned_to_user_id=params.assigned_to_user_id,
                cost_estimate=params.cost_estimate,
            )
        return ActionResult.ok(task_id=task.id)

    async def _send_notification(
        self, action: SendNotificationAction, context: TriggerContext
    ) -> ActionResult:
        if not context.owner_id:
            return ActionResult.failed("Owner ID required for notifications")
        params = action.params
        channels = (
            list(params.channels)
            if params.channels is not None
            else [NotificationChannel.EMAIL]
        )
        await self._notification_service.send_notification(
            NotificationRequest(
                owner_id=context.owner_id,
                type=params.notification_type or NotificationType.OTHER,
                channels=channels,
                title=params.title or "Notification",
                message=params.message or "",
                action_url=params.action_url,
                action_text=params.action_text,
                template_type=params.template_type,
                template_variables=params.template_variables or {},
            )
        )
        return ActionResult.ok(channels=[channel.value for channel in channels])

    async def _send_direct_message(
        self, action: DirectMessageAction, context: TriggerContext
    ) -> ActionResult:
        if not context.owner_id:
            return ActionResult.failed("Owner ID required")
        params = action.params
        await self._notification_service.send_notification(
            NotificationRequest(
                owner_id=context.owner_id,
                type=NotificationType.OTHER,
                channels=[action.channel],
                title=params.subject or params.title or "Message",
                message=params.message or "",
                action_url=params.action_url,
                action_text=params.action_text,
            )
        )
        return ActionResult.ok(channels=[action.channel.value])

    def _status_store_for(
        self, entity_type: str
    ) -> ITaskRepository | IBookingRepository | IIssueRepository:
        if entity_type == EntityType.BOOKING:
            return self._booking_repo
        if entity_type == EntityType.TASK:
            return self._task_repo
        if entity_type == EntityType.ISSUE:
            return self._issue_repo
        raise UnsupportedEntityTypeException("update status", entity_type)

    async def _update_status(
        self, action: UpdateStatusAction, context: TriggerContext
    ) -> ActionResult:
        store = self._status_store_for(context.entity_type)
        async with self._store_lock:
            await store.update_status(context.entity_id, action.params.status)
        return ActionResult.ok(status=action.params.status)

    async def _update_priority(
        self, action: UpdatePriorityAction, context: TriggerContext
    ) -> ActionResult:
        if context.entity_type != EntityType.ISSUE:
            return ActionResult.failed("Priority update only supported for issues")
        async with self._store_lock:
            await self._issue_repo.update_priority(
                context.entity_id, action.params.priority
            )
        return ActionResult.ok(priority=action.params.priority)
