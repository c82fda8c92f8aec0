"""Detached workflow submission: run execute_workflows without blocking the caller.

Business operations call submit() after their own write has committed. Each
submission gets its own session (committed on success, rolled back on
error) so a workflow failure never touches the caller's transaction.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from contextlib import AbstractAsyncContextManager
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from propertyops.application.dtos.workflow import TriggerContext, WorkflowRunSummary
from propertyops.application.interfaces.services import IWorkflowEngine
from propertyops.infrastructure.persistence.database import session_scope
from propertyops.shared.telemetry.logging import get_logger

logger = get_logger(__name__)

EngineFactory = Callable[[AsyncSession], IWorkflowEngine]
SessionScope = Callable[[], AbstractAsyncContextManager[AsyncSession]]


class WorkflowDispatcher:
    """Fire-and-forget runner for workflow triggers.

    Keeps a strong reference to every pending task (the event loop only holds
    weak ones) and exposes drain() for application shutdown. Ordering between
    submissions is not guaranteed.
    """

    def __init__(
        self,
        engine_factory: EngineFactory,
        *,
        session_factory: SessionScope = session_scope,
        enabled: bool = True,
    ) -> None:
        self._engine_factory = engine_factory
        self._session_factory = session_factory
        self._enabled = enabled
        self._pending: set[asyncio.Task[WorkflowRunSummary | None]] = set()

    @property
    def pending(self) -> int:
        """Number of submissions that have not finished yet."""
        return len(self._pending)

    def submit(
        self, trigger: str, context: TriggerContext
    ) -> asyncio.Task[WorkflowRunSummary | None] | None:
        """Schedule a workflow run on the running loop; returns None when dispatch is disabled."""
        if not self._enabled:
            logger.debug(
                "Workflow dispatch disabled; dropping %s for %s %s",
                trigger,
                context.entity_type,
                context.entity_id,
            )
            return None
        task = asyncio.create_task(
            self._run(trigger, context),
            name=f"workflows:{trigger}:{context.entity_id}",
        )
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    async def _run(
        self, trigger: str, context: TriggerContext
    ) -> WorkflowRunSummary | None:
        try:
            async with self._session_factory() as session:
                summary = await self._engine_factory(session).execute_workflows(
                    trigger, context
                )
        except Exception:
            logger.exception(
                "Workflow dispatch failed for %s (%s %s)",
                trigger,
                context.entity_type,
                context.entity_id,
            )
            return None
        logger.info(
            "Workflows for %s on %s %s: executed=%d failed=%d",
            trigger,
            context.entity_type,
            context.entity_id,
            summary.executed,
            summary.failed,
        )
        for error in summary.errors:
            logger.warning("%s", error)
        return summary

    async def drain(self) -> None:
        """Wait for every pending submission to settle."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)


def dispatch_workflows(
    app: Any, trigger: str, context: TriggerContext
) -> asyncio.Task[WorkflowRunSummary | None] | None:
    """Submit through the dispatcher on app.state; no-op when the app has none."""
    dispatcher: WorkflowDispatcher | None = getattr(
        app.state, "workflow_dispatcher", None
    )
    if dispatcher is None:
        logger.warning("No workflow dispatcher configured; %s not dispatched", trigger)
        return None
    return dispatcher.submit(trigger, context)
