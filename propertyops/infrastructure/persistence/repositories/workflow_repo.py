"""WorkflowRule and WorkflowExecution repositories."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from propertyops.application.dtos.workflow import WorkflowExecutionResult
from propertyops.domain.entities.workflow import Condition, WorkflowRuleEntity
from propertyops.infrastructure.persistence.models.workflow import (
    WorkflowExecution,
    WorkflowRule,
)
from propertyops.infrastructure.persistence.repositories.base import BaseRepository


def to_rule_entity(rule: WorkflowRule) -> WorkflowRuleEntity:
    """Map WorkflowRule ORM to the domain entity the engine evaluates."""
    return WorkflowRuleEntity(
        id=rule.id,
        name=rule.name,
        description=rule.description,
        trigger=rule.trigger,
        conditions=[
            Condition.from_dict(c) for c in (rule.conditions or []) if isinstance(c, dict)
        ],
        actions=list(rule.actions or []),
        property_ids=list(rule.property_ids or []),
        owner_ids=list(rule.owner_ids or []),
        priority=rule.priority,
        is_active=rule.is_active,
        schedule_cron=rule.schedule_cron,
        execution_count=rule.execution_count,
        last_executed_at=rule.last_executed_at,
    )


class WorkflowRuleRepository(BaseRepository[WorkflowRule]):
    """Workflow rule store: engine queries plus admin CRUD."""

    resource_type = "workflow_rule"

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, WorkflowRule)

    async def get_active_by_trigger(self, trigger: str) -> list[WorkflowRuleEntity]:
        """Active rules for trigger, priority desc; id breaks ties deterministically."""
        result = await self.db.execute(
            select(WorkflowRule)
            .where(
                WorkflowRule.trigger == trigger,
                WorkflowRule.is_active.is_(True),
            )
            .order_by(WorkflowRule.priority.desc(), WorkflowRule.id.asc())
        )
        return [to_rule_entity(rule) for rule in result.scalars().all()]

    async def record_execution(self, rule_id: str, executed_at: datetime) -> None:
        """Increment execution_count in SQL (no read-modify-write) and stamp last_executed_at.

        Runs in a savepoint so a failure leaves the session usable for later rules.
        """
        async with self.savepoint():
            await self.db.execute(
                update(WorkflowRule)
                .where(WorkflowRule.id == rule_id)
                .values(
                    execution_count=WorkflowRule.execution_count + 1,
                    last_executed_at=executed_at,
                )
            )

    async def list_rules(
        self,
        *,
        trigger: str | None = None,
        is_active: bool | None = None,
    ) -> list[WorkflowRule]:
        q = select(WorkflowRule)
        if trigger is not None:
            q = q.where(WorkflowRule.trigger == trigger)
        if is_active is not None:
            q = q.where(WorkflowRule.is_active.is_(is_active))
        q = q.order_by(WorkflowRule.priority.desc(), WorkflowRule.created_at.desc())
        result = await self.db.execute(q)
        return list(result.scalars().all())

    async def create_rule(
        self,
        *,
        name: str,
        trigger: str,
        actions: list[dict[str, Any]],
        description: str | None = None,
        is_active: bool = True,
        priority: int = 0,
        conditions: list[dict[str, Any]] | None = None,
        property_ids: list[str] | None = None,
        owner_ids: list[str] | None = None,
        schedule_cron: str | None = None,
    ) -> WorkflowRule:
        """Create a rule; counters start at zero."""
        rule = WorkflowRule(
            name=name,
            description=description,
            trigger=trigger,
            is_active=is_active,
            priority=priority,
            conditions=conditions,
            actions=actions,
            property_ids=property_ids or [],
            owner_ids=owner_ids or [],
            schedule_cron=schedule_cron,
            execution_count=0,
        )
        return await self.create(rule)


def _to_execution_result(e: WorkflowExecution) -> WorkflowExecutionResult:
    return WorkflowExecutionResult(
        id=e.id,
        workflow_rule_id=e.workflow_rule_id,
        trigger_type=e.trigger_type,
        trigger_entity_id=e.trigger_entity_id,
        status=e.status,
        error_message=e.error_message,
        execution_log=e.execution_log,
        executed_at=e.executed_at,
    )


class WorkflowExecutionRepository(BaseRepository[WorkflowExecution]):
    """Write-once audit trail of rule runs. No update path is exposed."""

    resource_type = "workflow_execution"

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, WorkflowExecution)

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
        """Insert the audit row in a savepoint.

        A failed insert (rule deleted mid-run) leaves the session usable.
        """
        async with self.savepoint():
            execution = await self.create(
                WorkflowExecution(
                    workflow_rule_id=workflow_rule_id,
                    trigger_type=trigger_type,
                    trigger_entity_id=trigger_entity_id,
                    status=status,
                    error_message=error_message,
                    execution_log=execution_log,
                    executed_at=executed_at,
                )
            )
        return _to_execution_result(execution)

    async def get_by_rule(
        self, workflow_rule_id: str, skip: int = 0, limit: int = 50
    ) -> list[WorkflowExecutionResult]:
        """Executions for a rule, newest first."""
        result = await self.db.execute(
            select(WorkflowExecution)
            .where(WorkflowExecution.workflow_rule_id == workflow_rule_id)
            .order_by(WorkflowExecution.executed_at.desc())
            .offset(skip)
            .limit(limit)
        )
        return [_to_execution_result(e) for e in result.scalars().all()]

    async def count_by_rule(self, workflow_rule_id: str) -> int:
        result = await self.db.execute(
            select(func.count(WorkflowExecution.id)).where(
                WorkflowExecution.workflow_rule_id == workflow_rule_id
            )
        )
        return result.scalar_one() or 0
