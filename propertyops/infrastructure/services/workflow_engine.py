"""Workflow engine: run the rules registered for a trigger (implements IWorkflowEngine)."""

from __future__ import annotations

import asyncio
from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from propertyops.application.dtos.workflow import (
    ActionResult,
    TriggerContext,
    WorkflowRunSummary,
)
from propertyops.application.interfaces.repositories import IWorkflowRuleRepository
from propertyops.application.interfaces.services import INotificationService
from propertyops.application.services.condition_evaluator import matches
from propertyops.application.services.scope_filter import in_scope
from propertyops.domain.entities.workflow import WorkflowRuleEntity
from propertyops.domain.exceptions import ValidationException
from propertyops.infrastructure.persistence.repositories import (
    BookingRepository,
    IssueRepository,
    TaskRepository,
    WorkflowExecutionRepository,
    WorkflowRuleRepository,
)
from propertyops.infrastructure.services.workflow_action_executor import (
    WorkflowActionExecutor,
)
from propertyops.infrastructure.services.workflow_execution_recorder import (
    RecordedRun,
    WorkflowExecutionRecorder,
)
from propertyops.infrastructure.services.workflow_notification_service import (
    LogOnlyNotificationService,
)
from propertyops.shared.enums import WorkflowExecutionStatus, WorkflowTrigger
from propertyops.shared.telemetry.logging import get_logger
from propertyops.shared.telemetry.tracing import (
    add_span_attributes,
    rule_span,
    traced,
)

logger = get_logger(__name__)


class _ActionRunner(Protocol):
    async def execute(self, action: object, context: TriggerContext) -> ActionResult: ...


def _coerce_trigger(trigger: str) -> str:
    try:
        return WorkflowTrigger(trigger).value
    except ValueError as e:
        raise ValidationException(f"Unknown trigger: {trigger}", field="trigger") from e


def _settled(result: ActionResult | BaseException) -> ActionResult:
    if isinstance(result, BaseException):
        return ActionResult.failed(str(result) or "Action execution failed")
    return result


class WorkflowEngine:
    """Loads active rules for a trigger, filters by scope and conditions, runs actions.

    Rules run one after another in priority order; a rule's actions run
    concurrently and all of them settle before the run is recorded. A failure
    inside one rule is counted in the summary and never stops the next rule.
    """

    def __init__(
        self,
        rule_repo: IWorkflowRuleRepository,
        action_executor: _ActionRunner,
        recorder: WorkflowExecutionRecorder,
    ) -> None:
        self._rule_repo = rule_repo
        self._action_executor = action_executor
        self._recorder = recorder

    @traced("workflow.execute_workflows")
    async def execute_workflows(
        self, trigger: str, context: TriggerContext
    ) -> WorkflowRunSummary:
        """Run every active, in-scope, matching rule for trigger.

        Raises:
            ValidationException: trigger is not a known WorkflowTrigger.
            Exception: loading the rule set failed (nothing was run).
        """
        trigger_value = _coerce_trigger(trigger)
        rules = await self._rule_repo.get_active_by_trigger(trigger_value)
        summary = WorkflowRunSummary()

        for rule in rules:
            if not rule.can_trigger_on(trigger_value):
                continue
            if not in_scope(rule, context.property_id, context.owner_id):
                logger.debug("Workflow %s skipped: out of scope", rule.id)
                continue
            try:
                if not matches(rule.conditions, context.entity_data):
                    logger.debug("Workflow %s skipped: conditions not met", rule.id)
                    continue
                recorded = await self._run_rule(rule, trigger_value, context)
            except Exception as e:
                logger.exception(
                    "Workflow %s (%s) failed for %s %s",
                    rule.id,
                    rule.name,
                    context.entity_type,
                    context.entity_id,
                )
                summary.record_failure(rule.name, str(e) or "Execution failed")
                continue

            if recorded.status is WorkflowExecutionStatus.SUCCESS:
                summary.executed += 1
            else:
                logger.warning(
                    "Workflow %s finished %s: %s",
                    rule.id,
                    recorded.status.value,
                    "; ".join(recorded.errors),
                )
                summary.record_failure(rule.name, ", ".join(recorded.errors))

        add_span_attributes(
            **{
                "workflow.trigger": trigger_value,
                "workflow.rules_loaded": len(rules),
                "workflow.executed": summary.executed,
                "workflow.failed": summary.failed,
            }
        )
        return summary

    async def _run_rule(
        self, rule: WorkflowRuleEntity, trigger: str, context: TriggerContext
    ) -> RecordedRun:
        with rule_span(rule.id, rule.name, trigger) as span:
            results = await asyncio.gather(
                *(self._action_executor.execute(action, context) for action in rule.actions),
                return_exceptions=True,
            )
            outcomes = [_settled(result) for result in results]
            recorded = await self._recorder.record(
                rule, trigger, context, rule.actions, outcomes
            )
            span.set_attribute("workflow.status", recorded.status.value)
        return recorded


def build_workflow_engine(
    db: AsyncSession,
    *,
    notification_service: INotificationService | None = None,
    action_timeout_seconds: float | None = None,
) -> WorkflowEngine:
    """Wire a WorkflowEngine onto one session (all stores share its transaction)."""
    rule_repo = WorkflowRuleRepository(db)
    executor = WorkflowActionExecutor(
        TaskRepository(db),
        BookingRepository(db),
        IssueRepository(db),
        notification_service or LogOnlyNotificationService(),
        action_timeout_seconds=action_timeout_seconds,
    )
    recorder = WorkflowExecutionRecorder(rule_repo, WorkflowExecutionRepository(db))
    return WorkflowEngine(rule_repo, executor, recorder)
