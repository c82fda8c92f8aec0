"""Workflow execution recorder: classify a rule run and persist its audit record."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from propertyops.application.dtos.workflow import (
    ActionResult,
    TriggerContext,
    WorkflowExecutionResult,
)
from propertyops.application.interfaces.repositories import (
    IWorkflowExecutionRepository,
    IWorkflowRuleRepository,
)
from propertyops.domain.entities.workflow import WorkflowRuleEntity
from propertyops.shared.enums import WorkflowExecutionStatus
from propertyops.shared.utils.datetime import utc_now


def classify_run(outcomes: Sequence[ActionResult]) -> WorkflowExecutionStatus:
    """SUCCESS if nothing failed, FAILED if everything failed, otherwise PARTIAL."""
    failures = sum(1 for outcome in outcomes if not outcome.success)
    if failures == 0:
        return WorkflowExecutionStatus.SUCCESS
    if failures == len(outcomes):
        return WorkflowExecutionStatus.FAILED
    return WorkflowExecutionStatus.PARTIAL


def build_execution_log(
    actions: Sequence[Any], outcomes: Sequence[ActionResult]
) -> dict[str, Any]:
    """Pair each configured action (as stored) with its outcome, in rule order."""
    entries: list[dict[str, Any]] = []
    for action, outcome in zip(actions, outcomes, strict=True):
        stored = action if isinstance(action, Mapping) else {}
        entries.append(
            {
                "type": stored.get("type"),
                "params": stored.get("params"),
                "result": outcome.to_log(),
            }
        )
    return {"actions": entries}


@dataclass(frozen=True)
class RecordedRun:
    """What the engine needs back after a rule run is persisted."""

    status: WorkflowExecutionStatus
    errors: list[str]
    execution: WorkflowExecutionResult


class WorkflowExecutionRecorder:
    """Writes one WorkflowExecution per run, then bumps the rule's counters."""

    def __init__(
        self,
        rule_repo: IWorkflowRuleRepository,
        execution_repo: IWorkflowExecutionRepository,
    ) -> None:
        self._rule_repo = rule_repo
        self._execution_repo = execution_repo

    async def record(
        self,
        rule: WorkflowRuleEntity,
        trigger: str,
        context: TriggerContext,
        actions: Sequence[Any],
        outcomes: Sequence[ActionResult],
    ) -> RecordedRun:
        status = classify_run(outcomes)
        errors = [outcome.error or "Unknown error" for outcome in outcomes if not outcome.success]
        executed_at = utc_now()
        execution = await self._execution_repo.create_execution(
            workflow_rule_id=rule.id,
            trigger_type=trigger,
            trigger_entity_id=context.entity_id,
            status=status.value,
            error_message="; ".join(errors) if errors else None,
            execution_log=build_execution_log(actions, outcomes),
            executed_at=executed_at,
        )
        await self._rule_repo.record_execution(rule.id, executed_at)
        return RecordedRun(status=status, errors=errors, execution=execution)
