"""Workflow rule API: thin routes delegating to WorkflowRuleRepository and WorkflowExecutionRepository."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request

from propertyops.api.v1.dependencies import (
    get_workflow_execution_repo,
    get_workflow_rule_repo,
    get_workflow_rule_repo_for_write,
)
from propertyops.core.limiter import limit_writes
from propertyops.domain.exceptions import ResourceNotFoundException
from propertyops.infrastructure.persistence.repositories.workflow_repo import (
    WorkflowExecutionRepository,
    WorkflowRuleRepository,
)
from propertyops.schemas.workflow import (
    WorkflowExecutionListResponse,
    WorkflowExecutionResponse,
    WorkflowRuleCreateRequest,
    WorkflowRuleResponse,
    WorkflowRuleUpdate,
)
from propertyops.shared.enums import WorkflowTrigger
from propertyops.shared.telemetry.logging import get_logger

logger = get_logger(__name__)

router = APIRouter()


@router.get("", response_model=list[WorkflowRuleResponse])
async def list_workflow_rules(
    rule_repo: Annotated[WorkflowRuleRepository, Depends(get_workflow_rule_repo)],
    trigger: WorkflowTrigger | None = None,
    is_active: bool | None = None,
):
    """List rules, highest priority first (newest first within a priority)."""
    rules = await rule_repo.list_rules(
        trigger=trigger.value if trigger else None,
        is_active=is_active,
    )
    return [WorkflowRuleResponse.model_validate(r) for r in rules]


@router.post("", response_model=WorkflowRuleResponse, status_code=201)
@limit_writes
async def create_workflow_rule(
    request: Request,
    body: WorkflowRuleCreateRequest,
    rule_repo: Annotated[
        WorkflowRuleRepository, Depends(get_workflow_rule_repo_for_write)
    ],
):
    """Create a rule. Every action must be a known type with its required params."""
    rule = await rule_repo.create_rule(
        name=body.name,
        trigger=body.trigger.value,
        actions=body.actions,
        description=body.description,
        is_active=body.is_active,
        priority=body.priority,
        conditions=(
            [c.model_dump(mode="json") for c in body.conditions]
            if body.conditions is not None
            else None
        ),
        property_ids=body.property_ids,
        owner_ids=body.owner_ids,
        schedule_cron=body.schedule_cron,
    )
    logger.info("Workflow rule %s created for %s", rule.id, rule.trigger)
    return WorkflowRuleResponse.model_validate(rule)


@router.get("/{rule_id}", response_model=WorkflowRuleResponse)
async def get_workflow_rule(
    rule_id: str,
    rule_repo: Annotated[WorkflowRuleRepository, Depends(get_workflow_rule_repo)],
):
    """Get a rule by id."""
    rule = await rule_repo.get_by_id(rule_id)
    if not rule:
        raise ResourceNotFoundException("workflow_rule", rule_id)
    return WorkflowRuleResponse.model_validate(rule)


@router.patch("/{rule_id}", response_model=WorkflowRuleResponse)
@limit_writes
async def update_workflow_rule(
    request: Request,
    rule_id: str,
    body: WorkflowRuleUpdate,
    rule_repo: Annotated[
        WorkflowRuleRepository, Depends(get_workflow_rule_repo_for_write)
    ],
):
    """Partially update a rule; only fields present in the body change."""
    rule = await rule_repo.get_by_id(rule_id)
    if not rule:
        raise ResourceNotFoundException("workflow_rule", rule_id)
    for name, value in body.changes().items():
        setattr(rule, name, value)
    updated = await rule_repo.update(rule)
    return WorkflowRuleResponse.model_validate(updated)


@router.delete("/{rule_id}", status_code=204)
@limit_writes
async def delete_workflow_rule(
    request: Request,
    rule_id: str,
    rule_repo: Annotated[
        WorkflowRuleRepository, Depends(get_workflow_rule_repo_for_write)
    ],
):
    """Hard-delete a rule; its executions are removed by the FK cascade."""
    rule = await rule_repo.get_by_id(rule_id)
    if not rule:
        raise ResourceNotFoundException("workflow_rule", rule_id)
    await rule_repo.delete(rule)
    logger.info("Workflow rule %s deleted", rule_id)


@router.get("/{rule_id}/executions", response_model=WorkflowExecutionListResponse)
async def list_workflow_executions(
    rule_id: str,
    rule_repo: Annotated[WorkflowRuleRepository, Depends(get_workflow_rule_repo)],
    execution_repo: Annotated[
        WorkflowExecutionRepository, Depends(get_workflow_execution_repo)
    ],
    limit: int = Query(50, ge=1, le=500),
    offset: int = Query(0, ge=0),
):
    """Execution history for a rule, newest first."""
    rule = await rule_repo.get_by_id(rule_id)
    if not rule:
        raise ResourceNotFoundException("workflow_rule", rule_id)
    executions = await execution_repo.get_by_rule(rule_id, skip=offset, limit=limit)
    total = await execution_repo.count_by_rule(rule_id)
    return WorkflowExecutionListResponse(
        executions=[WorkflowExecutionResponse.model_validate(e) for e in executions],
        total=total,
        limit=limit,
        offset=offset,
    )
