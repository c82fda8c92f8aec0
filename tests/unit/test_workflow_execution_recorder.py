"""Execution recorder: outcome classification, audit record, counter bump."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from propertyops.application.dtos.workflow import ActionResult, TriggerContext
from propertyops.domain.entities.workflow import WorkflowRuleEntity
from propertyops.infrastructure.services.workflow_execution_recorder import (
    WorkflowExecutionRecorder,
    build_execution_log,
    classify_run,
)
from propertyops.shared.enums import WorkflowExecutionStatus

OK = ActionResult.ok()
BAD = ActionResult.failed("boom")


@pytest.mark.parametrize(
    ("outcomes", "expected"),
    [
        ([], WorkflowExecutionStatus.SUCCESS),
        ([OK, OK], WorkflowExecutionStatus.SUCCESS),
        ([BAD], WorkflowExecutionStatus.FAILED),
        ([BAD, BAD, BAD], WorkflowExecutionStatus.FAILED),
        ([OK, BAD], WorkflowExecutionStatus.PARTIAL),
    ],
)
def test_classify_run(outcomes, expected) -> None:
    """SUCCESS iff nothing failed, FAILED iff everything failed."""
    assert classify_run(outcomes) is expected


def test_execution_log_pairs_actions_with_results() -> None:
    actions = [
        {"type": "CREATE_TASK", "params": {"title": "x"}},
        {"type": "SEND_SMS"},
        "garbage",
    ]
    log = build_execution_log(actions, [ActionResult.ok(task_id="t1"), BAD, BAD])
    assert log["actions"][0] == {
        "type": "CREATE_TASK",
        "params": {"title": "x"},
        "result": {"success": True, "task_id": "t1"},
    }
    assert log["actions"][1]["params"] is None
    assert log["actions"][1]["result"] == {"success": False, "error": "boom"}
    assert log["actions"][2]["type"] is None


async def test_record_persists_then_bumps_counter() -> None:
    rule_repo = AsyncMock()
    execution_repo = AsyncMock()
    execution_repo.create_execution = AsyncMock(return_value=MagicMock(id="ex_1"))
    recorder = WorkflowExecutionRecorder(rule_repo, execution_repo)
    rule = WorkflowRuleEntity(id="r1", name="R", trigger="TASK_CREATED", actions=[])
    context = TriggerContext(entity_type="task", entity_id="t9")
    actions = [{"type": "SEND_EMAIL"}, {"type": "SEND_SMS"}, {"type": "CREATE_TASK"}]

    recorded = await recorder.record(
        rule,
        "TASK_CREATED",
        context,
        actions,
        [OK, ActionResult.failed("a"), ActionResult.failed("b")],
    )

    assert recorded.status is WorkflowExecutionStatus.PARTIAL
    assert recorded.errors == ["a", "b"]
    kwargs = execution_repo.create_execution.await_args.kwargs
    assert kwargs["workflow_rule_id"] == "r1"
    assert kwargs["trigger_type"] == "TASK_CREATED"
    assert kwargs["trigger_entity_id"] == "t9"
    assert kwargs["status"] == "PARTIAL"
    assert kwargs["error_message"] == "a; b"
    rule_repo.record_execution.assert_awaited_once_with("r1", kwargs["executed_at"])


async def test_success_has_no_error_message() -> None:
    rule_repo = AsyncMock()
    execution_repo = AsyncMock()
    recorder = WorkflowExecutionRecorder(rule_repo, execution_repo)
    rule = WorkflowRuleEntity(id="r1", name="R", trigger="TASK_CREATED", actions=[])

    recorded = await recorder.record(
        rule, "TASK_CREATED", TriggerContext("task", "t1"), [{"type": "SEND_SMS"}], [OK]
    )

    assert recorded.status is WorkflowExecutionStatus.SUCCESS
    assert execution_repo.create_execution.await_args.kwargs["error_message"] is None
    rule_repo.record_execution.assert_awaited_once()
