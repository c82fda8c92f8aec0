"""WorkflowEngine.execute_workflows with in-memory rule/execution stores.

Action handlers are the real WorkflowActionExecutor over mocked entity
stores and notifier, so these tests cover the dispatch path end to end.
"""

import asyncio
from datetime import datetime
from unittest.mock import AsyncMock

import pytest

from propertyops.application.dtos.task import TaskResult
from propertyops.application.dtos.workflow import ActionResult, TriggerContext
from propertyops.domain.entities.workflow import Condition, WorkflowRuleEntity
from propertyops.domain.exceptions import ValidationException
from propertyops.infrastructure.services.workflow_action_executor import (
    WorkflowActionExecutor,
)
from propertyops.infrastructure.services.workflow_engine import WorkflowEngine
from propertyops.infrastructure.services.workflow_execution_recorder import (
    WorkflowExecutionRecorder,
)


class InMemoryRuleStore:
    """Rule store honoring the active filter and priority desc / id asc order."""

    def __init__(self, rules: list[WorkflowRuleEntity]) -> None:
        self.rules = rules

    async def get_active_by_trigger(self, trigger: str) -> list[WorkflowRuleEntity]:
        active = [r for r in self.rules if r.is_active and r.trigger == trigger]
        return sorted(active, key=lambda r: (-r.priority, r.id))

    async def record_execution(self, rule_id: str, executed_at: datetime) -> None:
        for rule in self.rules:
            if rule.id == rule_id:
                rule.execution_count += 1
                rule.last_executed_at = executed_at


class InMemoryExecutionStore:
    def __init__(self) -> None:
        self.rows: list[dict] = []

    async def create_execution(self, **values):
        self.rows.append(values)
        return values


def _rule(rule_id: str = "r1", **overrides) -> WorkflowRuleEntity:
    values = {
        "id": rule_id,
        "name": f"Rule {rule_id}",
        "trigger": "TASK_COMPLETED",
        "actions": [{"type": "SEND_NOTIFICATION", "params": {"title": "Done"}}],
    }
    values.update(overrides)
    return WorkflowRuleEntity(**values)


def _context(**overrides) -> TriggerContext:
    values = {
        "entity_type": "task",
        "entity_id": "task_1",
        "entity_data": {"status": "COMPLETED"},
        "property_id": "p1",
        "owner_id": "own_1",
    }
    values.update(overrides)
    return TriggerContext(**values)


@pytest.fixture
def notification_service() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def task_repo() -> AsyncMock:
    repo = AsyncMock()
    repo.create_task = AsyncMock(
        return_value=TaskResult(
            id="task_new",
            property_id="p1",
            booking_id=None,
            task_type="OTHER",
            title="Auto-generated task",
            description="",
            status="PENDING",
            scheduled_at=None,
            due_at=None,
            assigned_to_user_id=None,
            cost_estimate=None,
        )
    )
    return repo


@pytest.fixture
def executions() -> InMemoryExecutionStore:
    return InMemoryExecutionStore()


@pytest.fixture
def make_engine(task_repo, notification_service, executions):
    """Build an engine over the given rules; returns (engine, rule_store)."""

    def _make(*rules: WorkflowRuleEntity, executor=None):
        store = InMemoryRuleStore(list(rules))
        executor = executor or WorkflowActionExecutor(
            task_repo, AsyncMock(), AsyncMock(), notification_service
        )
        recorder = WorkflowExecutionRecorder(store, executions)
        return WorkflowEngine(store, executor, recorder), store

    return _make


async def test_notification_rule_succeeds(make_engine, executions, notification_service) -> None:
    """TASK_COMPLETED rule without conditions notifies the owner."""
    engine, store = make_engine(_rule())

    summary = await engine.execute_workflows("TASK_COMPLETED", _context())

    assert summary.to_dict() == {"executed": 1, "failed": 0, "errors": []}
    assert [row["status"] for row in executions.rows] == ["SUCCESS"]
    assert executions.rows[0]["error_message"] is None
    assert store.rules[0].execution_count == 1
    request = notification_service.send_notification.await_args.args[0]
    assert request.owner_id == "own_1"


async def test_condition_miss_is_silent(make_engine, executions) -> None:
    rule = _rule(conditions=[Condition("totalPayout", "GREATER_THAN", 1000)])
    engine, store = make_engine(rule)

    summary = await engine.execute_workflows(
        "TASK_COMPLETED", _context(entity_data={"totalPayout": 500})
    )

    assert (summary.executed, summary.failed) == (0, 0)
    assert executions.rows == []
    assert store.rules[0].execution_count == 0


async def test_partial_run_is_counted_as_failed(make_engine, executions) -> None:
    """CREATE_TASK without a property fails while the notification succeeds."""
    rule = _rule(
        name="Checkout",
        actions=[
            {"type": "CREATE_TASK", "params": {"title": "Clean"}},
            {"type": "SEND_NOTIFICATION"},
        ],
    )
    engine, store = make_engine(rule)

    summary = await engine.execute_workflows(
        "TASK_COMPLETED", _context(property_id=None)
    )

    assert summary.executed == 0
    assert summary.failed == 1
    assert summary.errors == [
        'Workflow "Checkout": Property ID required for task creation'
    ]
    row = executions.rows[0]
    assert row["status"] == "PARTIAL"
    assert row["error_message"] == "Property ID required for task creation"
    results = [entry["result"]["success"] for entry in row["execution_log"]["actions"]]
    assert results == [False, True]
    assert store.rules[0].execution_count == 1


async def test_out_of_scope_rule_is_skipped(make_engine, executions) -> None:
    engine, store = make_engine(_rule(property_ids=["p1"]))

    summary = await engine.execute_workflows("TASK_COMPLETED", _context(property_id="p2"))

    assert (summary.executed, summary.failed) == (0, 0)
    assert executions.rows == []
    assert store.rules[0].execution_count == 0


async def test_all_actions_failing_is_failed(make_engine, executions) -> None:
    rule = _rule(actions=[{"type": "SEND_SMS"}, {"type": "SEND_EMAIL"}])
    engine, _ = make_engine(rule)

    summary = await engine.execute_workflows("TASK_COMPLETED", _context(owner_id=None))

    assert executions.rows[0]["status"] == "FAILED"
    assert executions.rows[0]["error_message"] == "Owner ID required; Owner ID required"
    assert summary.errors == ['Workflow "Rule r1": Owner ID required, Owner ID required']


async def test_repeated_invocations_are_not_deduplicated(make_engine, executions) -> None:
    engine, store = make_engine(_rule())

    await engine.execute_workflows("TASK_COMPLETED", _context())
    await engine.execute_workflows("TASK_COMPLETED", _context())

    assert len(executions.rows) == 2
    assert store.rules[0].execution_count == 2


async def test_rules_run_in_priority_order(make_engine, executions) -> None:
    engine, _ = make_engine(
        _rule("r_low", priority=1),
        _rule("r_b", priority=5),
        _rule("r_a", priority=5),
    )

    summary = await engine.execute_workflows("TASK_COMPLETED", _context())

    assert summary.executed == 3
    assert [row["workflow_rule_id"] for row in executions.rows] == ["r_a", "r_b", "r_low"]


async def test_inactive_and_other_trigger_rules_are_ignored(make_engine, executions) -> None:
    engine, store = make_engine(
        _rule("r_off", is_active=False),
        _rule("r_other", trigger="TASK_CREATED"),
    )

    summary = await engine.execute_workflows("TASK_COMPLETED", _context())

    assert (summary.executed, summary.failed) == (0, 0)
    assert executions.rows == []
    assert all(rule.execution_count == 0 for rule in store.rules)


async def test_rule_failure_does_not_stop_later_rules(make_engine, executions) -> None:
    """A recorder error on one rule is reported and the next rule still runs."""
    engine, store = make_engine(_rule("r1", name="First", priority=10), _rule("r2"))
    real_create = executions.create_execution
    calls = 0

    async def flaky_create(**values):
        nonlocal calls
        calls += 1
        if calls == 1:
            raise RuntimeError("db down")
        return await real_create(**values)

    executions.create_execution = flaky_create

    summary = await engine.execute_workflows("TASK_COMPLETED", _context())

    assert summary.executed == 1
    assert summary.failed == 1
    assert summary.errors == ['Workflow "First": db down']
    assert [row["workflow_rule_id"] for row in executions.rows] == ["r2"]


async def test_rule_load_failure_propagates(make_engine) -> None:
    engine, store = make_engine()
    store.get_active_by_trigger = AsyncMock(side_effect=RuntimeError("connection refused"))

    with pytest.raises(RuntimeError, match="connection refused"):
        await engine.execute_workflows("TASK_COMPLETED", _context())


async def test_unknown_trigger_is_rejected(make_engine) -> None:
    engine, _ = make_engine()
    with pytest.raises(ValidationException):
        await engine.execute_workflows("BOOKING_EXPLODED", _context())


async def test_escaped_action_exception_is_settled(make_engine, executions) -> None:
    """An executor that raises still yields a recorded failure for that action."""
    executor = AsyncMock()
    executor.execute = AsyncMock(side_effect=[ActionResult.ok(), RuntimeError("bug")])
    rule = _rule(actions=[{"type": "SEND_EMAIL"}, {"type": "SEND_SMS"}])
    engine, _ = make_engine(rule, executor=executor)

    summary = await engine.execute_workflows("TASK_COMPLETED", _context())

    assert executions.rows[0]["status"] == "PARTIAL"
    assert summary.errors == ['Workflow "Rule r1": bug']


async def test_actions_of_one_rule_run_concurrently(make_engine, executions) -> None:
    """Each action waits for the other to start; sequential dispatch would hang."""
    started = [asyncio.Event(), asyncio.Event()]

    class RendezvousExecutor:
        async def execute(self, action, context):
            index = action["params"]["index"]
            started[index].set()
            await started[1 - index].wait()
            return ActionResult.ok()

    rule = _rule(
        actions=[
            {"type": "SEND_EMAIL", "params": {"index": 0}},
            {"type": "SEND_EMAIL", "params": {"index": 1}},
        ]
    )
    engine, _ = make_engine(rule, executor=RendezvousExecutor())

    summary = await asyncio.wait_for(
        engine.execute_workflows("TASK_COMPLETED", _context()), timeout=1
    )

    assert summary.executed == 1
