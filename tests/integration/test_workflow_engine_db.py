"""Workflow engine against Postgres. Require a migrated DATABASE_URL; session is rolled back after each test."""

import pytest
from sqlalchemy import select

from propertyops.application.dtos.workflow import TriggerContext
from propertyops.infrastructure.persistence.models import (
    Booking,
    Task,
    WorkflowExecution,
)
from propertyops.infrastructure.persistence.repositories import (
    BookingRepository,
    IssueRepository,
    TaskRepository,
    WorkflowExecutionRepository,
    WorkflowRuleRepository,
)
from propertyops.infrastructure.services import (
    LogOnlyNotificationService,
    WorkflowActionExecutor,
    WorkflowEngine,
    WorkflowExecutionRecorder,
    build_workflow_engine,
)


async def _booking(db_session, status: str = "CONFIRMED") -> Booking:
    booking = Booking(property_id="p1", owner_id="own_1", status=status)
    db_session.add(booking)
    await db_session.flush()
    return booking


@pytest.mark.requires_db
async def test_checkout_rule_creates_task_and_records_run(db_session) -> None:
    """CREATE_TASK + UPDATE_STATUS on a booking: one SUCCESS row, counter bumped."""
    booking = await _booking(db_session)
    rules = WorkflowRuleRepository(db_session)
    rule = await rules.create_rule(
        name="Checkout cleaning",
        trigger="BOOKING_CHECKOUT",
        actions=[
            {"type": "CREATE_TASK", "params": {"title": "Clean", "type": "CLEANING"}},
            {"type": "UPDATE_STATUS", "params": {"status": "CHECKED_OUT"}},
        ],
        property_ids=["p1"],
    )
    engine = build_workflow_engine(db_session)

    summary = await engine.execute_workflows(
        "BOOKING_CHECKOUT",
        TriggerContext(
            entity_type="booking",
            entity_id=booking.id,
            entity_data={"status": "CONFIRMED"},
            property_id="p1",
            owner_id="own_1",
        ),
    )

    assert summary.to_dict() == {"executed": 1, "failed": 0, "errors": []}
    tasks = (
        await db_session.execute(select(Task).where(Task.booking_id == booking.id))
    ).scalars().all()
    assert [(t.title, t.type, t.status) for t in tasks] == [("Clean", "CLEANING", "PENDING")]
    await db_session.refresh(booking)
    assert booking.status == "CHECKED_OUT"
    await db_session.refresh(rule)
    assert rule.execution_count == 1
    assert rule.last_executed_at is not None
    executions = await WorkflowExecutionRepository(db_session).get_by_rule(rule.id)
    assert [e.status for e in executions] == ["SUCCESS"]


@pytest.mark.requires_db
async def test_missing_entity_fails_action_but_not_the_session(db_session) -> None:
    """A failed UPDATE inside a savepoint leaves later rules and writes usable."""
    rules = WorkflowRuleRepository(db_session)
    broken = await rules.create_rule(
        name="Broken",
        trigger="ISSUE_STATUS_CHANGED",
        priority=10,
        actions=[{"type": "UPDATE_STATUS", "params": {"status": "X"}}],
    )
    healthy = await rules.create_rule(
        name="Healthy",
        trigger="ISSUE_STATUS_CHANGED",
        actions=[{"type": "CREATE_TASK"}],
    )
    engine = build_workflow_engine(db_session)

    summary = await engine.execute_workflows(
        "ISSUE_STATUS_CHANGED",
        TriggerContext(entity_type="issue", entity_id="iss_missing", property_id="p1"),
    )

    assert summary.executed == 1
    assert summary.errors == ['Workflow "Broken": issue not found: iss_missing']
    rows = (
        await db_session.execute(
            select(WorkflowExecution.workflow_rule_id, WorkflowExecution.status).where(
                WorkflowExecution.workflow_rule_id.in_([broken.id, healthy.id])
            )
        )
    ).all()
    assert sorted(rows) == sorted([(broken.id, "FAILED"), (healthy.id, "SUCCESS")])


@pytest.mark.requires_db
async def test_inactive_rules_are_not_loaded(db_session) -> None:
    rules = WorkflowRuleRepository(db_session)
    await rules.create_rule(
        name="Off",
        trigger="EXPENSE_CREATED",
        is_active=False,
        actions=[{"type": "SEND_EMAIL"}],
    )
    active = await rules.get_active_by_trigger("EXPENSE_CREATED")
    assert all(rule.name != "Off" for rule in active)


class _DeletedRuleExecutions(WorkflowExecutionRepository):
    """Writes one rule's audit row against a rule id that no longer exists."""

    def __init__(self, db, deleted_rule_id: str) -> None:
        super().__init__(db)
        self._deleted_rule_id = deleted_rule_id

    async def create_execution(self, *, workflow_rule_id: str, **kwargs):
        if workflow_rule_id == self._deleted_rule_id:
            workflow_rule_id = "wfr_deleted_mid_run"
        return await super().create_execution(workflow_rule_id=workflow_rule_id, **kwargs)


@pytest.mark.requires_db
async def test_failed_audit_insert_does_not_undo_other_rules(db_session) -> None:
    """An FK violation on one rule's execution row leaves the session usable."""
    rules = WorkflowRuleRepository(db_session)
    gone = await rules.create_rule(
        name="Gone",
        trigger="TASK_OVERDUE",
        priority=10,
        actions=[{"type": "CREATE_TASK", "params": {"title": "From gone"}}],
    )
    kept = await rules.create_rule(
        name="Kept",
        trigger="TASK_OVERDUE",
        actions=[{"type": "CREATE_TASK", "params": {"title": "From kept"}}],
    )
    engine = WorkflowEngine(
        rules,
        WorkflowActionExecutor(
            TaskRepository(db_session),
            BookingRepository(db_session),
            IssueRepository(db_session),
            LogOnlyNotificationService(),
        ),
        WorkflowExecutionRecorder(rules, _DeletedRuleExecutions(db_session, gone.id)),
    )

    summary = await engine.execute_workflows(
        "TASK_OVERDUE",
        TriggerContext(entity_type="task", entity_id="task_x", property_id="p1"),
    )

    assert summary.executed == 1
    assert summary.failed == 1
    assert summary.errors[0].startswith('Workflow "Gone": ')
    await db_session.flush()
    statuses = (
        await db_session.execute(
            select(WorkflowExecution.workflow_rule_id, WorkflowExecution.status).where(
                WorkflowExecution.workflow_rule_id.in_([gone.id, kept.id])
            )
        )
    ).all()
    assert statuses == [(kept.id, "SUCCESS")]
    await db_session.refresh(kept)
    await db_session.refresh(gone)
    assert kept.execution_count == 1
    assert gone.execution_count == 0
    titles = (
        await db_session.execute(
            select(Task.title).where(Task.title.in_(["From gone", "From kept"]))
        )
    ).scalars().all()
    assert sorted(titles) == ["From gone", "From kept"]
