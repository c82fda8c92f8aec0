"""WorkflowDispatcher: detached runs, own session, drain on shutdown."""

import asyncio
from contextlib import asynccontextmanager
from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest

from propertyops.application.dtos.workflow import TriggerContext, WorkflowRunSummary
from propertyops.infrastructure.services.workflow_dispatcher import (
    WorkflowDispatcher,
    dispatch_workflows,
)

CONTEXT = TriggerContext(entity_type="booking", entity_id="bk_1", property_id="p1")


class FakeSessionScope:
    """Records how each session scope exited (commit vs rollback)."""

    def __init__(self) -> None:
        self.outcomes: list[str] = []

    @asynccontextmanager
    async def __call__(self):
        session = object()
        try:
            yield session
        except Exception:
            self.outcomes.append("rollback")
            raise
        self.outcomes.append("commit")


@pytest.fixture
def sessions() -> FakeSessionScope:
    return FakeSessionScope()


def _engine(summary: WorkflowRunSummary | None = None, error: Exception | None = None):
    engine = AsyncMock()
    engine.execute_workflows = AsyncMock(
        return_value=summary or WorkflowRunSummary(executed=1), side_effect=error
    )
    return engine


async def test_submit_runs_engine_in_its_own_session(sessions) -> None:
    engine = _engine()
    factory_sessions = []

    def factory(session):
        factory_sessions.append(session)
        return engine

    dispatcher = WorkflowDispatcher(factory, session_factory=sessions)

    task = dispatcher.submit("BOOKING_CREATED", CONTEXT)
    summary = await task

    assert summary.executed == 1
    assert sessions.outcomes == ["commit"]
    assert len(factory_sessions) == 1
    engine.execute_workflows.assert_awaited_once_with("BOOKING_CREATED", CONTEXT)


async def test_escaped_exception_is_logged_and_rolled_back(sessions, caplog) -> None:
    engine = _engine(error=RuntimeError("rule store offline"))
    dispatcher = WorkflowDispatcher(lambda session: engine, session_factory=sessions)

    result = await dispatcher.submit("BOOKING_CREATED", CONTEXT)

    assert result is None
    assert sessions.outcomes == ["rollback"]
    assert "Workflow dispatch failed" in caplog.text


async def test_drain_waits_for_pending_runs(sessions) -> None:
    release = asyncio.Event()

    async def slow_execute(trigger, context):
        await release.wait()
        return WorkflowRunSummary(executed=1)

    engine = AsyncMock()
    engine.execute_workflows = slow_execute
    dispatcher = WorkflowDispatcher(lambda session: engine, session_factory=sessions)

    tasks = [dispatcher.submit("BOOKING_CREATED", CONTEXT) for _ in range(3)]
    await asyncio.sleep(0)
    assert dispatcher.pending == 3

    release.set()
    await dispatcher.drain()

    assert dispatcher.pending == 0
    assert all(task.done() for task in tasks)
    assert sessions.outcomes == ["commit"] * 3


async def test_disabled_dispatcher_drops_submissions(sessions) -> None:
    engine = _engine()
    dispatcher = WorkflowDispatcher(
        lambda session: engine, session_factory=sessions, enabled=False
    )

    assert dispatcher.submit("BOOKING_CREATED", CONTEXT) is None
    await dispatcher.drain()
    engine.execute_workflows.assert_not_awaited()


async def test_dispatch_workflows_uses_app_state(sessions) -> None:
    engine = _engine()
    dispatcher = WorkflowDispatcher(lambda session: engine, session_factory=sessions)
    app = SimpleNamespace(state=SimpleNamespace(workflow_dispatcher=dispatcher))

    task = dispatch_workflows(app, "BOOKING_CREATED", CONTEXT)
    await task

    engine.execute_workflows.assert_awaited_once()


def test_dispatch_workflows_without_dispatcher() -> None:
    app = SimpleNamespace(state=SimpleNamespace())
    assert dispatch_workflows(app, "BOOKING_CREATED", CONTEXT) is None
