"""Application lifespan: startup and shutdown.

Single place for all startup/shutdown logic. Used by main.py; no business
logic here, only wiring of infrastructure (logging, telemetry, workflow
dispatcher, DB engine dispose).
"""

import logging
from contextlib import asynccontextmanager
from functools import partial
from typing import AsyncIterator

from fastapi import FastAPI

from propertyops.core.config import get_settings
from propertyops.infrastructure.persistence import database
from propertyops.infrastructure.services.workflow_dispatcher import WorkflowDispatcher
from propertyops.infrastructure.services.workflow_engine import build_workflow_engine
from propertyops.shared.telemetry.logging import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def create_lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Run startup then yield; on exit run shutdown.

    Startup order: logging, telemetry (if enabled), workflow dispatcher.
    Shutdown order: drain pending workflow runs, telemetry shutdown, SQL
    engine dispose.
    """
    settings = get_settings()

    # ---- Startup ----
    setup_logging()

    if settings.telemetry_enabled:
        from propertyops.shared.telemetry.telemetry import TelemetryConfig, set_telemetry

        telemetry = TelemetryConfig.from_settings(settings)
        if telemetry.setup() is not None:
            set_telemetry(telemetry)
            database._ensure_engine()
            telemetry.instrument(app, database.engine)

    app.state.workflow_dispatcher = WorkflowDispatcher(
        partial(
            build_workflow_engine,
            action_timeout_seconds=settings.workflow_action_timeout_seconds,
        ),
        enabled=settings.workflow_dispatch_enabled,
    )

    yield

    # ---- Shutdown ----
    dispatcher = getattr(app.state, "workflow_dispatcher", None)
    if dispatcher is not None:
        if dispatcher.pending:
            logger.info("Waiting for %d pending workflow run(s)", dispatcher.pending)
        await dispatcher.drain()
        app.state.workflow_dispatcher = None

    from propertyops.shared.telemetry.telemetry import get_telemetry, set_telemetry

    telemetry_instance = get_telemetry()
    if telemetry_instance is not None:
        telemetry_instance.shutdown()
        set_telemetry(None)

    await database.dispose_engine()
