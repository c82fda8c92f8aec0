"""Infrastructure services: workflow engine, action executor, recorder, dispatcher."""

from propertyops.infrastructure.services.workflow_action_executor import (
    WorkflowActionExecutor,
)
from propertyops.infrastructure.services.workflow_dispatcher import (
    WorkflowDispatcher,
    dispatch_workflows,
)
from propertyops.infrastructure.services.workflow_engine import (
    WorkflowEngine,
    build_workflow_engine,
)
from propertyops.infrastructure.services.workflow_execution_recorder import (
    RecordedRun,
    WorkflowExecutionRecorder,
    classify_run,
)
from propertyops.infrastructure.services.workflow_notification_service import (
    LogOnlyNotificationService,
)

__all__ = [
    "LogOnlyNotificationService",
    "RecordedRun",
    "WorkflowActionExecutor",
    "WorkflowDispatcher",
    "WorkflowEngine",
    "WorkflowExecutionRecorder",
    "build_workflow_engine",
    "classify_run",
    "dispatch_workflows",
]
