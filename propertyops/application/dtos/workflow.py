"""DTOs for workflow engine invocations (no dependency on ORM)."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


@dataclass(frozen=True)
class TriggerContext:
    """Snapshot handed to the engine by the business operation that raised a trigger."""

    entity_type: str
    entity_id: str
    entity_data: Mapping[str, Any] = field(default_factory=dict)
    property_id: str | None = None
    owner_id: str | None = None


@dataclass(frozen=True)
class ActionResult:
    """Settled outcome of one action. Handlers return this instead of raising."""

    success: bool
    error: str | None = None
    details: Mapping[str, Any] = field(default_factory=dict)

    @classmethod
    def ok(cls, **details: Any) -> ActionResult:
        return cls(success=True, details=details)

    @classmethod
    def failed(cls, error: str) -> ActionResult:
        return cls(success=False, error=error)

    def to_log(self) -> dict[str, Any]:
        """Serialize for the execution log (JSON column)."""
        entry: dict[str, Any] = {"success": self.success}
        if self.error is not None:
            entry["error"] = self.error
        entry.update(self.details)
        return entry


@dataclass
class WorkflowRunSummary:
    """Aggregate result of one execute_workflows invocation."""

    executed: int = 0
    failed: int = 0
    errors: list[str] = field(default_factory=list)

    def record_failure(self, rule_name: str, message: str) -> None:
        self.failed += 1
        self.errors.append(f'Workflow "{rule_name}": {message}')

    def to_dict(self) -> dict[str, Any]:
        return {"executed": self.executed, "failed": self.failed, "errors": list(self.errors)}


@dataclass(frozen=True)
class WorkflowExecutionResult:
    """Persisted audit record of one rule's run."""

    id: str
    workflow_rule_id: str
    trigger_type: str
    trigger_entity_id: str
    status: str
    error_message: str | None
    execution_log: dict[str, Any] | None
    executed_at: datetime | None
