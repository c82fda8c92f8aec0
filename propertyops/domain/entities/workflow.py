"""Workflow rule domain entity.

A workflow rule is a stored automation definition: a trigger, an AND-list
of conditions over the triggering entity's snapshot, an ordered list of
actions, optional property/owner allowlists and a priority.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


@dataclass(frozen=True)
class Condition:
    """One comparison test against a dot-path field of the entity snapshot.

    operator is kept as a plain string so legacy rows with an unknown
    operator still load; the evaluator treats those as non-matching.
    """

    field: str
    operator: str
    value: Any = None

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> Condition:
        return cls(
            field=str(raw.get("field") or ""),
            operator=str(raw.get("operator") or ""),
            value=raw.get("value"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {"field": self.field, "operator": self.operator, "value": self.value}


@dataclass
class WorkflowRuleEntity:
    """Domain entity for a workflow rule (trigger + conditions + actions + scope)."""

    id: str
    name: str
    trigger: str
    actions: list[dict[str, Any]]
    conditions: list[Condition] = field(default_factory=list)
    property_ids: list[str] = field(default_factory=list)
    owner_ids: list[str] = field(default_factory=list)
    priority: int = 0
    is_active: bool = True
    description: str | None = None
    schedule_cron: str | None = None
    execution_count: int = 0
    last_executed_at: datetime | None = None

    @property
    def is_scoped(self) -> bool:
        """Return whether any property or owner allowlist restricts this rule."""
        return bool(self.property_ids) or bool(self.owner_ids)

    def can_trigger_on(self, trigger: str) -> bool:
        """Return whether this rule is active and listens to the trigger."""
        return self.is_active and self.trigger == trigger
