"""Scope filter: property/owner allowlists on a workflow rule."""

from __future__ import annotations

from collections.abc import Collection

from propertyops.domain.entities.workflow import WorkflowRuleEntity


def _allows(allowlist: Collection[str] | None, value: str | None) -> bool:
    """An empty or absent allowlist is unrestricted; otherwise value must be listed."""
    if not allowlist:
        return True
    return value is not None and value in allowlist


def in_scope(
    rule: WorkflowRuleEntity,
    property_id: str | None = None,
    owner_id: str | None = None,
) -> bool:
    """Return whether the rule applies to the trigger's property and owner.

    Both allowlists must admit the context (AND). A rule restricted to
    properties never matches a context without a property_id.
    """
    if not rule.is_scoped:
        return True
    return _allows(rule.property_ids, property_id) and _allows(rule.owner_ids, owner_id)
