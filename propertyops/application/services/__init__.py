"""Pure application services: condition evaluation and scope filtering."""

from propertyops.application.services.condition_evaluator import (
    MISSING,
    evaluate_condition,
    matches,
    resolve_path,
)
from propertyops.application.services.scope_filter import in_scope

__all__ = [
    "MISSING",
    "evaluate_condition",
    "in_scope",
    "matches",
    "resolve_path",
]
