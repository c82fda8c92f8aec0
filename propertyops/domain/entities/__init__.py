"""Domain entities."""

from propertyops.domain.entities.workflow import Condition, WorkflowRuleEntity

__all__ = ["Condition", "WorkflowRuleEntity"]
