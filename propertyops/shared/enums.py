"""Shared enumerations for propertyops.

Cross-cutting enums used by the workflow engine, persistence and API
(triggers, action kinds, condition operators, execution outcome) plus the
small set of business enums the engine writes (task type/status,
notification channel/type).
"""

from enum import Enum


class _ValuesMixin:
    """Mixin that adds a values() classmethod to str Enums."""

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid values as strings."""
        return [member.value for member in cls]


class WorkflowTrigger(_ValuesMixin, str, Enum):
    """Domain events that can activate workflow rules."""

    BOOKING_CREATED = "BOOKING_CREATED"
    BOOKING_UPDATED = "BOOKING_UPDATED"
    BOOKING_STATUS_CHANGED = "BOOKING_STATUS_CHANGED"
    BOOKING_CHECKOUT = "BOOKING_CHECKOUT"
    BOOKING_CHECKED_IN = "BOOKING_CHECKED_IN"
    TASK_CREATED = "TASK_CREATED"
    TASK_COMPLETED = "TASK_COMPLETED"
    TASK_OVERDUE = "TASK_OVERDUE"
    ISSUE_CREATED = "ISSUE_CREATED"
    ISSUE_STATUS_CHANGED = "ISSUE_STATUS_CHANGED"
    ISSUE_PRIORITY_CHANGED = "ISSUE_PRIORITY_CHANGED"
    EXPENSE_CREATED = "EXPENSE_CREATED"
    STATEMENT_FINALIZED = "STATEMENT_FINALIZED"
    SCHEDULED = "SCHEDULED"


class WorkflowActionType(_ValuesMixin, str, Enum):
    """Side-effecting action kinds a rule can run."""

    CREATE_TASK = "CREATE_TASK"
    ASSIGN_TASK = "ASSIGN_TASK"
    SEND_NOTIFICATION = "SEND_NOTIFICATION"
    SEND_EMAIL = "SEND_EMAIL"
    SEND_SMS = "SEND_SMS"
    SEND_WHATSAPP = "SEND_WHATSAPP"
    UPDATE_STATUS = "UPDATE_STATUS"
    UPDATE_PRIORITY = "UPDATE_PRIORITY"


class ConditionOperator(_ValuesMixin, str, Enum):
    """Comparison operators for rule conditions."""

    EQUALS = "EQUALS"
    NOT_EQUALS = "NOT_EQUALS"
    GREATER_THAN = "GREATER_THAN"
    LESS_THAN = "LESS_THAN"
    CONTAINS = "CONTAINS"
    IN = "IN"
    NOT_IN = "NOT_IN"


class WorkflowExecutionStatus(_ValuesMixin, str, Enum):
    """Outcome of one rule's run (classified after its action batch settles)."""

    SUCCESS = "SUCCESS"
    FAILED = "FAILED"
    PARTIAL = "PARTIAL"


class EntityType(_ValuesMixin, str, Enum):
    """Kind of entity a trigger context refers to."""

    BOOKING = "booking"
    TASK = "task"
    ISSUE = "issue"
    EXPENSE = "expense"
    STATEMENT = "statement"


class TaskType(_ValuesMixin, str, Enum):
    """Operational task kinds."""

    CLEANING = "CLEANING"
    MAINTENANCE = "MAINTENANCE"
    INSPECTION = "INSPECTION"
    CHECK_IN = "CHECK_IN"
    CHECK_OUT = "CHECK_OUT"
    OTHER = "OTHER"


class TaskStatus(_ValuesMixin, str, Enum):
    """Task lifecycle status."""

    PENDING = "PENDING"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


class NotificationChannel(_ValuesMixin, str, Enum):
    """Delivery channels of the notification service."""

    EMAIL = "EMAIL"
    SMS = "SMS"
    WHATSAPP = "WHATSAPP"


class NotificationType(_ValuesMixin, str, Enum):
    """Notification categories understood by the notification service."""

    BOOKING_CREATED = "BOOKING_CREATED"
    BOOKING_UPDATED = "BOOKING_UPDATED"
    TASK_ASSIGNED = "TASK_ASSIGNED"
    TASK_COMPLETED = "TASK_COMPLETED"
    ISSUE_CREATED = "ISSUE_CREATED"
    ISSUE_ASSIGNED = "ISSUE_ASSIGNED"
    ISSUE_STATUS_CHANGED = "ISSUE_STATUS_CHANGED"
    STATEMENT_READY = "STATEMENT_READY"
    OTHER = "OTHER"
