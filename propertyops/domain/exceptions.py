"""Domain exceptions for propertyops.

Defines domain-level exceptions independent of infrastructure concerns.
The presentation layer maps them to HTTP responses in exception handlers;
the workflow action executor turns them into failed action results.
"""

from typing import Any


class PropertyOpsException(Exception):
    """Base exception for all propertyops errors.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code.
        details: Additional error context (e.g. field, resource_id).
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Serialize for API error bodies."""
        return {
            "code": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class ValidationException(PropertyOpsException):
    """Raised when input validation fails (e.g. invalid format or range)."""

    def __init__(self, message: str, field: str | None = None) -> None:
        details = {"field": field} if field else {}
        super().__init__(message, "VALIDATION_ERROR", details)


class ResourceNotFoundException(PropertyOpsException):
    """Raised when a requested resource is not found."""

    def __init__(self, resource_type: str, resource_id: str) -> None:
        """Initialize with resource type and id.

        Args:
            resource_type: Type of resource (e.g. 'workflow_rule', 'task').
            resource_id: The ID that was not found.
        """
        super().__init__(
            f"{resource_type} not found: {resource_id}",
            "RESOURCE_NOT_FOUND",
            {"resource_type": resource_type, "resource_id": resource_id},
        )


class UnsupportedEntityTypeException(PropertyOpsException):
    """Raised when an operation is not available for a trigger's entity type."""

    def __init__(self, operation: str, entity_type: str) -> None:
        super().__init__(
            f"Cannot {operation} for {entity_type}",
            "UNSUPPORTED_ENTITY_TYPE",
            {"operation": operation, "entity_type": entity_type},
        )


class SqlNotConfiguredException(PropertyOpsException):
    """Raised when an operation requires the SQL database but it is not configured."""

    def __init__(self) -> None:
        super().__init__(
            message="This operation requires a SQL database that is not configured.",
            error_code="SERVICE_UNAVAILABLE",
        )
