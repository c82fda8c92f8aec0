"""Shared telemetry: logging setup, OpenTelemetry config and tracing helpers."""

from propertyops.shared.telemetry.logging import get_logger, setup_logging
from propertyops.shared.telemetry.telemetry import (
    TelemetryConfig,
    get_telemetry,
    set_telemetry,
)
from propertyops.shared.telemetry.tracing import (
    add_span_attributes,
    rule_span,
    traced,
)

__all__ = [
    "setup_logging",
    "get_logger",
    "TelemetryConfig",
    "get_telemetry",
    "set_telemetry",
    "traced",
    "rule_span",
    "add_span_attributes",
]
