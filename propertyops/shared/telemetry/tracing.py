"""Tracing helpers for the workflow engine: the traced decorator and per-rule spans."""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from functools import wraps
from typing import Any

from opentelemetry import trace
from opentelemetry.trace import Status, StatusCode

AttributeValue = str | int | float | bool

_tracer = trace.get_tracer("propertyops.workflows")

# Only these kwarg names are copied onto spans (case-insensitive); entity
# snapshots and action params never reach the trace backend.
_SAFE_SPAN_ATTR_KEYS = frozenset({
    "id", "name", "count", "limit", "offset", "status", "type", "trigger",
    "entity_type", "entity_id", "rule_id", "property_id", "owner_id",
})


def _safe_kwarg_attributes(kwargs: dict[str, Any]) -> dict[str, str]:
    return {
        f"arg.{key}": str(value)
        for key, value in kwargs.items()
        if not key.startswith("_") and key.lower() in _SAFE_SPAN_ATTR_KEYS
    }


def _mark_failed(span: trace.Span, exc: BaseException) -> None:
    span.set_status(Status(StatusCode.ERROR, str(exc)))
    span.record_exception(exc)


@contextmanager
def _span(name: str, attributes: dict[str, AttributeValue]) -> Iterator[trace.Span]:
    # Status and exception recording happen here, once per span.
    with _tracer.start_as_current_span(
        name,
        attributes=attributes,
        record_exception=False,
        set_status_on_exception=False,
    ) as span:
        try:
            yield span
        except Exception as e:
            _mark_failed(span, e)
            raise
        span.set_status(Status(StatusCode.OK))


def traced(
    operation_name: str | None = None,
    attributes: dict[str, AttributeValue] | None = None,
) -> Callable:
    """Decorator that runs a function (sync or async) inside its own span.

    Args:
        operation_name: Span name (defaults to module.funcname).
        attributes: Static attributes set on every span.

    Allowlisted keyword arguments (ids, trigger, status, ...) are added as
    arg.<name> attributes.
    """

    def decorator(func: Callable) -> Callable:
        span_name = operation_name or f"{func.__module__}.{func.__name__}"

        def span_attributes(kwargs: dict[str, Any]) -> dict[str, AttributeValue]:
            return {**(attributes or {}), **_safe_kwarg_attributes(kwargs)}

        if asyncio.iscoroutinefunction(func):

            @wraps(func)
            async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
                with _span(span_name, span_attributes(kwargs)):
                    return await func(*args, **kwargs)

            return async_wrapper

        @wraps(func)
        def sync_wrapper(*args: Any, **kwargs: Any) -> Any:
            with _span(span_name, span_attributes(kwargs)):
                return func(*args, **kwargs)

        return sync_wrapper

    return decorator


@contextmanager
def rule_span(rule_id: str, rule_name: str, trigger: str) -> Iterator[trace.Span]:
    """Child span around one rule's run (actions plus the audit write)."""
    with _span(
        "workflow.rule",
        {
            "workflow.rule_id": rule_id,
            "workflow.rule_name": rule_name,
            "workflow.trigger": trigger,
        },
    ) as span:
        yield span


def add_span_attributes(**attributes: AttributeValue) -> None:
    """Add attributes to the current span (no-op when nothing is recording)."""
    span = trace.get_current_span()
    if span.is_recording():
        span.set_attributes(attributes)
