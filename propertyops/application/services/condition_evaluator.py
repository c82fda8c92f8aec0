"""Condition evaluator: pure predicate matching an entity snapshot against a rule's conditions.

Conditions combine with AND; there is no OR or nesting. Operator semantics
follow the stored rule format, which was authored against JSON snapshots:
equality is strict (no coercion across JSON kinds), ordering coerces both
sides to numbers, CONTAINS compares lower-cased string forms.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Mapping, Sequence
from datetime import date, datetime
from decimal import Decimal
from typing import Any

from propertyops.domain.entities.workflow import Condition
from propertyops.shared.enums import ConditionOperator


class _Missing:
    """Sentinel for a dot path that does not resolve."""

    _instance: _Missing | None = None

    def __new__(cls) -> _Missing:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING: Any = _Missing()

_NUMERIC_PREFIXES = {"0x": 16, "0o": 8, "0b": 2}


def resolve_path(data: Any, path: str) -> Any:
    """Walk a dot path ("guest.address.city") over a JSON-like snapshot.

    Mappings are indexed by key and sequences by integer segment. Any
    missing or non-traversable intermediate value yields MISSING; this
    never raises.
    """
    current = data
    for segment in path.split("."):
        if current is MISSING or current is None:
            return MISSING
        if isinstance(current, Mapping):
            current = current.get(segment, MISSING)
        elif isinstance(current, Sequence) and not isinstance(current, (str, bytes)):
            if not segment.isdigit() or int(segment) >= len(current):
                return MISSING
            current = current[int(segment)]
        else:
            return MISSING
    return current


def _json_kind(value: Any) -> str:
    if value is MISSING:
        return "undefined"
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float, Decimal)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, Mapping):
        return "object"
    if isinstance(value, (list, tuple)):
        return "array"
    return type(value).__name__


def strict_equals(left: Any, right: Any) -> bool:
    """Equality without coercion: both sides must share a JSON kind.

    Lists and objects compare by identity, so two separately built
    containers are never equal.
    """
    kind = _json_kind(left)
    if kind != _json_kind(right):
        return False
    if kind == "undefined":
        return True
    if kind in ("object", "array"):
        return left is right
    return left == right


def to_number(value: Any) -> float:
    """Coerce a snapshot value to a number; anything non-numeric becomes NaN.

    None, False and blank strings coerce to 0, True to 1; numeric strings
    (including 0x/0o/0b literals and Infinity) are parsed. Datetimes become
    epoch milliseconds.
    """
    if value is MISSING:
        return math.nan
    if value is None:
        return 0.0
    if isinstance(value, bool):
        return 1.0 if value else 0.0
    if isinstance(value, (int, float, Decimal)):
        return float(value)
    if isinstance(value, datetime):
        return value.timestamp() * 1000
    if isinstance(value, str):
        return _parse_numeric_string(value)
    if isinstance(value, (list, tuple)):
        return _parse_numeric_string(to_js_string(value))
    return math.nan


def _parse_numeric_string(text: str) -> float:
    text = text.strip()
    if not text:
        return 0.0
    if text in ("Infinity", "+Infinity"):
        return math.inf
    if text == "-Infinity":
        return -math.inf
    base = _NUMERIC_PREFIXES.get(text[:2].lower())
    if base is not None:
        try:
            return float(int(text[2:], base))
        except ValueError:
            return math.nan
    # float() also accepts "inf", "nan" and "1_000", which are not numbers here.
    if "_" in text or text.lstrip("+-")[:1].isalpha():
        return math.nan
    try:
        return float(text)
    except ValueError:
        return math.nan


def _number_to_js_string(value: float) -> str:
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    if value.is_integer():
        return str(int(value))
    return repr(value)


def to_js_string(value: Any) -> str:
    """String form used by CONTAINS ("null", "true", "1.5", "a,b", ...)."""
    if value is MISSING:
        return "undefined"
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, (float, Decimal)):
        return _number_to_js_string(float(value))
    if isinstance(value, str):
        return value
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Mapping):
        return "[object Object]"
    if isinstance(value, (list, tuple)):
        return ",".join(
            "" if item is None or item is MISSING else to_js_string(item)
            for item in value
        )
    return str(value)


def evaluate_condition(condition: Condition, entity_data: Any) -> bool:
    """Evaluate a single condition against the entity snapshot."""
    field_value = resolve_path(entity_data, condition.field)
    expected = condition.value

    match condition.operator:
        case ConditionOperator.EQUALS.value:
            return strict_equals(field_value, expected)
        case ConditionOperator.NOT_EQUALS.value:
            return not strict_equals(field_value, expected)
        case ConditionOperator.GREATER_THAN.value:
            return to_number(field_value) > to_number(expected)
        case ConditionOperator.LESS_THAN.value:
            return to_number(field_value) < to_number(expected)
        case ConditionOperator.CONTAINS.value:
            return to_js_string(expected).lower() in to_js_string(field_value).lower()
        case ConditionOperator.IN.value:
            return isinstance(expected, (list, tuple)) and _contains(expected, field_value)
        case ConditionOperator.NOT_IN.value:
            return isinstance(expected, (list, tuple)) and not _contains(
                expected, field_value
            )
        case _:
            return False


def _contains(candidates: Iterable[Any], value: Any) -> bool:
    return any(strict_equals(candidate, value) for candidate in candidates)


def matches(conditions: Iterable[Condition] | None, entity_data: Any) -> bool:
    """Return True when every condition holds (an empty list always matches)."""
    if not conditions:
        return True
    return all(evaluate_condition(condition, entity_data) for condition in conditions)
