"""Shared utilities: datetime and id generators."""

from propertyops.shared.utils.datetime import ensure_utc, parse_datetime, utc_now
from propertyops.shared.utils.generators import generate_cuid

__all__ = [
    "generate_cuid",
    "utc_now",
    "ensure_utc",
    "parse_datetime",
]
