"""Input parsing shared by the booking and association routes."""

from __future__ import annotations

import re
from datetime import datetime, timedelta
from typing import Any, Optional, Tuple

from .errors import error_response

# 24-hour HH:MM, zero padded
TIME_RE = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)$")


def parse_id(value: Any, entity: str) -> int:
    """Return ``value`` as an integer id or raise 400 ``Invalid <entity> ID format``."""
    if isinstance(value, bool):
        raise error_response(f"Invalid {entity} ID format")
    if isinstance(value, int):
        if value > 0:
            return value
        raise error_response(f"Invalid {entity} ID format")
    if isinstance(value, str) and value.strip().isdigit():
        parsed = int(value.strip())
        if parsed > 0:
            return parsed
    raise error_response(f"Invalid {entity} ID format")


def is_valid_time(value: Any) -> bool:
    return isinstance(value, str) and bool(TIME_RE.match(value))


def parse_date(value: Any) -> Optional[datetime]:
    """Parse an ISO date or datetime string. Returns ``None`` when invalid."""
    if isinstance(value, datetime):
        return value
    if not isinstance(value, str) or not value.strip():
        return None
    raw = value.strip()
    if raw.endswith("Z"):
        raw = raw[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(raw)
    except ValueError:
        return None
    if parsed.tzinfo is not None:
        # Stored timestamps are naive UTC
        parsed = (parsed - parsed.utcoffset()).replace(tzinfo=None)
    return parsed


def day_bounds(moment: datetime) -> Tuple[datetime, datetime]:
    """Return ``[start of day, start of next day)`` for ``moment``."""
    start = moment.replace(hour=0, minute=0, second=0, microsecond=0)
    return start, start + timedelta(days=1)
