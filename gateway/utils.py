"""Utility helper functions for the gateway."""

import uuid
from datetime import datetime, timezone
from typing import Optional

from common.constants import DEFAULT_STORAGE_DURATION_SECONDS


def generate_uuid() -> str:
    """
    Generate a new UUID4 string.

    Returns:
        UUID4 string
    """
    return str(uuid.uuid4())


def get_current_timestamp() -> str:
    """
    Get current UTC timestamp in ISO format.

    Returns:
        Current timestamp as ISO format string
    """
    return datetime.now(timezone.utc).isoformat()


def parse_timestamp(value: str) -> Optional[datetime]:
    """
    Parse an ISO-8601 timestamp, accepting a trailing 'Z'.

    Returns:
        Timezone-aware datetime (UTC assumed when naive), or None if unparseable
    """
    try:
        parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    except (AttributeError, ValueError):
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def seconds_until(keep_until: str, now: Optional[datetime] = None) -> int:
    """
    Number of whole seconds from now until keep_until.

    Unparseable dates fall back to the default storage duration; dates in the
    past yield 0.
    """
    deadline = parse_timestamp(keep_until)
    if deadline is None:
        return DEFAULT_STORAGE_DURATION_SECONDS

    now = now or datetime.now(timezone.utc)
    return max(0, int((deadline - now).total_seconds()))
