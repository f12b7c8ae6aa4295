"""Timestamp helpers shared by the server and the sync client.

Timestamps are stored and exchanged as ISO-8601 UTC strings with millisecond
precision and a ``Z`` suffix, e.g. ``2024-05-01T12:00:00.000Z``.
"""

from datetime import datetime, timezone
from typing import Any


def now_iso() -> str:
    """Current UTC time in the stored timestamp format."""
    return to_iso(datetime.now(timezone.utc))


def to_iso(value: Any) -> str:
    """Render a stored timestamp (ISO string or Firestore datetime) as a string."""
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")
    if isinstance(value, str):
        return value
    return ""


def timestamp_sort_key(value: Any) -> datetime:
    """Sort key for ISO timestamps; unparsable values sort as oldest."""
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except (AttributeError, ValueError):
        return datetime.min.replace(tzinfo=timezone.utc)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed
