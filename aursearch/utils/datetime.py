"""Time formatting for package timestamps."""

from __future__ import annotations

from datetime import datetime, timezone

DISPLAY_FORMAT = "%Y-%m-%d %H:%M"


def format_timestamp(value: int | None) -> str:
    """Render a POSIX timestamp as ``YYYY-MM-DD HH:MM`` in UTC."""

    if value is None:
        return "unknown"
    try:
        moment = datetime.fromtimestamp(value, tz=timezone.utc)
    except (OverflowError, OSError, ValueError):
        return "unknown"
    return moment.strftime(DISPLAY_FORMAT)


__all__ = ["format_timestamp"]
