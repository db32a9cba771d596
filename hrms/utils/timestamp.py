"""Timestamp formatting utilities."""

from datetime import datetime, timezone

# Compact numeric format used in archive file names (e.g., 20251113184540)
COMPACT_FORMAT = "%Y%m%d%H%M%S"


def now() -> str:
    """Current local time for directory names (e.g., "20251113_184540")."""
    return datetime.now().strftime("%Y%m%d_%H%M%S")


def now_exact() -> str:
    """Current local time as ISO 8601 with microseconds."""
    return datetime.now().isoformat()


def utc_now() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


def compact(dt: datetime) -> str:
    """
    Format a datetime as a compact numeric string.

    Args:
        dt: datetime to format (timezone is not converted)

    Returns:
        String like "20251113184540"
    """
    return dt.strftime(COMPACT_FORMAT)


def format_timestamp(iso_timestamp: str, relative: bool = False) -> str:
    """
    Format ISO 8601 timestamp to readable format.

    Args:
        iso_timestamp: ISO 8601 formatted timestamp string
        relative: If True, show relative time (e.g., "2h ago")
                 If False, show absolute time (e.g., "2025-11-13 18:45:40")

    Returns:
        Human-readable timestamp

    Examples:
        format_timestamp("2025-11-13T18:45:40.572549")
        # "2025-11-13 18:45:40"

        format_timestamp("2025-11-13T18:45:40.572549", relative=True)
        # "2h ago"
    """
    try:
        dt = datetime.fromisoformat(iso_timestamp)

        if relative:
            return _format_relative_time(dt)
        else:
            return dt.strftime("%Y-%m-%d %H:%M:%S")

    except (ValueError, TypeError):
        # Return original if parsing fails
        return iso_timestamp


def _format_relative_time(dt: datetime) -> str:
    """
    Format datetime as relative time in compact format (e.g., "2h ago").

    Args:
        dt: naive local datetime to format

    Returns:
        Compact relative time string
    """
    diff = datetime.now() - dt

    if diff.total_seconds() < 0:
        diff = -diff
        suffix = "from now"
    else:
        suffix = "ago"

    seconds = int(diff.total_seconds())
    minutes = seconds // 60
    hours = minutes // 60

    if seconds < 60:
        return f"{seconds}s {suffix}"
    elif minutes < 60:
        return f"{minutes}m {suffix}"
    elif hours < 24:
        return f"{hours}h {suffix}"
    else:
        return f"{diff.days}d {suffix}"
