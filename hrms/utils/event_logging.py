"""
Pipeline event logging utilities for HRMS (Tier 2 logging).

Appends export run events to a JSON Lines file (one JSON object per line)
so runs can be audited and filtered after the fact.

For detailed within-context logging (Tier 1), use hrms.utils.logger instead.

Usage:
    from hrms.utils.event_logging import log_export_event

    log_export_event(
        event_type="export_completed",
        source="cli",
        archive_path="/tmp/hrms_export/hrms_data_all_20251113184540.zip",
        error_count=0
    )
"""

import json
import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from hrms.utils.timestamp import now_exact

load_dotenv()
LOGS_PATH = Path(os.getenv("LOGS_PATH", "outs/logs"))
EXPORT_EVENTS_FILE = Path(os.getenv("EXPORT_EVENTS_FILE", str(LOGS_PATH / "export_events.log")))

EXPORT_EVENT_TYPES = {"export_started", "export_completed", "export_failed"}


def log_export_event(event_type: str, source: str, **extra_fields) -> None:
    """
    Log an event to the export event log.

    Args:
        event_type: One of EXPORT_EVENT_TYPES
        source: Event source (e.g., "cli", "export", "scheduler")
        **extra_fields: Additional event-specific fields (must be JSON serializable)

    Raises:
        ValueError: If event_type is unknown
    """
    if event_type not in EXPORT_EVENT_TYPES:
        raise ValueError(f"Unknown export event type: {event_type}")

    EXPORT_EVENTS_FILE.parent.mkdir(parents=True, exist_ok=True)

    event = {
        "timestamp": now_exact(),
        "event_type": event_type,
        "source": source,
        **extra_fields,
    }

    with open(EXPORT_EVENTS_FILE, "a", encoding="utf-8") as f:
        f.write(json.dumps(event) + "\n")


def get_recent_events(n: int = 10, event_type: Optional[str] = None) -> list[dict]:
    """
    Get the last n events from the export log, optionally filtered by type.

    Args:
        n: Number of recent events to return (default: 10)
        event_type: Filter to only events of this type (optional)

    Returns:
        List of event dicts (most recent last)
    """
    if not EXPORT_EVENTS_FILE.exists():
        return []

    events = []
    with open(EXPORT_EVENTS_FILE, "r", encoding="utf-8") as f:
        for line in f:
            try:
                events.append(json.loads(line.strip()))
            except json.JSONDecodeError:
                # Skip malformed lines
                continue

    if event_type:
        events = [e for e in events if e.get("event_type") == event_type]

    return events[-n:]
