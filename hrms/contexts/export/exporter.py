"""
Export orchestration.

Runs the collector and archiver as one export with Tier 1 logging (detailed
session log) and Tier 2 logging (export events).
"""

import os
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

from hrms.contexts.export.archiver import Archiver
from hrms.contexts.export.collector import Collector
from hrms.contexts.export.config import ExportConfig, load_export_config
from hrms.contexts.export.exceptions import ExportError
from hrms.contexts.export.logger import (
    _log_error,
    describe_time_range,
    log_export_result,
    log_export_start,
    setup_export_logger,
)
from hrms.contexts.records.data_structures import TimeRange
from hrms.contexts.records.record_source import RecordSource
from hrms.utils.event_logging import log_export_event
from hrms.utils.timestamp import now

load_dotenv()
LOGS_PATH = Path(os.getenv("LOGS_PATH", "outs/logs"))


@dataclass
class ExportResult:
    """Result from export_attachments() orchestration function."""

    archive_path: Path
    errors: List[str] = field(default_factory=list)
    entry_count: int = 0
    time_s: float = 0.0
    log_dir: Optional[Path] = None

    @property
    def success(self) -> bool:
        """Archive produced and every attachment copied."""
        return not self.errors

    @property
    def partial(self) -> bool:
        """Archive produced but some attachments are missing from it."""
        return bool(self.errors)


def export_attachments(
    source: RecordSource,
    time_range: Optional[TimeRange] = None,
    output_dir: Path = None,
    config: ExportConfig = None,
    logs_path: Path = None,
    event_source: str = "export",
) -> ExportResult:
    """
    Export CV attachments into a zip archive with logging and event tracking.

    Args:
        source: Record source to read attachments and owners from
        time_range: Inclusive creation-time window (None for all time)
        output_dir: Archive directory. Defaults to EXPORT_TMP_PATH from environment
        config: Export config. Defaults to load_export_config()
        logs_path: Parent directory for the session log. Defaults to LOGS_PATH
        event_source: Source recorded in export events (e.g., "cli")

    Returns:
        ExportResult; check .success / .partial

    Raises:
        EmptyResultError: If no attachments matched (no archive written)
        FatalArchiveError: If the archive couldn't be created
        UnknownProjectionFieldError: If the projection doesn't fit the owner schema
        InvalidExportConfigError: If config is omitted and the default config is malformed

    Every ExportError raised after the start event is also recorded as export_failed.
    """
    config = config or load_export_config()
    logs_path = logs_path if logs_path is not None else LOGS_PATH
    range_label = describe_time_range(time_range)

    # 1. Setup logging (Tier 1: detailed execution logs)
    log_dir = logs_path / f"export_{now()}"
    log_file = setup_export_logger(log_dir, range_label)
    log_export_start(range_label, log_file)
    log_export_event("export_started", source=event_source, time_range=range_label)

    # 2. Collect then archive
    start_time = time.time()
    try:
        export_set = Collector(source, config).collect(time_range)
        archive_result = Archiver(output_dir, config.archive_prefix).archive(
            export_set, time_range
        )
    except ExportError as e:
        elapsed = time.time() - start_time
        _log_error(f"Export failed: {e}")
        log_export_event(
            "export_failed",
            source=event_source,
            time_range=range_label,
            error=str(e),
            time_s=elapsed,
        )
        raise
    elapsed = time.time() - start_time

    # 3. Build result
    result = ExportResult(
        archive_path=archive_result.archive_path,
        errors=archive_result.errors,
        entry_count=len(export_set),
        time_s=elapsed,
        log_dir=log_dir,
    )

    # 4. Record outcome (Tier 2: export events)
    log_export_event(
        "export_completed",
        source=event_source,
        time_range=range_label,
        archive_path=str(result.archive_path),
        entry_count=result.entry_count,
        error_count=len(result.errors),
        errors=result.errors,
        time_s=elapsed,
    )
    log_export_result(result)

    return result
