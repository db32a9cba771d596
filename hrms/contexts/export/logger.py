"""
Export context logger.

Provides logging interface for export context with automatic [export] prefix.
All export modules should import from this module, not from utils.logger directly.
"""

from pathlib import Path

from loguru import logger

from hrms.utils.logger import setup_logger as _setup_logger

CONTEXT_PREFIX = "[export]"


def setup_export_logger(log_dir: Path, time_range_label: str = "all") -> Path:
    """
    Setup logger for export context.

    Args:
        log_dir: Directory for this export session
        time_range_label: Human-readable time range for provenance

    Returns:
        Path to log file
    """
    return _setup_logger(
        context_name="export",
        log_dir=log_dir,
        extra_provenance={"Time range": time_range_label},
    )


# Wrapper functions with automatic [export] prefix


def _log_info(message: str) -> None:
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_success(message: str) -> None:
    logger.success(f"{CONTEXT_PREFIX} {message}")


def _log_error(message: str) -> None:
    logger.error(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    logger.debug(f"{CONTEXT_PREFIX} {message}")


# High-level export logging helpers


def describe_time_range(time_range) -> str:
    """Label for a TimeRange in logs and events ("all" when absent)."""
    if time_range is None:
        return "all"
    return f"{time_range.start.isoformat()}..{time_range.end.isoformat()}"


def log_export_start(time_range_label: str, log_file: Path) -> None:
    _log_info(f"Starting export ({time_range_label})")
    _log_info(f"Log file: {log_file}")


def log_export_result(result) -> None:
    """
    Log the outcome of a finished export.

    Args:
        result: ExportResult from export_attachments()
    """
    if result.success:
        _log_success(
            f"Exported {result.entry_count} attachment(s) ({result.time_s:.2f}s)"
        )
    else:
        _log_warning(
            f"Exported with {len(result.errors)} of {result.entry_count} attachment(s) "
            f"missing ({result.time_s:.2f}s)"
        )
        for error in result.errors:
            _log_warning(f"  {error}")
    _log_info(f"  Archive: {result.archive_path}")
