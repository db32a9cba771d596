"""
Loguru sinks shared by every context.

Each run gets a DEBUG log file of its own and an INFO console stream. The
file opens with a short header recording how the run was started.
"""

import sys
from pathlib import Path

from dotenv import load_dotenv
from loguru import logger

load_dotenv()

LEVEL_COLORS = {
    "WARNING": "<yellow>",
    "ERROR": "<red>",
    "CRITICAL": "<bold><red>",
}

FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <7} | {message}"
CONSOLE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | <level>{level: <7}</level> | <level>{message}</level>"


def setup_logger(
    context_name: str,
    log_dir: Path,
    extra_provenance: dict = None,
    level_colors: dict = None,
) -> Path:
    """
    Replace all loguru sinks with a per-run file sink and a console sink.

    Args:
        context_name: Names the log file, <log_dir>/<context_name>.log
        log_dir: Run directory, created if missing
        extra_provenance: Extra header lines, written in insertion order
        level_colors: Console colors layered over LEVEL_COLORS

    Returns:
        Path to the log file
    """
    log_dir.mkdir(exist_ok=True, parents=True)
    log_file = log_dir / f"{context_name}.log"

    logger.remove()

    for level_name, color in {**LEVEL_COLORS, **(level_colors or {})}.items():
        logger.level(level_name, color=color)

    logger.add(log_file, format=FILE_FORMAT, level="DEBUG")
    logger.add(sys.stdout, format=CONSOLE_FORMAT, level="INFO", colorize=True)

    log_provenance(extra_provenance)

    return log_file


def log_provenance(extra_context: dict = None) -> None:
    """Write the run header: invocation, cwd, interpreter, then extra_context."""
    rule = "=" * 80
    header = {
        "Command": " ".join(sys.argv),
        "Working directory": Path.cwd(),
        "Python": sys.version.split()[0],
        **(extra_context or {}),
    }

    logger.info(rule)
    for key, value in header.items():
        logger.info(f"{key}: {value}")
    logger.info(rule)
