#!/usr/bin/env python3
"""
Command-line interface for exporting CV attachments.

Bundles CV attachments and their owners' profile fields into a single zip
archive, optionally limited to attachments uploaded within a time range.

Commands:
    run     - Export attachments (all, or within --start/--end)
    history - Show recent export events

Exit codes for run:
    0 - archive written, every attachment copied
    1 - no archive (nothing matched, or the archive couldn't be created)
    2 - archive written, some attachments missing
"""

import os
from datetime import datetime
from pathlib import Path
from typing import Optional

import typer
from dotenv import load_dotenv

from hrms.contexts.export import (
    EmptyResultError,
    ExportError,
    InvalidExportConfigError,
    export_attachments,
    load_export_config,
)
from hrms.contexts.records import RecordDatabase, TimeRange
from hrms.utils.event_logging import get_recent_events
from hrms.utils.timestamp import format_timestamp

load_dotenv()
HRMS_DATABASE = Path(os.getenv("HRMS_DATABASE", "data/hrms.db"))

DATETIME_FORMATS = ["%Y-%m-%d", "%Y-%m-%dT%H:%M:%S", "%Y-%m-%d %H:%M:%S"]

app = typer.Typer(
    add_completion=False,
    help="Export CV attachments into a zip archive",
    invoke_without_command=True,
)


@app.callback()
def main(ctx: typer.Context):
    """Show help by default when no command is provided."""
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


@app.command("run")
def run_command(
    start: Optional[datetime] = typer.Option(
        None, "--start", "-s", formats=DATETIME_FORMATS, help="Earliest upload time (inclusive)"
    ),
    end: Optional[datetime] = typer.Option(
        None, "--end", "-e", formats=DATETIME_FORMATS, help="Latest upload time (inclusive)"
    ),
    database: Path = typer.Option(HRMS_DATABASE, "--database", "-d", help="Record database"),
    output_dir: Optional[Path] = typer.Option(
        None, "--output-dir", "-o", help="Archive directory (default: EXPORT_TMP_PATH)"
    ),
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Export config YAML"),
):
    """
    Export CV attachments.

    Examples:\n

        $ export_attachments.py run

        $ export_attachments.py run --start 2025-01-01 --end 2025-03-31
    """
    if (start is None) != (end is None):
        typer.secho("--start and --end must be given together", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    time_range = TimeRange(start, end) if start is not None else None

    try:
        export_config = load_export_config(config)
        source = RecordDatabase(database)
    except (FileNotFoundError, InvalidExportConfigError) as e:
        typer.secho(f"✗ {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    try:
        result = export_attachments(
            source,
            time_range=time_range,
            output_dir=output_dir,
            config=export_config,
            event_source="cli",
        )
    except EmptyResultError as e:
        typer.secho(f"✗ {e}", fg=typer.colors.YELLOW, err=True)
        raise typer.Exit(code=1)
    except ExportError as e:
        typer.secho(f"✗ {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)
    finally:
        source.close()

    if result.success:
        typer.secho(f"✓ {result.archive_path}", fg=typer.colors.GREEN)
        return

    typer.secho(f"⚠ {result.archive_path}", fg=typer.colors.YELLOW)
    typer.echo(f"  {len(result.errors)} of {result.entry_count} attachment(s) not archived:")
    for error in result.errors:
        typer.echo(f"    {error}")
    raise typer.Exit(code=2)


@app.command("history")
def history_command(
    n: int = typer.Option(10, "--number", "-n", help="Number of events to show"),
    event_type: Optional[str] = typer.Option(
        None, "--type", "-t", help="Only show events of this type"
    ),
):
    """Show recent export events."""
    events = get_recent_events(n, event_type=event_type)

    if not events:
        typer.echo("No export events recorded")
        return

    for event in events:
        when = format_timestamp(event["timestamp"], relative=True)
        line = f"{when:>10}  {event['event_type']:<17} {event.get('time_range', '')}"
        if event.get("archive_path"):
            line += f"  → {event['archive_path']} ({event.get('error_count', 0)} errors)"
        elif event.get("error"):
            line += f"  ({event['error']})"
        typer.echo(line)


if __name__ == "__main__":
    app()
