"""Custom exceptions for the export context."""

from pathlib import Path
from typing import Iterable, Optional


class ExportError(Exception):
    """Base class for errors raised while exporting attachments."""


class EmptyResultError(ExportError):
    """
    Exception raised when no attachments match the filter and time range.

    Attributes:
        time_range: The TimeRange that was queried (None for all time)
    """

    def __init__(self, time_range=None):
        self.time_range = time_range
        if time_range is None:
            message = "no attachments found"
        else:
            message = f"no attachments found between {time_range.start} and {time_range.end}"
        super().__init__(message)


class PerFileArchiveError(ExportError):
    """
    Exception raised when one attachment cannot be copied into the archive.

    Caught by the archiver and recorded; never aborts an export.

    Attributes:
        path: Source path of the attachment
        reason: Short description of what went wrong
        original_error: Underlying OS error, if any
    """

    def __init__(
        self,
        path: str,
        reason: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ):
        self.path = path
        self.original_error = original_error
        self.reason = reason or (str(original_error) if original_error else None)
        super().__init__(f"failed to archive attachment {path}")


class FatalArchiveError(ExportError):
    """
    Exception raised when the archive itself cannot be created or written.

    Attributes:
        message: Error description
        archive_path: Path of the archive that was being written
        original_error: The original OS error
    """

    def __init__(
        self,
        message: str,
        archive_path: Optional[Path] = None,
        original_error: Optional[Exception] = None,
    ):
        self.message = message
        self.archive_path = archive_path
        self.original_error = original_error

        parts = [message]
        if archive_path:
            parts.append(f"Archive: {archive_path}")
        if original_error:
            parts.append(f"Original error: {original_error}")

        super().__init__("\n".join(parts))


class UnknownProjectionFieldError(ExportError, ValueError):
    """
    Exception raised when a projection field is not part of the owner schema.

    Attributes:
        field_name: The unknown field
        known_fields: Fields the record source does declare
    """

    def __init__(self, field_name: str, known_fields: Iterable[str] = ()):
        self.field_name = field_name
        self.known_fields = sorted(known_fields)
        super().__init__(
            f"Projection field '{field_name}' does not exist on the person schema. "
            f"Known fields: {', '.join(self.known_fields)}"
        )


class InvalidExportConfigError(ExportError, ValueError):
    """
    Exception raised when the export config YAML is missing required keys
    or has a malformed projection list.
    """

    pass
