"""
Zip archive writing for exports.

Archive layout:
    <prefix>_<range>_<export time>.zip
    ├── <file id>                       one member per copied attachment
    ├── metadata.json                   entry metadata, in collection order
    └── metadata_fields_types.json      [{"name": ..., "type": ...}, ...]

<range> is "all" or "<start>_<end>"; all timestamps use the compact
%Y%m%d%H%M%S format and the export time is UTC.
"""

import json
import os
import tempfile
import zipfile
from datetime import date, datetime
from pathlib import Path
from typing import Callable, Optional

from dotenv import load_dotenv

from hrms.contexts.export.data_structures import ArchiveResult, ExportEntry, ExportSet
from hrms.contexts.export.exceptions import FatalArchiveError, PerFileArchiveError
from hrms.contexts.export.logger import _log_debug, _log_info, _log_warning
from hrms.contexts.records.data_structures import TimeRange
from hrms.utils.timestamp import compact, utc_now

load_dotenv()
EXPORT_TMP_PATH = Path(
    os.getenv("EXPORT_TMP_PATH", str(Path(tempfile.gettempdir()) / "hrms_export"))
)

METADATA_MEMBER = "metadata.json"
FIELD_TYPES_MEMBER = "metadata_fields_types.json"


def archive_name(prefix: str, time_range: Optional[TimeRange], export_time: datetime) -> str:
    """
    Deterministic archive file name.

    Two exports of the same range within the same second get the same name.
    """
    if time_range is None:
        range_token = "all"
    else:
        range_token = f"{compact(time_range.start)}_{compact(time_range.end)}"
    return f"{prefix}_{range_token}_{compact(export_time)}.zip"


def _json_default(value):
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


class Archiver:
    """
    Writes an ExportSet into a single zip archive.

    Attachments that can't be copied are reported in the result and skipped;
    the archive is always finalized.
    """

    def __init__(
        self,
        output_dir: Path = None,
        archive_prefix: str = "hrms_data",
        clock: Callable[[], datetime] = utc_now,
    ):
        """
        Args:
            output_dir: Directory for archives. Defaults to EXPORT_TMP_PATH from environment
            archive_prefix: First component of the archive file name
            clock: Returns the current UTC time (export timestamp)
        """
        self.output_dir = Path(output_dir) if output_dir is not None else EXPORT_TMP_PATH
        self.archive_prefix = archive_prefix
        self.clock = clock

    def archive(
        self, export_set: ExportSet, time_range: Optional[TimeRange] = None
    ) -> ArchiveResult:
        """
        Write all entries and the two metadata documents into a new archive.

        Args:
            export_set: Entries and schema produced by the collector
            time_range: Range the set was collected for (only used for naming)

        Returns:
            ArchiveResult with the archive path and one error per failed copy

        Raises:
            FatalArchiveError: If the output directory or archive can't be created or written
        """
        archive_path = self.output_dir / archive_name(
            self.archive_prefix, time_range, self.clock()
        )
        errors = []

        try:
            self.output_dir.mkdir(parents=True, exist_ok=True)
            zip_file = zipfile.ZipFile(archive_path, "w", compression=zipfile.ZIP_DEFLATED)
        except OSError as e:
            raise FatalArchiveError("Cannot create archive", archive_path, e) from e

        with zip_file:
            for entry in export_set.entries:
                try:
                    self._add_attachment(zip_file, entry)
                except PerFileArchiveError as e:
                    _log_warning(f"{e} ({e.reason})")
                    errors.append(str(e))

            metadata = [entry.to_metadata() for entry in export_set.entries]
            field_types = [field.to_dict() for field in export_set.schema]
            try:
                zip_file.writestr(METADATA_MEMBER, json.dumps(metadata, default=_json_default))
                zip_file.writestr(FIELD_TYPES_MEMBER, json.dumps(field_types))
            except OSError as e:
                raise FatalArchiveError("Cannot write archive metadata", archive_path, e) from e

        _log_info(f"Data saved to {archive_path}")
        return ArchiveResult(archive_path=archive_path, errors=errors)

    @staticmethod
    def _add_attachment(zip_file: zipfile.ZipFile, entry: ExportEntry) -> None:
        """
        Copy one attachment into the archive under its id.

        Raises:
            PerFileArchiveError: If the source is missing, not a file, or unreadable
            FatalArchiveError: If the archive itself can't be written
        """
        source = Path(entry.path)
        if not source.is_file():
            raise PerFileArchiveError(entry.path, reason="not found or not a regular file")

        # A failed read must not leave a partial member in the archive
        try:
            data = source.read_bytes()
        except OSError as e:
            raise PerFileArchiveError(entry.path, original_error=e) from e

        try:
            zip_file.writestr(entry.id, data)
        except OSError as e:
            raise FatalArchiveError("Cannot write archive member", Path(zip_file.filename), e) from e

        _log_debug(f"Archived {entry.path} as {entry.id}")
