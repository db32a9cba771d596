"""
Attachment collection for exports.

Selects CV attachments from a record source, joins each one to its owner and
builds the ExportSet the archiver consumes.
"""

from typing import Optional, Sequence, Tuple

from hrms.contexts.export.config import ExportConfig, load_export_config
from hrms.contexts.export.data_structures import ExportEntry, ExportSet, FieldType
from hrms.contexts.export.exceptions import EmptyResultError, UnknownProjectionFieldError
from hrms.contexts.export.logger import _log_debug
from hrms.contexts.records.data_structures import AttachmentRecord, TimeRange
from hrms.contexts.records.record_source import RecordSource


class Collector:
    """
    Builds export sets from a record source.

    Holds no state between collect() calls.

    Example:
        >>> collector = Collector(RecordDatabase(db_path))
        >>> export_set = collector.collect(TimeRange(start, end))
    """

    def __init__(self, source: RecordSource, config: ExportConfig = None):
        self.source = source
        self.config = config or load_export_config()

    def build_schema(self) -> Tuple[FieldType, ...]:
        """
        Schema descriptor for the projection, in projection order.

        Declared types come from the config; a field declared without a type
        takes the record source's type.

        Raises:
            UnknownProjectionFieldError: If a projection field is not on the owner schema
        """
        owner_types = self.source.owner_field_types()

        schema = []
        for field in self.config.projection:
            if field.name not in owner_types:
                raise UnknownProjectionFieldError(field.name, owner_types)
            schema.append(FieldType(name=field.name, type=field.type or owner_types[field.name]))
        return tuple(schema)

    def collect(self, time_range: Optional[TimeRange] = None) -> ExportSet:
        """
        Collect every matching attachment with its owner projection.

        Args:
            time_range: Inclusive creation-time window. None means all time.

        Returns:
            ExportSet ordered by attachment creation time

        Raises:
            UnknownProjectionFieldError: If the projection doesn't fit the owner schema
            EmptyResultError: If no attachment matches
        """
        schema = self.build_schema()
        field_names = [field.name for field in schema]

        if time_range is not None:
            _log_debug(f"Collecting data for time range: {time_range.start}..{time_range.end}")
        else:
            _log_debug("Collecting all data (time range not specified)")

        records = self.source.find_attachments(self.config.name_filter, time_range)
        records = sorted(records, key=lambda record: record.created_at)

        entries = tuple(self._build_entry(record, field_names) for record in records)
        _log_debug(f"Found {len(entries)} attachments")

        if not entries:
            raise EmptyResultError(time_range)

        return ExportSet(entries=entries, schema=schema)

    def _build_entry(self, record: AttachmentRecord, field_names: Sequence[str]) -> ExportEntry:
        owner_fields = self.source.read_owner_fields(record.owner_id, field_names)
        return ExportEntry(
            id=record.file_id,
            name=record.filename.replace(" ", "_"),
            content_type=record.content_type,
            # Must match the layout of the storage backend the files live in
            path=f"{record.storage_directory}/{record.file_id}",
            metadata={"person": {name: owner_fields[name] for name in field_names}},
        )
