"""
Export Context

Responsibilities:
- Selects CV attachments (optionally within a creation-time window)
- Joins each attachment to a fixed projection of its owner's fields
- Writes attachments plus metadata.json and metadata_fields_types.json into one zip
- Reports per-file copy failures without aborting the export

Owns: Export configuration, the archive format, export orchestration
Never: Validates or mutates source records
"""

from hrms.contexts.export.archiver import Archiver, archive_name
from hrms.contexts.export.collector import Collector
from hrms.contexts.export.config import ExportConfig, load_export_config
from hrms.contexts.export.data_structures import (
    ArchiveResult,
    ExportEntry,
    ExportSet,
    FieldType,
)
from hrms.contexts.export.exceptions import (
    EmptyResultError,
    ExportError,
    FatalArchiveError,
    InvalidExportConfigError,
    PerFileArchiveError,
    UnknownProjectionFieldError,
)
from hrms.contexts.export.exporter import ExportResult, export_attachments

__all__ = [
    # Orchestration
    "export_attachments",
    "ExportResult",
    # Components
    "Collector",
    "Archiver",
    "archive_name",
    # Configuration
    "ExportConfig",
    "load_export_config",
    # Data structures
    "ArchiveResult",
    "ExportEntry",
    "ExportSet",
    "FieldType",
    # Errors
    "ExportError",
    "EmptyResultError",
    "PerFileArchiveError",
    "FatalArchiveError",
    "UnknownProjectionFieldError",
    "InvalidExportConfigError",
]
