"""
Records Context

Responsibilities:
- Represents people and their stored attachments
- Answers read-only queries for attachments and owner fields
- Reports declared field types of the person schema

Owns: Record data structures, the RecordSource interface, the SQLite record database
Never: Validates or mutates records on behalf of exporters
"""

from hrms.contexts.records.data_structures import AttachmentRecord, PersonRecord, TimeRange
from hrms.contexts.records.record_database import RecordDatabase
from hrms.contexts.records.record_source import RecordSource

__all__ = [
    "AttachmentRecord",
    "PersonRecord",
    "TimeRange",
    "RecordSource",
    "RecordDatabase",
]
