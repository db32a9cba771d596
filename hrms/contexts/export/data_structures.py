"""Data structures passed between the collector and the archiver."""

from collections import Counter
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple


@dataclass(frozen=True)
class FieldType:
    """One projection field and its declared scalar type."""

    name: str
    type: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "type": self.type}


@dataclass(frozen=True)
class ExportEntry:
    """
    One attachment selected for export.

    Attributes:
        id: Storage file id, used as the archive member name
        name: Display filename with spaces replaced by underscores
        content_type: MIME type of the file
        path: Location of the file content on disk (not written to metadata.json)
        metadata: Owner projection, as {"person": {field: value, ...}}
    """

    id: str
    name: str
    content_type: Optional[str]
    path: str
    metadata: Dict[str, Dict[str, Any]]

    def to_metadata(self) -> Dict[str, Any]:
        """Public view of the entry for metadata.json (path stripped)."""
        return {
            "id": self.id,
            "name": self.name,
            "content_type": self.content_type,
            "metadata": self.metadata,
        }


@dataclass(frozen=True)
class ExportSet:
    """Ordered entries of one export run plus the shared schema descriptor."""

    entries: Tuple[ExportEntry, ...]
    schema: Tuple[FieldType, ...]

    def __post_init__(self):
        counts = Counter(entry.id for entry in self.entries)
        duplicates = sorted(entry_id for entry_id, count in counts.items() if count > 1)
        if duplicates:
            raise ValueError(f"Duplicate attachment ids in export set: {', '.join(duplicates)}")

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self):
        return iter(self.entries)


@dataclass
class ArchiveResult:
    """Archive written by the archiver plus any per-file copy failures."""

    archive_path: Path
    errors: List[str] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return not self.errors
