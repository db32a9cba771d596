"""Read-only interface exporters use to reach stored records."""

from typing import Any, Dict, List, Optional, Protocol, Sequence

from hrms.contexts.records.data_structures import AttachmentRecord, TimeRange


class RecordSource(Protocol):
    """
    Query surface over people and attachments.

    Implementations never mutate records as a result of these calls.
    """

    def find_attachments(
        self, name_filter: str, time_range: Optional[TimeRange] = None
    ) -> List[AttachmentRecord]:
        """
        Attachments whose filename contains name_filter (case-insensitive).

        With a time_range, only records created within it (inclusive) are returned.
        Results are ordered by creation time ascending.
        """
        ...

    def read_owner_fields(self, owner_id: int, field_names: Sequence[str]) -> Dict[str, Any]:
        """Values of field_names for one owner, keyed and ordered by field_names."""
        ...

    def owner_field_types(self) -> Dict[str, str]:
        """Declared scalar type of every field on the owner schema."""
        ...
