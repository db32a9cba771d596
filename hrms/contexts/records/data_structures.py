"""Data structures for people, attachments and time windows."""

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional


@dataclass(frozen=True)
class TimeRange:
    """
    Creation-time window, inclusive on both ends.

    Bounds are not reordered: a range with start > end matches nothing.
    """

    start: datetime
    end: datetime

    def contains(self, moment: datetime) -> bool:
        return self.start <= moment <= self.end


@dataclass
class PersonRecord:
    """A person (candidate or employee) that owns attachments."""

    id: int
    name: str
    city: str = ""
    phone: str = ""
    skype: str = ""
    linkedin: str = ""
    primary_tech: str = ""
    english: str = ""
    day_of_birth: Optional[date] = None
    email: str = ""
    skills: str = ""
    current_position: str = ""
    github: str = ""
    personal_email: str = ""


@dataclass(frozen=True)
class AttachmentRecord:
    """
    One stored file linked to exactly one person.

    Attributes:
        file_id: Storage identifier of the file (unique)
        filename: Original display filename
        content_type: MIME type recorded at upload
        storage_directory: Directory of the storage backend holding the file
        created_at: Upload timestamp
        owner_id: Id of the owning PersonRecord
    """

    file_id: str
    filename: str
    content_type: Optional[str]
    storage_directory: str
    created_at: datetime
    owner_id: int
