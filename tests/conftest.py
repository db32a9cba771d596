"""Shared fixtures: sample people, attachments on disk, and a record database."""

from datetime import date, datetime

import pytest

from hrms.contexts.export import load_export_config
from hrms.contexts.records import AttachmentRecord, PersonRecord, RecordDatabase

PROJECTION = [
    "name",
    "city",
    "phone",
    "skype",
    "linkedin",
    "primary_tech",
    "english",
    "day_of_birth",
    "email",
    "skills",
    "current_position",
    "github",
    "personal_email",
]


@pytest.fixture
def projection_fields():
    return list(PROJECTION)


@pytest.fixture(autouse=True)
def isolated_event_log(tmp_path, monkeypatch):
    """Keep export events out of the working tree."""
    events_file = tmp_path / "logs" / "export_events.log"
    monkeypatch.setattr("hrms.utils.event_logging.EXPORT_EVENTS_FILE", events_file)
    return events_file


@pytest.fixture
def people():
    return [
        PersonRecord(
            id=1,
            name="Olena Kovalenko",
            city="Kyiv",
            phone="+380 44 123 4567",
            skype="olena.k",
            linkedin="linkedin.com/in/olena",
            primary_tech="Ruby",
            english="Advanced",
            day_of_birth=date(1990, 5, 17),
            email="olena@example.com",
            skills="Ruby, Rails, PostgreSQL",
            current_position="Senior Developer",
            github="olenak",
            personal_email="olena.k@example.org",
        ),
        PersonRecord(
            id=2,
            name="Taras Shevchuk",
            city="Lviv",
            phone="+380 32 765 4321",
            primary_tech="Java",
            english="Upper-Intermediate",
            email="taras@example.com",
            skills="Java, Spring",
            current_position="Developer",
        ),
        PersonRecord(
            id=3,
            name="Iryna Melnyk",
            city="Kharkiv",
            primary_tech="QA/BA",
            english="Intermediate",
            day_of_birth=date(1995, 11, 2),
        ),
    ]


@pytest.fixture
def storage_dir(tmp_path):
    """Attachment storage backend directory with one file per CV."""
    directory = tmp_path / "store"
    directory.mkdir()
    (directory / "f1a2").write_bytes(b"%PDF-1.4 olena")
    (directory / "b3c4").write_bytes(b"PK taras docx")
    (directory / "d5e6").write_bytes(b"%PDF-1.4 iryna")
    (directory / "g7h8").write_bytes(b"\xff\xd8 passport")
    return directory


@pytest.fixture
def attachments(storage_dir):
    """Three CVs and one non-CV attachment, deliberately not in time order."""
    store = str(storage_dir)
    return [
        AttachmentRecord("d5e6", "Iryna-CV.PDF", "application/pdf", store, datetime(2025, 4, 1, 8, 0), 3),
        AttachmentRecord("f1a2", "Olena CV.pdf", "application/pdf", store, datetime(2025, 1, 10, 9, 0), 1),
        AttachmentRecord(
            "b3c4",
            "taras_cv_2025.docx",
            "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
            store,
            datetime(2025, 2, 15, 14, 30),
            2,
        ),
        AttachmentRecord("g7h8", "passport scan.jpg", "image/jpeg", store, datetime(2025, 2, 1, 12, 0), 1),
    ]


@pytest.fixture
def record_db(tmp_path, people, attachments):
    db = RecordDatabase.from_records(people, attachments, tmp_path / "hrms.db")
    yield db
    db.close()


@pytest.fixture
def export_config():
    return load_export_config()


@pytest.fixture
def fixed_clock():
    return lambda: datetime(2025, 6, 1, 12, 30, 45)
