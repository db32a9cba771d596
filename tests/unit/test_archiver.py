"""Unit tests for the Archiver."""

import errno
import json
import time
import zipfile
from datetime import date, datetime
from pathlib import Path

import pytest

from hrms.contexts.export import (
    Archiver,
    ExportEntry,
    ExportSet,
    FatalArchiveError,
    FieldType,
    archive_name,
)
from hrms.contexts.export.archiver import FIELD_TYPES_MEMBER, METADATA_MEMBER
from hrms.contexts.records import TimeRange

SCHEMA = (FieldType("name", "string"), FieldType("day_of_birth", "date"))


def _entry(file_id, path, name="cv.pdf"):
    return ExportEntry(
        id=file_id,
        name=name,
        content_type="application/pdf",
        path=str(path),
        metadata={"person": {"name": f"Owner {file_id}", "day_of_birth": date(1990, 1, 1)}},
    )


@pytest.fixture
def export_set(storage_dir):
    return ExportSet(
        entries=(
            _entry("f1a2", storage_dir / "f1a2", "Olena_CV.pdf"),
            _entry("b3c4", storage_dir / "b3c4", "taras_cv_2025.docx"),
        ),
        schema=SCHEMA,
    )


@pytest.mark.unit
def test_archive_name_all(fixed_clock):
    assert archive_name("hrms_data", None, fixed_clock()) == "hrms_data_all_20250601123045.zip"


@pytest.mark.unit
def test_archive_name_with_range(fixed_clock):
    time_range = TimeRange(datetime(2025, 1, 1), datetime(2025, 3, 1, 23, 59, 59))
    assert (
        archive_name("hrms_data", time_range, fixed_clock())
        == "hrms_data_20250101000000_20250301235959_20250601123045.zip"
    )


@pytest.mark.unit
def test_archive_writes_members(tmp_path, export_set, fixed_clock):
    result = Archiver(tmp_path / "out", clock=fixed_clock).archive(export_set)

    assert result.success
    assert result.errors == []
    assert result.archive_path == tmp_path / "out" / "hrms_data_all_20250601123045.zip"

    with zipfile.ZipFile(result.archive_path) as zf:
        assert zf.namelist() == ["f1a2", "b3c4", METADATA_MEMBER, FIELD_TYPES_MEMBER]
        assert zf.read("f1a2") == b"%PDF-1.4 olena"
        assert zf.getinfo("b3c4").compress_type == zipfile.ZIP_DEFLATED


@pytest.mark.unit
def test_metadata_documents(tmp_path, export_set, fixed_clock):
    result = Archiver(tmp_path, clock=fixed_clock).archive(export_set)

    with zipfile.ZipFile(result.archive_path) as zf:
        metadata = json.loads(zf.read(METADATA_MEMBER))
        field_types = json.loads(zf.read(FIELD_TYPES_MEMBER))

    assert [item["id"] for item in metadata] == ["f1a2", "b3c4"]
    assert list(metadata[0]) == ["id", "name", "content_type", "metadata"]
    assert "path" not in metadata[0]
    assert metadata[0]["name"] == "Olena_CV.pdf"
    assert metadata[0]["metadata"]["person"] == {
        "name": "Owner f1a2",
        "day_of_birth": "1990-01-01",
    }
    assert field_types == [
        {"name": "name", "type": "string"},
        {"name": "day_of_birth", "type": "date"},
    ]


@pytest.mark.unit
def test_missing_file_is_recorded_and_skipped(tmp_path, storage_dir, fixed_clock):
    missing = storage_dir / "zzzz"
    export_set = ExportSet(
        entries=(
            _entry("f1a2", storage_dir / "f1a2"),
            _entry("zzzz", missing),
            _entry("d5e6", storage_dir / "d5e6"),
        ),
        schema=SCHEMA,
    )

    result = Archiver(tmp_path / "out", clock=fixed_clock).archive(export_set)

    assert not result.success
    assert result.errors == [f"failed to archive attachment {missing}"]
    with zipfile.ZipFile(result.archive_path) as zf:
        assert zf.namelist() == ["f1a2", "d5e6", METADATA_MEMBER, FIELD_TYPES_MEMBER]


@pytest.mark.unit
def test_failed_copies_still_listed_in_metadata(tmp_path, storage_dir, fixed_clock):
    export_set = ExportSet(
        entries=(_entry("f1a2", storage_dir / "f1a2"), _entry("zzzz", storage_dir / "zzzz")),
        schema=SCHEMA,
    )

    result = Archiver(tmp_path, clock=fixed_clock).archive(export_set)

    with zipfile.ZipFile(result.archive_path) as zf:
        metadata = json.loads(zf.read(METADATA_MEMBER))
    assert [item["id"] for item in metadata] == ["f1a2", "zzzz"]
    assert len(result.errors) == 1


@pytest.mark.unit
def test_directory_source_is_a_per_file_error(tmp_path, storage_dir, fixed_clock):
    export_set = ExportSet(entries=(_entry("dir", storage_dir),), schema=SCHEMA)

    result = Archiver(tmp_path / "out", clock=fixed_clock).archive(export_set)

    assert result.errors == [f"failed to archive attachment {storage_dir}"]
    with zipfile.ZipFile(result.archive_path) as zf:
        assert zf.namelist() == [METADATA_MEMBER, FIELD_TYPES_MEMBER]


@pytest.mark.unit
def test_same_second_export_overwrites(tmp_path, export_set, storage_dir, fixed_clock):
    archiver = Archiver(tmp_path, clock=fixed_clock)
    first = archiver.archive(export_set)

    smaller = ExportSet(entries=(_entry("d5e6", storage_dir / "d5e6"),), schema=SCHEMA)
    second = archiver.archive(smaller)

    assert first.archive_path == second.archive_path
    with zipfile.ZipFile(second.archive_path) as zf:
        assert zf.namelist() == ["d5e6", METADATA_MEMBER, FIELD_TYPES_MEMBER]


@pytest.mark.unit
def test_creates_output_directory(tmp_path, export_set, fixed_clock):
    output_dir = tmp_path / "a" / "b"
    result = Archiver(output_dir, clock=fixed_clock).archive(export_set)
    assert result.archive_path.parent == output_dir
    assert result.archive_path.exists()


@pytest.mark.unit
def test_unwritable_destination_is_fatal(tmp_path, export_set, fixed_clock):
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory")

    with pytest.raises(FatalArchiveError) as excinfo:
        Archiver(blocker / "exports", clock=fixed_clock).archive(export_set)

    assert excinfo.value.archive_path.parent == blocker / "exports"
    assert isinstance(excinfo.value.original_error, OSError)


@pytest.mark.unit
def test_export_set_rejects_duplicate_ids(storage_dir):
    with pytest.raises(ValueError, match="f1a2"):
        ExportSet(
            entries=(_entry("f1a2", storage_dir / "f1a2"), _entry("f1a2", storage_dir / "f1a2")),
            schema=SCHEMA,
        )


@pytest.mark.unit
def test_read_error_leaves_no_partial_member(tmp_path, storage_dir, fixed_clock, monkeypatch):
    unreadable = storage_dir / "b3c4"
    original_read_bytes = Path.read_bytes

    def failing_read_bytes(self):
        if self == unreadable:
            raise OSError(errno.EIO, "Input/output error")
        return original_read_bytes(self)

    monkeypatch.setattr(Path, "read_bytes", failing_read_bytes)
    export_set = ExportSet(
        entries=(_entry("f1a2", storage_dir / "f1a2"), _entry("b3c4", unreadable)),
        schema=SCHEMA,
    )

    result = Archiver(tmp_path / "out", clock=fixed_clock).archive(export_set)

    assert result.errors == [f"failed to archive attachment {unreadable}"]
    with zipfile.ZipFile(result.archive_path) as zf:
        names = zf.namelist()
        assert zf.testzip() is None
    assert "b3c4" not in names
    assert names == ["f1a2", METADATA_MEMBER, FIELD_TYPES_MEMBER]
    # Copied members plus errors account for every entry exactly once
    assert len(names) - 2 + len(result.errors) == len(export_set)


@pytest.mark.unit
def test_export_set_duplicate_check_scales(storage_dir):
    entries = tuple(_entry(f"id{i}", storage_dir / "f1a2") for i in range(50_000))
    started = time.perf_counter()
    export_set = ExportSet(entries=entries, schema=SCHEMA)
    assert len(export_set) == 50_000
    assert time.perf_counter() - started < 5
