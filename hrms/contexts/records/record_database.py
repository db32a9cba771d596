"""
Persistent SQLite database of people and their attachments.

Implements the RecordSource interface used by the export context.
"""

import sqlite3
from dataclasses import asdict
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from hrms.contexts.records.data_structures import AttachmentRecord, PersonRecord, TimeRange

# SQLite declared column type -> scalar type name reported to exporters
DECLARED_TYPES = {
    "VARCHAR": "string",
    "TEXT": "text",
    "DATE": "date",
    "TIMESTAMP": "datetime",
    "INTEGER": "integer",
    "BOOLEAN": "boolean",
}

PEOPLE_SCHEMA = """
    CREATE TABLE IF NOT EXISTS people (
        id INTEGER PRIMARY KEY,

        name VARCHAR NOT NULL,
        city VARCHAR,
        phone VARCHAR,
        skype VARCHAR,
        linkedin VARCHAR,
        primary_tech VARCHAR,
        english VARCHAR,
        day_of_birth DATE,
        email VARCHAR,
        skills TEXT,
        current_position VARCHAR,
        github VARCHAR,
        personal_email VARCHAR
    )
"""

ATTACHMENTS_SCHEMA = """
    CREATE TABLE IF NOT EXISTS attachments (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        person_id INTEGER NOT NULL REFERENCES people(id),

        file_id TEXT NOT NULL UNIQUE,
        filename TEXT NOT NULL,
        content_type TEXT,
        storage_directory TEXT NOT NULL,
        created_at TIMESTAMP NOT NULL
    )
"""


def to_db_timestamp(moment: datetime) -> str:
    """
    Normalize a datetime to a fixed-width UTC string.

    Naive datetimes are taken to be UTC already. Fixed width keeps string
    comparison in SQL consistent with chronological order.
    """
    if moment.tzinfo is not None:
        moment = moment.astimezone(timezone.utc).replace(tzinfo=None)
    return moment.strftime("%Y-%m-%d %H:%M:%S.%f")


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class RecordDatabase:
    """
    SQLite database of people and attachments.

    The database is persistent - build once with from_records(), then load
    later by instantiating with the db_path.
    """

    def __init__(self, db_path: Path):
        """
        Load an existing database from disk.

        To create a new database, use RecordDatabase.from_records() instead.

        Args:
            db_path: Path to existing SQLite database file

        Raises:
            FileNotFoundError: If database file doesn't exist
        """
        self.db_path = Path(db_path)

        if not self.db_path.exists():
            raise FileNotFoundError(
                f"Database not found: {self.db_path}\n"
                f"To create a new database, use RecordDatabase.from_records()"
            )

        self.conn = sqlite3.connect(str(self.db_path))
        self.conn.row_factory = sqlite3.Row

    @classmethod
    def from_records(
        cls,
        people: List[PersonRecord],
        attachments: List[AttachmentRecord],
        db_path: Path,
    ) -> "RecordDatabase":
        """
        Build new database from people and attachments (deletes existing database).

        Args:
            people: PersonRecord instances
            attachments: AttachmentRecord instances (owner_id must reference a person)
            db_path: Path where database will be created

        Returns:
            RecordDatabase holding all given records
        """
        db_path = Path(db_path)
        if db_path.exists():
            db_path.unlink()

        db_path.parent.mkdir(parents=True, exist_ok=True)

        # Create schema (bypassing __init__ validation)
        conn = sqlite3.connect(str(db_path))
        conn.execute(PEOPLE_SCHEMA)
        conn.execute(ATTACHMENTS_SCHEMA)
        conn.execute("CREATE INDEX IF NOT EXISTS idx_created_at ON attachments(created_at)")
        conn.commit()
        conn.close()

        db = cls(db_path)

        for person in people:
            db.add_person(person)
        for attachment in attachments:
            db.add_attachment(attachment)

        db.conn.commit()
        return db

    def close(self) -> None:
        self.conn.close()

    def query(self, sql: str, params: tuple = ()) -> List[Dict[str, Any]]:
        """
        Execute SQL query and return results as list of dicts.

        Args:
            sql: SQL query string
            params: Query parameters (for parameterized queries)

        Returns:
            List of dicts with column names as keys
        """
        cursor = self.conn.execute(sql, params)
        return [dict(row) for row in cursor.fetchall()]

    def add_person(self, person: PersonRecord) -> None:
        """Insert a single person row."""
        row = asdict(person)
        if isinstance(row["day_of_birth"], date):
            row["day_of_birth"] = row["day_of_birth"].isoformat()

        columns = ", ".join(row)
        placeholders = ", ".join("?" * len(row))
        self.conn.execute(
            f"INSERT INTO people ({columns}) VALUES ({placeholders})", tuple(row.values())
        )

    def add_attachment(self, attachment: AttachmentRecord) -> None:
        """Insert a single attachment row."""
        self.conn.execute(
            """
            INSERT INTO attachments (
                person_id, file_id, filename, content_type, storage_directory, created_at
            ) VALUES (?, ?, ?, ?, ?, ?)
            """,
            (
                attachment.owner_id,
                attachment.file_id,
                attachment.filename,
                attachment.content_type,
                attachment.storage_directory,
                to_db_timestamp(attachment.created_at),
            ),
        )

    # RecordSource interface

    def find_attachments(
        self, name_filter: str, time_range: Optional[TimeRange] = None
    ) -> List[AttachmentRecord]:
        """
        Attachments whose filename contains name_filter, ignoring case.

        Args:
            name_filter: Substring to look for in the filename
            time_range: Optional inclusive creation-time window

        Returns:
            AttachmentRecords ordered by created_at ascending
        """
        sql = """
            SELECT a.file_id, a.filename, a.content_type, a.storage_directory,
                   a.created_at, a.person_id
            FROM attachments a
            JOIN people p ON p.id = a.person_id
            WHERE lower(a.filename) LIKE ? ESCAPE '\\'
        """
        params = [f"%{_escape_like(name_filter.lower())}%"]

        if time_range is not None:
            sql += " AND a.created_at BETWEEN ? AND ?"
            params += [to_db_timestamp(time_range.start), to_db_timestamp(time_range.end)]

        sql += " ORDER BY a.created_at, a.id"

        return [
            AttachmentRecord(
                file_id=row["file_id"],
                filename=row["filename"],
                content_type=row["content_type"],
                storage_directory=row["storage_directory"],
                created_at=datetime.fromisoformat(row["created_at"]),
                owner_id=row["person_id"],
            )
            for row in self.query(sql, tuple(params))
        ]

    def read_owner_fields(self, owner_id: int, field_names: Sequence[str]) -> Dict[str, Any]:
        """
        Read selected fields of one person.

        Raises:
            KeyError: If the person doesn't exist or a field is not a column
        """
        known = self.owner_field_types()
        unknown = [name for name in field_names if name not in known]
        if unknown:
            raise KeyError(f"Unknown person fields: {', '.join(unknown)}")

        columns = ", ".join(field_names)
        rows = self.query(f"SELECT {columns} FROM people WHERE id = ?", (owner_id,))
        if not rows:
            raise KeyError(f"Person not found: {owner_id}")

        return {name: rows[0][name] for name in field_names}

    def owner_field_types(self) -> Dict[str, str]:
        """Declared type of every people column, mapped through DECLARED_TYPES."""
        columns = self.query("PRAGMA table_info(people)")
        return {
            column["name"]: DECLARED_TYPES.get(column["type"].upper(), column["type"].lower())
            for column in columns
        }
