"""Database schema definitions and migration helpers.

Every table row stores the full record as a JSON document in ``doc``, next to
a set of indexed columns copied out of that document. The indexed columns are
declared per schema version; later versions only ever add columns, so rows
written under an earlier version stay readable as they are.
"""

from __future__ import annotations

import logging
import re
import sqlite3
from dataclasses import dataclass, field
from pathlib import Path

from ..errors import SchemaError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IndexedField:
    key: str  # document key, e.g. "receiptNo"
    sql_type: str = "TEXT"

    @property
    def column(self) -> str:
        return column_name(self.key)


@dataclass(frozen=True)
class SchemaVersion:
    """Fields newly indexed by one schema version, per table."""

    version: int
    tables: dict[str, tuple[IndexedField, ...]] = field(default_factory=dict)


_VERSIONS: tuple[SchemaVersion, ...] = (
    SchemaVersion(
        version=1,
        tables={
            "receipts": (
                IndexedField("receiptNo"),
                IndexedField("customerName"),
                IndexedField("date"),
                IndexedField("houseNo"),
                IndexedField("totalAmount", "REAL"),
            ),
            "invoices": (
                IndexedField("customerName"),
                IndexedField("amount", "REAL"),
                IndexedField("date"),
            ),
        },
    ),
    SchemaVersion(
        version=2,
        tables={
            "receipts": (
                IndexedField("fiscalYear"),
                IndexedField("createdAt", "INTEGER"),
            ),
        },
    ),
)

LATEST_VERSION = _VERSIONS[-1].version


def column_name(key: str) -> str:
    """Convert a document key to its column name (``receiptNo`` -> ``receipt_no``)."""
    return re.sub(r"(?<!^)(?=[A-Z])", "_", key).lower()


def indexed_fields(table: str, version: int = LATEST_VERSION) -> list[IndexedField]:
    """Return every field indexed for ``table`` as of ``version``."""
    fields: list[IndexedField] = []
    for desc in _VERSIONS:
        if desc.version > version:
            break
        fields.extend(desc.tables.get(table, ()))
    return fields


def current_version(conn: sqlite3.Connection) -> int:
    """Return the persisted schema version, 0 for a fresh database."""
    try:
        row = conn.execute("SELECT version FROM schema_version").fetchone()
    except sqlite3.OperationalError:
        return 0
    return row["version"] if row else 0


def _apply(conn: sqlite3.Connection, desc: SchemaVersion) -> None:
    for table, fields in desc.tables.items():
        conn.execute(
            f"""CREATE TABLE IF NOT EXISTS {table} (
                   id INTEGER PRIMARY KEY AUTOINCREMENT,
                   doc TEXT NOT NULL
               )"""
        )
        existing = {
            row["name"]
            for row in conn.execute(f"PRAGMA table_info({table})").fetchall()
        }
        for f in fields:
            if f.column not in existing:
                conn.execute(
                    f"ALTER TABLE {table} ADD COLUMN {f.column} {f.sql_type}"
                )
            conn.execute(
                f"CREATE INDEX IF NOT EXISTS idx_{table}_{f.column} "
                f"ON {table}({f.column})"
            )


def ensure_schema(
    db_path: str | Path,
    version: int = LATEST_VERSION,
) -> sqlite3.Connection:
    """Open (or create) the database and bring its schema up to ``version``.

    Args:
        db_path: Path to the SQLite database file.
        version: Schema version the caller expects.

    Returns:
        An open sqlite3.Connection with the schema applied.

    Raises:
        SchemaError: If ``version`` is not a declared version, or is lower
            than the version already persisted in the database.
    """
    declared = {desc.version for desc in _VERSIONS}
    if version not in declared:
        raise SchemaError(f"Unknown schema version: {version}")

    db_path = Path(db_path).expanduser()
    db_path.parent.mkdir(parents=True, exist_ok=True)

    conn = sqlite3.connect(str(db_path))
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA journal_mode=WAL")

    persisted = current_version(conn)
    if persisted > version:
        conn.close()
        raise SchemaError(
            f"Database {db_path} is at schema version {persisted}; "
            f"refusing to open it as version {version}"
        )

    if persisted < version:
        try:
            conn.execute(
                "CREATE TABLE IF NOT EXISTS schema_version (version INTEGER NOT NULL)"
            )
            for desc in _VERSIONS:
                if persisted < desc.version <= version:
                    _apply(conn, desc)
            conn.execute("DELETE FROM schema_version")
            conn.execute(
                "INSERT INTO schema_version (version) VALUES (?)",
                (version,),
            )
            conn.commit()
        except sqlite3.Error:
            conn.rollback()
            conn.close()
            raise
        logger.info("Schema upgraded from version %d to %d", persisted, version)

    return conn
