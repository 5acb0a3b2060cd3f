"""Versioned record tables with change notification."""

from __future__ import annotations

import json
import logging
import sqlite3
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

from ..errors import NotFoundError, ValidationError
from .schema import LATEST_VERSION, IndexedField, ensure_schema, indexed_fields

logger = logging.getLogger(__name__)

DEFAULT_DB_PATH = "~/.config/society-ledger/ledger.db"

Listener = Callable[[list], None]


class RecordStore:
    """Manages one table of JSON record documents.

    Subclasses set ``table`` and ``record_type``; the record type must provide
    ``to_dict()``, ``from_dict()`` and an ``id`` attribute.

    Every committed mutation re-reads the table and pushes the full result set
    to subscribed listeners before the mutating call returns.
    """

    table: str = ""
    record_type: type = object

    def __init__(
        self,
        db_path: str | Path = DEFAULT_DB_PATH,
        version: int = LATEST_VERSION,
    ) -> None:
        self._db_path = db_path
        self._version = version
        self._conn: sqlite3.Connection | None = None
        self._fields: list[IndexedField] = indexed_fields(self.table, version)
        self._listeners: list[Listener] = []
        self._tx_depth = 0

    def _get_conn(self) -> sqlite3.Connection:
        if self._conn is None:
            self._conn = ensure_schema(self._db_path, self._version)
        return self._conn

    def close(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    # -- notification -----------------------------------------------------

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener and deliver the current result set to it.

        Returns:
            A callable that removes the listener again.
        """
        self._listeners.append(listener)
        listener(self.get_all())

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        if not self._listeners:
            return
        records = self.get_all()
        for listener in list(self._listeners):
            listener(list(records))

    def _commit(self) -> None:
        if self._tx_depth == 0:
            self._get_conn().commit()
            self._notify()

    @contextmanager
    def transaction(self) -> Iterator[RecordStore]:
        """Group several mutations into one all-or-nothing commit.

        A nested ``transaction()`` joins the enclosing one. Listeners are
        notified once, after the outermost scope commits; a rolled-back
        scope notifies nobody.
        """
        conn = self._get_conn()
        outermost = self._tx_depth == 0
        self._tx_depth += 1
        try:
            yield self
        except BaseException:
            self._tx_depth -= 1
            if outermost:
                conn.rollback()
                logger.warning("Rolled back transaction on %s", self.table)
            raise
        self._tx_depth -= 1
        if outermost:
            conn.commit()
            self._notify()

    # -- mutation -----------------------------------------------------------

    def _check_type(self, record: Any) -> None:
        if not isinstance(record, self.record_type):
            raise ValidationError(
                f"{self.table} only stores {self.record_type.__name__}, "
                f"got {type(record).__name__}"
            )

    def _document(self, record: Any) -> tuple[str, list]:
        doc = record.to_dict()
        doc.pop("id", None)
        values = [doc.get(f.key) for f in self._fields]
        return json.dumps(doc, ensure_ascii=False), values

    def _require(self, record_id: int) -> None:
        row = self._get_conn().execute(
            f"SELECT 1 FROM {self.table} WHERE id = ?", (record_id,)
        ).fetchone()
        if row is None:
            raise NotFoundError(f"No {self.table} record with id {record_id}")

    def insert(self, record: Any) -> int:
        """Insert a new record and return its assigned id.

        Raises:
            ValidationError: If the record already carries an id.
        """
        self._check_type(record)
        if record.id is not None:
            raise ValidationError(
                f"Record already has id {record.id}; use update() instead"
            )

        conn = self._get_conn()
        doc, values = self._document(record)
        columns = ", ".join(["doc"] + [f.column for f in self._fields])
        placeholders = ", ".join("?" * (len(self._fields) + 1))
        cur = conn.execute(
            f"INSERT INTO {self.table} ({columns}) VALUES ({placeholders})",
            [doc, *values],
        )
        record_id = cur.lastrowid
        logger.debug("Inserted %s id=%d", self.table, record_id)
        self._commit()
        return record_id

    def update(self, record_id: int, record: Any) -> None:
        """Replace the stored record with ``record`` (full-record update).

        Raises:
            NotFoundError: If ``record_id`` does not exist.
        """
        self._check_type(record)
        self._require(record_id)

        doc, values = self._document(record)
        assignments = ", ".join(["doc = ?"] + [f"{f.column} = ?" for f in self._fields])
        self._get_conn().execute(
            f"UPDATE {self.table} SET {assignments} WHERE id = ?",
            [doc, *values, record_id],
        )
        logger.debug("Updated %s id=%d", self.table, record_id)
        self._commit()

    def delete(self, record_id: int) -> None:
        """Delete a record permanently.

        Raises:
            NotFoundError: If ``record_id`` does not exist.
        """
        self._require(record_id)
        self._get_conn().execute(
            f"DELETE FROM {self.table} WHERE id = ?", (record_id,)
        )
        logger.info("Deleted %s id=%d", self.table, record_id)
        self._commit()

    def bulk_insert(self, records: list) -> list[int]:
        """Insert all records in a single transaction."""
        with self.transaction():
            return [self.insert(r) for r in records]

    # -- queries ------------------------------------------------------------

    def _to_record(self, row: sqlite3.Row) -> Any:
        data = json.loads(row["doc"])
        data["id"] = row["id"]
        return self.record_type.from_dict(data)

    def get(self, record_id: int) -> Any:
        """Return a single record.

        Raises:
            NotFoundError: If ``record_id`` does not exist.
        """
        row = self._get_conn().execute(
            f"SELECT id, doc FROM {self.table} WHERE id = ?", (record_id,)
        ).fetchone()
        if row is None:
            raise NotFoundError(f"No {self.table} record with id {record_id}")
        return self._to_record(row)

    def get_all(self) -> list:
        """Return every record in ascending id order."""
        rows = self._get_conn().execute(
            f"SELECT id, doc FROM {self.table} ORDER BY id"
        ).fetchall()
        return [self._to_record(r) for r in rows]

    def find_by(self, key: str, value: Any) -> list:
        """Return records whose indexed field ``key`` equals ``value``.

        Raises:
            ValueError: If ``key`` is not indexed at this schema version.
        """
        field = next((f for f in self._fields if f.key == key), None)
        if field is None:
            raise ValueError(f"{key!r} is not an indexed field of {self.table}")
        rows = self._get_conn().execute(
            f"SELECT id, doc FROM {self.table} WHERE {field.column} = ? ORDER BY id",
            (value,),
        ).fetchall()
        return [self._to_record(r) for r in rows]

    def count(self) -> int:
        row = self._get_conn().execute(
            f"SELECT COUNT(*) AS n FROM {self.table}"
        ).fetchone()
        return row["n"]
