# src/storage/sqlite_store.py
"""SQLite-based record store (STORE_BACKEND=sqlite, the default).

Uses stdlib sqlite3, no external dependency. The schema is created on open.
Table and column names are checked against the live schema before they are
interpolated into SQL; values are always bound as parameters.
"""

from __future__ import annotations

import logging
import sqlite3
from pathlib import Path

from poscache.storage.base_record_store import (
    BaseRecordStore,
    DuplicateRecordError,
    Record,
    RecordNotFoundError,
    StorageError,
)
from poscache.storage.schema import SQLITE_SCHEMA, TABLES

logger = logging.getLogger(__name__)


class SqliteRecordStore(BaseRecordStore):
    """SQLite-backed record store."""

    def __init__(self, db_path: Path | str, schema: str = SQLITE_SCHEMA) -> None:
        self._db_path = str(db_path)
        if self._db_path != ":memory:":
            path = Path(db_path).expanduser()
            path.parent.mkdir(parents=True, exist_ok=True)
            self._db_path = str(path)
        try:
            self._conn = sqlite3.connect(self._db_path)
            self._conn.row_factory = sqlite3.Row
            self._conn.execute("PRAGMA journal_mode=WAL")
            self._conn.executescript(schema)
        except sqlite3.Error as e:
            raise StorageError(f"Cannot open database {self._db_path}: {e}") from e
        self._columns: dict[str, frozenset[str]] = {}

    async def load_all(self, table: str) -> list[Record]:
        self._check_table(table)
        rows = self._run(table, f"SELECT * FROM {table}").fetchall()
        return [dict(row) for row in rows]

    async def insert(self, table: str, record: Record) -> Record:
        columns = self._check_columns(table, record)
        placeholders = ", ".join("?" for _ in columns)
        try:
            self._conn.execute(
                f"INSERT INTO {table} ({', '.join(columns)}) VALUES ({placeholders})",
                [record[c] for c in columns],
            )
            self._conn.commit()
        except sqlite3.IntegrityError as e:
            self._conn.rollback()
            if self._fetch(table, str(record["id"])) is not None:
                raise DuplicateRecordError(table, str(record["id"])) from e
            raise StorageError(f"Insert into {table!r} rejected: {e}") from e
        except sqlite3.Error as e:
            self._conn.rollback()
            raise StorageError(f"Insert into {table!r} failed: {e}") from e
        return self._fetch(table, str(record["id"])) or dict(record)

    async def update(self, table: str, record_id: str, partial: Record) -> Record:
        changes = {k: v for k, v in partial.items() if k != "id"}
        columns = self._check_columns(table, changes)
        if columns:
            assignments = ", ".join(f"{c} = ?" for c in columns)
            cursor = self._run(
                table,
                f"UPDATE {table} SET {assignments} WHERE id = ?",
                [changes[c] for c in columns] + [record_id],
                commit=True,
            )
            if cursor.rowcount == 0:
                raise RecordNotFoundError(table, record_id)
        row = self._fetch(table, record_id)
        if row is None:
            raise RecordNotFoundError(table, record_id)
        return row

    async def remove(self, table: str, record_id: str) -> None:
        self._check_table(table)
        cursor = self._run(
            table, f"DELETE FROM {table} WHERE id = ?", [record_id], commit=True
        )
        if cursor.rowcount == 0:
            raise RecordNotFoundError(table, record_id)

    def close(self) -> None:
        """Close the database connection."""
        self._conn.close()

    # --- Internals ---

    def _run(
        self,
        table: str,
        sql: str,
        params: list | None = None,
        commit: bool = False,
    ) -> sqlite3.Cursor:
        try:
            cursor = self._conn.execute(sql, params or [])
            if commit:
                self._conn.commit()
            return cursor
        except sqlite3.Error as e:
            if commit:
                self._conn.rollback()
            logger.error("SQLite error on table %s: %s", table, e)
            raise StorageError(f"Query on {table!r} failed: {e}") from e

    def _fetch(self, table: str, record_id: str) -> Record | None:
        row = self._run(
            table, f"SELECT * FROM {table} WHERE id = ?", [record_id]
        ).fetchone()
        return dict(row) if row is not None else None

    def _check_table(self, table: str) -> frozenset[str]:
        if table not in TABLES:
            raise StorageError(f"Unknown table: {table!r}")
        if table not in self._columns:
            info = self._run(table, f"PRAGMA table_info({table})").fetchall()
            self._columns[table] = frozenset(row["name"] for row in info)
        return self._columns[table]

    def _check_columns(self, table: str, record: Record) -> list[str]:
        known = self._check_table(table)
        unknown = sorted(set(record) - known)
        if unknown:
            raise StorageError(
                f"Unknown columns for table {table!r}: {', '.join(unknown)}"
            )
        return list(record)
