# src/storage/json_store.py
"""JSON file-based record store (STORE_BACKEND=json).

Stores each table as a single JSON array under STORE_ROOT
(``<root>/<table>.json``). Writes go through a temporary file and an atomic
replace so a crash never leaves a half-written table behind.
"""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Iterable
from pathlib import Path

from poscache.storage.base_record_store import (
    BaseRecordStore,
    DuplicateRecordError,
    Record,
    RecordNotFoundError,
    StorageError,
)
from poscache.storage.schema import TABLES

logger = logging.getLogger(__name__)


class JsonRecordStore(BaseRecordStore):
    """File-based record store using one JSON document per table."""

    def __init__(self, root: Path | str, tables: Iterable[str] = TABLES) -> None:
        self._root = Path(root).expanduser()
        self._root.mkdir(parents=True, exist_ok=True)
        self._tables = frozenset(tables)

    async def load_all(self, table: str) -> list[Record]:
        return self._read(table)

    async def insert(self, table: str, record: Record) -> Record:
        rows = self._read(table)
        record_id = str(record["id"])
        if any(str(r.get("id")) == record_id for r in rows):
            raise DuplicateRecordError(table, record_id)
        rows.append(dict(record))
        self._write(table, rows)
        return dict(record)

    async def update(self, table: str, record_id: str, partial: Record) -> Record:
        rows = self._read(table)
        for row in rows:
            if str(row.get("id")) == record_id:
                row.update({k: v for k, v in partial.items() if k != "id"})
                self._write(table, rows)
                return dict(row)
        raise RecordNotFoundError(table, record_id)

    async def remove(self, table: str, record_id: str) -> None:
        rows = self._read(table)
        kept = [r for r in rows if str(r.get("id")) != record_id]
        if len(kept) == len(rows):
            raise RecordNotFoundError(table, record_id)
        self._write(table, kept)

    def _table_path(self, table: str) -> Path:
        if table not in self._tables:
            raise StorageError(f"Unknown table: {table!r}")
        return self._root / f"{table}.json"

    def _read(self, table: str) -> list[Record]:
        path = self._table_path(table)
        if not path.exists():
            return []
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            logger.error("Failed to read table %s from %s: %s", table, path, e)
            raise StorageError(f"Cannot read table {table!r}: {e}") from e
        if not isinstance(data, list):
            raise StorageError(f"Table file {path} does not contain a JSON array")
        return data

    def _write(self, table: str, rows: list[Record]) -> None:
        path = self._table_path(table)
        tmp_path = path.with_suffix(".json.tmp")
        try:
            tmp_path.write_text(
                json.dumps(rows, indent=2, ensure_ascii=False), encoding="utf-8"
            )
            os.replace(tmp_path, path)
        except OSError as e:
            logger.error("Failed to write table %s to %s: %s", table, path, e)
            raise StorageError(f"Cannot write table {table!r}: {e}") from e
