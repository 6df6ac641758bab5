# src/storage/memory_store.py
"""In-memory record store (STORE_BACKEND=memory).

Keeps tables as insertion-ordered dicts. Nothing is persisted; used for
tests, demos and as the reference behaviour for the other backends.
"""

from __future__ import annotations

import copy
from collections.abc import Iterable

from poscache.storage.base_record_store import (
    BaseRecordStore,
    DuplicateRecordError,
    Record,
    RecordNotFoundError,
    StorageError,
)
from poscache.storage.schema import TABLES


class MemoryRecordStore(BaseRecordStore):
    """Dict-backed record store."""

    def __init__(self, tables: Iterable[str] = TABLES) -> None:
        self._tables: dict[str, dict[str, Record]] = {t: {} for t in tables}

    async def load_all(self, table: str) -> list[Record]:
        return [copy.deepcopy(r) for r in self._table(table).values()]

    async def insert(self, table: str, record: Record) -> Record:
        rows = self._table(table)
        record_id = str(record["id"])
        if record_id in rows:
            raise DuplicateRecordError(table, record_id)
        rows[record_id] = copy.deepcopy(record)
        return copy.deepcopy(rows[record_id])

    async def update(self, table: str, record_id: str, partial: Record) -> Record:
        rows = self._table(table)
        if record_id not in rows:
            raise RecordNotFoundError(table, record_id)
        changes = {k: v for k, v in partial.items() if k != "id"}
        rows[record_id].update(copy.deepcopy(changes))
        return copy.deepcopy(rows[record_id])

    async def remove(self, table: str, record_id: str) -> None:
        rows = self._table(table)
        if record_id not in rows:
            raise RecordNotFoundError(table, record_id)
        del rows[record_id]

    def _table(self, table: str) -> dict[str, Record]:
        try:
            return self._tables[table]
        except KeyError:
            raise StorageError(f"Unknown table: {table!r}") from None
