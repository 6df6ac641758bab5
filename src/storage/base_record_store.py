# src/storage/base_record_store.py
"""Abstract record store interface.

A record store is the local, authoritative persistence backend behind every
resource context. It is table-oriented: each entity type lives in one table
of flat records (``dict`` with scalar values) keyed by ``id``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

Record = dict[str, Any]


class StorageError(Exception):
    """Generic storage failure (I/O error, unavailable store, unknown table)."""


class RecordNotFoundError(StorageError):
    """Raised by update/remove when no record has the given id."""

    def __init__(self, table: str, record_id: str) -> None:
        self.table = table
        self.record_id = record_id
        super().__init__(f"No record with id {record_id!r} in table {table!r}")


class DuplicateRecordError(StorageError):
    """Raised by insert when a record with the same id already exists."""

    def __init__(self, table: str, record_id: str) -> None:
        self.table = table
        self.record_id = record_id
        super().__init__(f"Record {record_id!r} already exists in table {table!r}")


class BaseRecordStore(ABC):
    """Unified interface for record storage backends."""

    @abstractmethod
    async def load_all(self, table: str) -> list[Record]:
        """Full-table scan. No pagination and no ordering guarantee."""

    @abstractmethod
    async def insert(self, table: str, record: Record) -> Record:
        """Insert a record and return it as stored."""

    @abstractmethod
    async def update(self, table: str, record_id: str, partial: Record) -> Record:
        """Apply a partial record and return the full stored record."""

    @abstractmethod
    async def remove(self, table: str, record_id: str) -> None:
        """Delete a record."""

    def close(self) -> None:
        """Release backend resources. No-op by default."""
