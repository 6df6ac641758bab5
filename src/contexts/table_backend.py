# src/contexts/table_backend.py
"""ResourceBackend bound to one record store table through a RecordMapper."""

from __future__ import annotations

import uuid
from collections.abc import Mapping
from typing import Any, TypeVar

from pydantic import BaseModel

from poscache.domain.records import RecordMapper
from poscache.resources.base_backend import ResourceBackend
from poscache.storage.base_record_store import BaseRecordStore

T = TypeVar("T", bound=BaseModel)


class TableBackend(ResourceBackend[T]):
    """Maps the four cache operations onto record store calls."""

    def __init__(
        self, store: BaseRecordStore, table: str, mapper: RecordMapper[T]
    ) -> None:
        self._store = store
        self._table = table
        self._mapper = mapper

    @property
    def table(self) -> str:
        return self._table

    async def load_all(self) -> list[T]:
        records = await self._store.load_all(self._table)
        return [self._mapper.from_record(r) for r in records]

    async def create(self, item: T) -> T:
        if not getattr(item, "id", None):
            item = item.model_copy(update={"id": str(uuid.uuid4())})
        stored = await self._store.insert(self._table, self._mapper.to_record(item))
        return self._mapper.from_record(stored)

    async def update(self, item_id: str, patch: Mapping[str, Any]) -> T:
        """Write only the patched columns. An invalid patch never reaches the store."""
        checked = self._mapper.validate_patch(patch)
        stored = await self._store.update(
            self._table, item_id, self._mapper.patch_to_record(checked)
        )
        return self._mapper.from_record(stored)

    async def remove(self, item_id: str) -> None:
        await self._store.remove(self._table, item_id)
