# src/storage/store_factory.py
"""Factory for record store instantiation."""

from __future__ import annotations

from poscache.config.settings import Settings
from poscache.storage.base_record_store import BaseRecordStore


def create_record_store(settings: Settings | None = None) -> BaseRecordStore:
    """Instantiate the configured record store backend.

    Args:
        settings: Application settings. Defaults to the in-memory backend.

    Returns:
        Configured BaseRecordStore implementation.
    """
    backend = "memory" if settings is None else settings.store_backend

    if backend == "memory":
        from poscache.storage.memory_store import MemoryRecordStore
        return MemoryRecordStore()

    if backend == "json":
        from poscache.storage.json_store import JsonRecordStore
        return JsonRecordStore(root=settings.store_root)  # type: ignore[union-attr]

    if backend == "sqlite":
        from poscache.storage.sqlite_store import SqliteRecordStore
        return SqliteRecordStore(db_path=settings.sqlite_path)  # type: ignore[union-attr]

    raise ValueError(f"Unsupported store backend: {backend!r}")
