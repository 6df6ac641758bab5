# src/resources/base_backend.py
"""Abstract backend strategy injected into a resource cache.

The four operations are the only way a cache reaches persistence. They may
raise any exception; the cache turns them into typed failures.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any, Generic, TypeVar

T = TypeVar("T")


class ResourceBackend(ABC, Generic[T]):
    """Unified interface for the persistence side of one resource."""

    @abstractmethod
    async def load_all(self) -> list[T]:
        """Fetch the full collection."""

    @abstractmethod
    async def create(self, item: T) -> T:
        """Persist a new entity and return it as stored."""

    @abstractmethod
    async def update(self, item_id: str, patch: Mapping[str, Any]) -> T:
        """Apply a partial update and return the entity as stored."""

    @abstractmethod
    async def remove(self, item_id: str) -> None:
        """Delete an entity."""
