# src/resources/errors.py
"""Typed failures raised or recorded by resource caches.

Backend exceptions never cross the cache boundary untyped: loads become
LoadFailure (recorded on the cache), mutations become MutationFailure
(raised, with the backend exception chained as ``__cause__``).
"""

from __future__ import annotations


class ResourceError(Exception):
    """Base class for resource cache failures."""

    def __init__(self, resource: str, message: str) -> None:
        self.resource = resource
        self.message = message
        super().__init__(f"{resource}: {message}")


class LoadFailure(ResourceError):
    """The backend rejected a full load. Stale items are kept."""


class MutationFailure(ResourceError):
    """The backend rejected create, update or remove. Items are unchanged."""

    def __init__(self, resource: str, operation: str, message: str) -> None:
        self.operation = operation
        super().__init__(resource, f"{operation} failed: {message}")


class NotFound(ResourceError):
    """The target id is not present in the cached items."""

    def __init__(self, resource: str, item_id: str) -> None:
        self.item_id = item_id
        super().__init__(resource, f"no item with id {item_id!r}")
