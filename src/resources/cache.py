# src/resources/cache.py
"""Generic async resource cache.

One ResourceCache serves one entity type. It owns the load lifecycle
(idle -> loading -> ready | error), de-duplicates concurrent loads, and
applies create/update/remove to its items only after the backend has
confirmed them. Items are never updated optimistically.

Usage:
    cache = ResourceCache(ResourceConfig(name="Customer", backend=backend, lazy=True))
    await cache.mount()
    await cache.create(customer)
"""

from __future__ import annotations

import asyncio
import contextlib
import functools
import logging
from collections.abc import Awaitable, Callable, Iterator, Mapping
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ValidationError

from poscache.logging.context import reset_operation_context, set_operation_context
from poscache.resources.base_backend import ResourceBackend
from poscache.resources.errors import LoadFailure, MutationFailure, NotFound, ResourceError
from poscache.resources.models import AsyncState, MissingItemPolicy

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)

CustomOperation = Callable[..., Awaitable[Any]]
Selector = Callable[..., Any]
Listener = Callable[["ResourceCache[Any]"], None]


@dataclass(frozen=True)
class ResourceConfig(Generic[T]):
    """Static description of a resource cache."""

    name: str
    backend: ResourceBackend[T]
    lazy: bool = False
    custom_operations: Mapping[str, CustomOperation] = field(default_factory=dict)
    selectors: Mapping[str, Selector] = field(default_factory=dict)
    id_field: str = "id"
    missing_item_policy: MissingItemPolicy = "ignore"
    on_success: Callable[[str, Any], None] | None = None
    on_error: Callable[[str, Exception], None] | None = None


class CustomOperationContext(Generic[T]):
    """What a custom operation may touch: read-only items and the CRUD delegates."""

    def __init__(self, cache: ResourceCache[T]) -> None:
        self._cache = cache

    @property
    def name(self) -> str:
        return self._cache.name

    @property
    def items(self) -> tuple[T, ...]:
        return self._cache.items

    def find(self, item_id: str) -> T | None:
        return self._cache.find(item_id)

    async def create(self, item: T) -> T:
        return await self._cache.create(item)

    async def update(self, item_id: str, patch: Mapping[str, Any]) -> T:
        return await self._cache.update(item_id, patch)

    async def remove(self, item_id: str) -> None:
        await self._cache.remove(item_id)


class ResourceCache(Generic[T]):
    """In-memory collection of one entity type, backed by a ResourceBackend."""

    def __init__(self, config: ResourceConfig[T]) -> None:
        reserved = set(dir(type(self)))
        extensions = list(config.custom_operations) + list(config.selectors)
        clashes = sorted(
            {n for n in extensions if n in reserved or extensions.count(n) > 1}
        )
        if clashes:
            raise ValueError(
                f"{config.name}: extension names clash with the cache surface "
                f"or with each other: {', '.join(clashes)}"
            )

        self._config = config
        self._items: tuple[T, ...] = ()
        self._state = AsyncState()
        self._inflight: asyncio.Task[AsyncState] | None = None
        self._listeners: list[Listener] = []
        self.last_load_failure: LoadFailure | None = None

    def __getattr__(self, name: str) -> Any:
        # Custom operations and selectors are part of the consumer surface.
        config = self.__dict__.get("_config")
        if config is not None:
            if name in config.custom_operations:
                return functools.partial(self.run_operation, name)
            if name in config.selectors:
                return functools.partial(self.select, name)
        raise AttributeError(f"{type(self).__name__!r} object has no attribute {name!r}")

    def __repr__(self) -> str:
        return (
            f"ResourceCache(name={self.name!r}, status={self._state.status!r}, "
            f"items={len(self._items)})"
        )

    # --- Read surface ---

    @property
    def name(self) -> str:
        return self._config.name

    @property
    def lazy(self) -> bool:
        return self._config.lazy

    @property
    def items(self) -> tuple[T, ...]:
        return self._items

    @property
    def async_state(self) -> AsyncState:
        return self._state

    @property
    def operations(self) -> tuple[str, ...]:
        return tuple(self._config.custom_operations)

    def find(self, item_id: str) -> T | None:
        index = self._index_of(item_id)
        return None if index is None else self._items[index]

    def select(self, selector: str, *args: Any, **kwargs: Any) -> Any:
        """Evaluate a registered selector against the current items."""
        return self._config.selectors[selector](self._items, *args, **kwargs)

    def add_listener(self, listener: Listener) -> Callable[[], None]:
        """Call ``listener(cache)`` after every state change. Returns an unsubscribe callable."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # --- Load lifecycle ---

    def start(self) -> asyncio.Task[AsyncState] | None:
        """Begin the initial load of an eager cache. Lazy caches wait for mount()."""
        if self._config.lazy:
            return None
        return self._ensure_load_task()

    async def mount(self) -> ResourceCache[T]:
        """First consumer access: load if never loaded, join a load in flight."""
        if self._state.status == "idle" or self._inflight is not None:
            await self.load()
        return self

    async def load(self) -> AsyncState:
        """Load the full collection, joining the in-flight load if there is one.

        Never raises for backend failures: the outcome is the returned state,
        and a failure is also kept as ``last_load_failure``.
        """
        task = self._ensure_load_task()
        return await asyncio.shield(task)

    async def refresh(self) -> AsyncState:
        """Reload unconditionally (manual retry after an error, periodic re-sync)."""
        return await self.load()

    def _ensure_load_task(self) -> asyncio.Task[AsyncState]:
        if self._inflight is None:
            self._set_state(
                AsyncState(status="loading", loaded_at=self._state.loaded_at)
            )
            self._inflight = asyncio.get_running_loop().create_task(
                self._run_load(), name=f"load:{self.name}"
            )
        return self._inflight

    async def _run_load(self) -> AsyncState:
        with self._operation("load"):
            try:
                items = await self._config.backend.load_all()
            except Exception as exc:
                failure = LoadFailure(self.name, str(exc) or type(exc).__name__)
                self.last_load_failure = failure
                logger.error("Load failed for %s: %s", self.name, failure.message)
                self._inflight = None
                self._set_state(
                    AsyncState(
                        status="error",
                        error=failure.message,
                        loaded_at=self._state.loaded_at,
                    )
                )
                self._call_hook(self._config.on_error, "load", failure)
                return self._state

            self._items = tuple(items)
            self.last_load_failure = None
            self._inflight = None
            self._set_state(
                AsyncState(status="ready", loaded_at=datetime.now(timezone.utc))
            )
            logger.debug("Loaded %d %s items", len(self._items), self.name)
            self._call_hook(self._config.on_success, "load", self._items)
            return self._state

    # --- Mutations (confirm-first) ---

    async def create(self, item: T) -> T:
        """Persist ``item`` and append the backend-returned entity."""
        with self._operation("create"):
            created = await self._call_backend(
                "create", self._config.backend.create, item
            )
            self._items = (*self._items, created)
            self._notify()
            self._call_hook(self._config.on_success, "create", created)
            return created

    async def update(self, item_id: str, patch: Mapping[str, Any]) -> T:
        """Apply ``patch`` at the backend, then replace the cached entity.

        The cached entity becomes the merge of local item, patch and backend
        result, the backend result winning where both define a field. A patch
        that the cached entity's model refuses raises ``MutationFailure``
        without calling the backend.
        """
        patch = {k: v for k, v in patch.items() if k != self._config.id_field}
        with self._operation("update"):
            cached = self.find(item_id)
            if cached is not None:
                self._check_update(cached, patch)
            updated = await self._call_backend(
                "update", self._config.backend.update, item_id, patch
            )
            index = self._index_of(item_id)
            if index is None:
                await self._handle_missing("update", item_id)
                self._call_hook(self._config.on_success, "update", updated)
                return updated

            existing = self._items[index]
            merged = type(existing).model_validate(
                {
                    **existing.model_dump(),
                    **patch,
                    **updated.model_dump(exclude_unset=True),
                }
            )
            items = list(self._items)
            items[index] = merged
            self._items = tuple(items)
            self._notify()
            self._call_hook(self._config.on_success, "update", merged)
            return merged

    async def remove(self, item_id: str) -> None:
        """Delete at the backend, then drop the entity from the items."""
        with self._operation("remove"):
            await self._call_backend("remove", self._config.backend.remove, item_id)
            if self._index_of(item_id) is None:
                await self._handle_missing("remove", item_id)
            else:
                self._items = tuple(
                    i for i in self._items if self._id_of(i) != item_id
                )
                self._notify()
            self._call_hook(self._config.on_success, "remove", item_id)

    async def run_operation(self, operation: str, *args: Any, **kwargs: Any) -> Any:
        """Run a registered custom operation with a CustomOperationContext."""
        fn = self._config.custom_operations[operation]
        with self._operation(operation):
            try:
                result = await fn(CustomOperationContext(self), *args, **kwargs)
            except ResourceError as exc:
                logger.warning("%s.%s failed: %s", self.name, operation, exc)
                self._call_hook(self._config.on_error, operation, exc)
                raise
            except Exception as exc:
                logger.exception("%s.%s raised", self.name, operation)
                self._call_hook(self._config.on_error, operation, exc)
                raise
            self._call_hook(self._config.on_success, operation, result)
            return result

    # --- Internals ---

    async def _call_backend(
        self, operation: str, fn: Callable[..., Awaitable[Any]], *args: Any
    ) -> Any:
        try:
            return await fn(*args)
        except Exception as exc:
            failure = MutationFailure(
                self.name, operation, str(exc) or type(exc).__name__
            )
            logger.error("%s %s failed: %s", self.name, operation, exc)
            self._call_hook(self._config.on_error, operation, failure)
            raise failure from exc

    def _check_update(self, existing: T, patch: Mapping[str, Any]) -> None:
        """Reject a patch that would make the cached entity invalid, before any write."""
        try:
            type(existing).model_validate({**existing.model_dump(), **patch})
        except ValidationError as exc:
            failure = MutationFailure(self.name, "update", f"invalid patch: {exc}")
            logger.error("%s update rejected before write: %s", self.name, exc)
            self._call_hook(self._config.on_error, "update", failure)
            raise failure from exc

    async def _handle_missing(self, operation: str, item_id: str) -> None:
        policy = self._config.missing_item_policy
        logger.warning(
            "%s %s: id %s is not cached; backend and cache may diverge (policy=%s)",
            self.name, operation, item_id, policy,
        )
        if policy == "raise":
            raise NotFound(self.name, item_id)
        if policy == "refresh":
            self._ensure_load_task()

    def _id_of(self, item: T) -> str:
        return str(getattr(item, self._config.id_field))

    def _index_of(self, item_id: str) -> int | None:
        for index, item in enumerate(self._items):
            if self._id_of(item) == item_id:
                return index
        return None

    def _set_state(self, state: AsyncState) -> None:
        self._state = state
        self._notify()

    def _notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener(self)
            except Exception:
                logger.exception("Listener failed for %s", self.name)

    def _call_hook(self, hook: Callable[..., None] | None, *args: Any) -> None:
        if hook is None:
            return
        try:
            hook(*args)
        except Exception:
            logger.exception("Hook failed for %s", self.name)

    @contextlib.contextmanager
    def _operation(self, operation: str) -> Iterator[None]:
        tokens = set_operation_context(self.name, operation)
        try:
            yield
        finally:
            reset_operation_context(tokens)
