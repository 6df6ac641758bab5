# tests/unit/contexts/test_container.py
"""Tests for contexts/container.py."""

from __future__ import annotations

import pytest

from poscache.config.settings import RESOURCE_NAMES, Settings
from poscache.contexts.container import ResourceContainer
from poscache.storage.memory_store import MemoryRecordStore


class TestResourceContainer:
    def test_one_cache_per_resource(self, container):
        assert set(container.caches) == set(RESOURCE_NAMES)
        assert container.get("stores") is container.stores

    def test_unknown_resource(self, container):
        with pytest.raises(KeyError, match="invoices"):
            container.get("invoices")

    def test_default_laziness(self, container):
        eager = {name for name, cache in container.caches.items() if not cache.lazy}
        assert eager == {"stores", "categories"}

    def test_lazy_override(self, memory_store):
        settings = Settings(_env_file=None, store_backend="memory", lazy_resources="stores")
        container = ResourceContainer(memory_store, settings)
        assert container.stores.lazy is True
        assert container.customers.lazy is False

    def test_containers_do_not_share_state(self, settings):
        a = ResourceContainer(MemoryRecordStore(), settings)
        b = ResourceContainer(MemoryRecordStore(), settings)
        assert a.customers is not b.customers

    def test_from_settings(self, settings):
        container = ResourceContainer.from_settings(settings)
        assert isinstance(container.store, MemoryRecordStore)

    @pytest.mark.asyncio
    async def test_start_loads_eager_caches_only(self, stocked_container):
        await stocked_container.start()
        assert stocked_container.categories.async_state.is_ready
        assert len(stocked_container.categories.items) == 3
        assert stocked_container.stores.async_state.is_ready
        assert stocked_container.products.async_state.status == "idle"

    @pytest.mark.asyncio
    async def test_start_without_wait(self, container):
        await container.start(wait=False)
        assert container.stores.async_state.is_loading
        await container.stores.mount()
        assert container.stores.async_state.is_ready
