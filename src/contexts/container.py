# src/contexts/container.py
"""Resource context container.

Built once at application start and passed to whatever needs a resource
cache. Each container owns one instance per entity type, so test
containers never share state.

Usage:
    container = ResourceContainer.from_settings(load_settings())
    await container.start()
    customers = await container.customers.mount()
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from poscache.config.settings import Settings
from poscache.contexts.categories import build_categories_config
from poscache.contexts.customers import build_customers_config
from poscache.contexts.inventory_history import build_inventory_history_config
from poscache.contexts.products import build_products_config
from poscache.contexts.purchase_orders import build_purchase_orders_config
from poscache.contexts.stores import build_stores_config
from poscache.contexts.suppliers import build_suppliers_config
from poscache.domain.models import (
    Category,
    Customer,
    InventoryHistoryEntry,
    Product,
    PurchaseOrder,
    Store,
    Supplier,
)
from poscache.resources.cache import ResourceCache
from poscache.storage.base_record_store import BaseRecordStore
from poscache.storage.store_factory import create_record_store

logger = logging.getLogger(__name__)


class ResourceContainer:
    """Owns the record store and one resource cache per entity type."""

    def __init__(self, store: BaseRecordStore, settings: Settings) -> None:
        self.settings = settings
        self.store = store

        self.inventory_history: ResourceCache[InventoryHistoryEntry] = ResourceCache(
            build_inventory_history_config(store, settings)
        )
        self.customers: ResourceCache[Customer] = ResourceCache(
            build_customers_config(store, settings)
        )
        self.products: ResourceCache[Product] = ResourceCache(
            build_products_config(store, settings, history=self.inventory_history)
        )
        self.stores: ResourceCache[Store] = ResourceCache(
            build_stores_config(store, settings)
        )
        self.suppliers: ResourceCache[Supplier] = ResourceCache(
            build_suppliers_config(store, settings)
        )
        self.categories: ResourceCache[Category] = ResourceCache(
            build_categories_config(store, settings)
        )
        self.purchase_orders: ResourceCache[PurchaseOrder] = ResourceCache(
            build_purchase_orders_config(store, settings)
        )

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> ResourceContainer:
        """Create the configured record store and wire every context to it."""
        settings = settings or Settings()
        return cls(create_record_store(settings), settings)

    @property
    def caches(self) -> dict[str, ResourceCache[Any]]:
        return {
            "customers": self.customers,
            "products": self.products,
            "stores": self.stores,
            "suppliers": self.suppliers,
            "categories": self.categories,
            "purchase_orders": self.purchase_orders,
            "inventory_history": self.inventory_history,
        }

    def get(self, resource: str) -> ResourceCache[Any]:
        try:
            return self.caches[resource]
        except KeyError:
            raise KeyError(
                f"Unknown resource {resource!r}; expected one of {', '.join(self.caches)}"
            ) from None

    async def start(self, wait: bool = True) -> None:
        """Begin loading every eager cache. Lazy caches load on first mount()."""
        tasks = [t for t in (c.start() for c in self.caches.values()) if t is not None]
        logger.info("Started %d eager resource loads", len(tasks))
        if wait and tasks:
            await asyncio.gather(*tasks)

    def close(self) -> None:
        self.store.close()
