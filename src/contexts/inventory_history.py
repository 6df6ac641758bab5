# src/contexts/inventory_history.py
"""Inventory history resource context. Entries are append-only in practice."""

from __future__ import annotations

from poscache.config.settings import Settings
from poscache.contexts.table_backend import TableBackend
from poscache.domain.models import InventoryHistoryEntry
from poscache.domain.records import INVENTORY_HISTORY_MAPPER
from poscache.resources.cache import ResourceConfig
from poscache.storage.base_record_store import BaseRecordStore
from poscache.views.selectors import history_for_product

TABLE = "inventory_history"


def build_inventory_history_config(
    store: BaseRecordStore, settings: Settings
) -> ResourceConfig[InventoryHistoryEntry]:
    return ResourceConfig(
        name="Inventory History",
        backend=TableBackend(store, TABLE, INVENTORY_HISTORY_MAPPER),
        lazy=settings.is_lazy(TABLE, default=True),
        selectors={"for_product": history_for_product},
        missing_item_policy=settings.missing_item_policy,
    )
