# src/contexts/stores.py
"""Store resource context: eager, every screen needs the store list."""

from __future__ import annotations

from poscache.config.settings import Settings
from poscache.contexts.table_backend import TableBackend
from poscache.domain.models import Store
from poscache.domain.records import STORE_MAPPER
from poscache.resources.cache import ResourceConfig
from poscache.storage.base_record_store import BaseRecordStore
from poscache.views.selectors import find_by_id

TABLE = "stores"


def build_stores_config(
    store: BaseRecordStore, settings: Settings
) -> ResourceConfig[Store]:
    return ResourceConfig(
        name="Store",
        backend=TableBackend(store, TABLE, STORE_MAPPER),
        lazy=settings.is_lazy(TABLE, default=False),
        selectors={"find_by_id": find_by_id},
        missing_item_policy=settings.missing_item_policy,
    )
