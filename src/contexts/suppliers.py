# src/contexts/suppliers.py
"""Supplier resource context."""

from __future__ import annotations

from poscache.config.settings import Settings
from poscache.contexts.table_backend import TableBackend
from poscache.domain.models import Supplier
from poscache.domain.records import SUPPLIER_MAPPER
from poscache.resources.cache import ResourceConfig
from poscache.storage.base_record_store import BaseRecordStore
from poscache.views.selectors import find_by_id

TABLE = "suppliers"


def build_suppliers_config(
    store: BaseRecordStore, settings: Settings
) -> ResourceConfig[Supplier]:
    return ResourceConfig(
        name="Supplier",
        backend=TableBackend(store, TABLE, SUPPLIER_MAPPER),
        lazy=settings.is_lazy(TABLE, default=True),
        selectors={"find_by_id": find_by_id},
        missing_item_policy=settings.missing_item_policy,
    )
