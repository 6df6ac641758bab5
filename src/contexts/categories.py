# src/contexts/categories.py
"""Category resource context: eager, small and read by most product screens."""

from __future__ import annotations

from poscache.config.settings import Settings
from poscache.contexts.table_backend import TableBackend
from poscache.domain.models import Category
from poscache.domain.records import CATEGORY_MAPPER
from poscache.resources.cache import ResourceConfig
from poscache.storage.base_record_store import BaseRecordStore
from poscache.views.selectors import find_by_id

TABLE = "categories"


def build_categories_config(
    store: BaseRecordStore, settings: Settings
) -> ResourceConfig[Category]:
    return ResourceConfig(
        name="Category",
        backend=TableBackend(store, TABLE, CATEGORY_MAPPER),
        lazy=settings.is_lazy(TABLE, default=False),
        selectors={"find_by_id": find_by_id},
        missing_item_policy=settings.missing_item_policy,
    )
