# src/contexts/purchase_orders.py
"""Purchase order resource context."""

from __future__ import annotations

from typing import get_args

from poscache.config.settings import Settings
from poscache.contexts.table_backend import TableBackend
from poscache.domain.models import PurchaseOrder, PurchaseOrderStatus
from poscache.domain.records import PURCHASE_ORDER_MAPPER
from poscache.resources.cache import CustomOperationContext, ResourceConfig
from poscache.resources.errors import NotFound
from poscache.storage.base_record_store import BaseRecordStore
from poscache.views.selectors import find_by_id, purchase_orders_by_supplier

TABLE = "purchase_orders"


async def set_status(
    ctx: CustomOperationContext[PurchaseOrder],
    order_id: str,
    status: PurchaseOrderStatus,
) -> PurchaseOrder:
    if status not in get_args(PurchaseOrderStatus):
        raise ValueError(f"Invalid purchase order status: {status!r}")
    if ctx.find(order_id) is None:
        raise NotFound(ctx.name, order_id)
    return await ctx.update(order_id, {"status": status})


def build_purchase_orders_config(
    store: BaseRecordStore, settings: Settings
) -> ResourceConfig[PurchaseOrder]:
    return ResourceConfig(
        name="Purchase Order",
        backend=TableBackend(store, TABLE, PURCHASE_ORDER_MAPPER),
        lazy=settings.is_lazy(TABLE, default=True),
        custom_operations={"set_status": set_status},
        selectors={
            "find_by_id": find_by_id,
            "by_supplier": purchase_orders_by_supplier,
        },
        missing_item_policy=settings.missing_item_policy,
    )
