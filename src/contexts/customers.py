# src/contexts/customers.py
"""Customer resource context: lazy, with loyalty point adjustment."""

from __future__ import annotations

from poscache.config.settings import Settings
from poscache.contexts.table_backend import TableBackend
from poscache.domain.models import Customer
from poscache.domain.records import CUSTOMER_MAPPER
from poscache.resources.cache import CustomOperationContext, ResourceConfig
from poscache.resources.errors import NotFound
from poscache.storage.base_record_store import BaseRecordStore
from poscache.views.selectors import find_by_id

TABLE = "customers"


async def adjust_loyalty_points(
    ctx: CustomOperationContext[Customer], customer_id: str, points_change: int
) -> Customer:
    """Add ``points_change`` (may be negative) to a balance that never drops below 0."""
    customer = ctx.find(customer_id)
    if customer is None:
        raise NotFound(ctx.name, customer_id)
    new_points = max(0, customer.loyalty_points + points_change)
    return await ctx.update(customer_id, {"loyalty_points": new_points})


def build_customers_config(
    store: BaseRecordStore, settings: Settings
) -> ResourceConfig[Customer]:
    return ResourceConfig(
        name="Customer",
        backend=TableBackend(store, TABLE, CUSTOMER_MAPPER),
        lazy=settings.is_lazy(TABLE, default=True),
        custom_operations={"adjust_loyalty_points": adjust_loyalty_points},
        selectors={"find_by_id": find_by_id},
        missing_item_policy=settings.missing_item_policy,
    )
