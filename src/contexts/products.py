# src/contexts/products.py
"""Product resource context.

Stock changes go through ``update`` like any other mutation and leave an
inventory history entry behind when a history cache is wired in.
"""

from __future__ import annotations

import functools
import logging
from datetime import datetime, timezone
from typing import TYPE_CHECKING

from poscache.config.settings import Settings
from poscache.contexts.table_backend import TableBackend
from poscache.domain.models import InventoryHistoryEntry, InventoryHistoryType, Product
from poscache.domain.records import PRODUCT_MAPPER
from poscache.resources.cache import CustomOperationContext, ResourceConfig
from poscache.resources.errors import NotFound
from poscache.storage.base_record_store import BaseRecordStore
from poscache.views.selectors import effective_stock, find_by_id, low_stock, total_stock

if TYPE_CHECKING:
    from poscache.resources.cache import ResourceCache

logger = logging.getLogger(__name__)

TABLE = "products"


class ProductOperations:
    """Custom operations of the product context, bound to an optional history cache."""

    def __init__(
        self, history: ResourceCache[InventoryHistoryEntry] | None = None
    ) -> None:
        self._history = history

    def as_dict(self) -> dict:
        return {
            "add_product": self.add_product,
            "delete_product": self.delete_product,
            "update_stock": self.update_stock,
            "reassign_category": self.reassign_category,
        }

    async def add_product(
        self,
        ctx: CustomOperationContext[Product],
        product: Product,
        user_id: str | None = None,
    ) -> Product:
        """Create a product and record its initial stock."""
        created = await ctx.create(product)
        initial = total_stock(created)
        await self._record(
            created,
            history_type="initial_stock",
            reference_id=created.id,
            description=(
                f'New product "{created.name}" added with initial stock of {initial}.'
            ),
            quantity_change=initial,
            current_stock=initial,
            user_id=user_id,
        )
        return created

    async def delete_product(
        self,
        ctx: CustomOperationContext[Product],
        product_id: str,
        user_id: str | None = None,
    ) -> None:
        """Remove a product and record the stock written off with it."""
        product = ctx.find(product_id)
        if product is None:
            raise NotFound(ctx.name, product_id)
        removed = total_stock(product)
        await ctx.remove(product_id)
        await self._record(
            product,
            history_type="product_deleted",
            reference_id=product_id,
            description=(
                f'Product "{product.name}" deleted. '
                f"All {removed} units removed from stock."
            ),
            quantity_change=-removed,
            current_stock=0,
            user_id=user_id,
        )

    async def update_stock(
        self,
        ctx: CustomOperationContext[Product],
        product_id: str,
        new_stock: int,
        history_type: InventoryHistoryType = "product_edit",
        reference_id: str | None = None,
        reason: str | None = None,
        store_id: str | None = None,
        user_id: str | None = None,
    ) -> Product:
        """Set a product's stock, per store when the product tracks stores.

        With a store id and a per-store map the store's quantity is set and
        the total is recomputed as the sum of the map.
        """
        product = ctx.find(product_id)
        if product is None:
            raise NotFound(ctx.name, product_id)

        old_stock = product.stock
        if store_id and product.stock_by_store is not None:
            by_store = dict(product.stock_by_store)
            quantity_change = new_stock - by_store.get(store_id, 0)
            by_store[store_id] = new_stock
            patch = {"stock_by_store": by_store, "stock": sum(by_store.values())}
        else:
            quantity_change = new_stock - product.stock
            patch = {"stock": new_stock}

        updated = await ctx.update(product_id, patch)

        if quantity_change != 0:
            await self._record(
                updated,
                history_type=history_type,
                reference_id=reference_id or product_id,
                description=reason or f"Stock updated from {old_stock} to {new_stock}",
                quantity_change=quantity_change,
                current_stock=new_stock,
                store_id=store_id,
                user_id=user_id,
            )
        return updated

    async def reassign_category(
        self,
        ctx: CustomOperationContext[Product],
        old_category_id: str,
        new_category_id: str,
    ) -> int:
        """Move every product of one category to another. Returns the count moved."""
        to_move = [p.id for p in ctx.items if p.category_id == old_category_id]
        for product_id in to_move:
            await ctx.update(product_id, {"category_id": new_category_id})
        return len(to_move)

    async def _record(
        self,
        product: Product,
        *,
        history_type: InventoryHistoryType,
        reference_id: str,
        description: str,
        quantity_change: int,
        current_stock: int,
        store_id: str | None = None,
        user_id: str | None = None,
    ) -> None:
        if self._history is None:
            return
        await self._history.create(
            InventoryHistoryEntry(
                date=datetime.now(timezone.utc).isoformat(),
                type=history_type,
                reference_id=reference_id,
                description=description,
                product_id=product.id,
                product_name=product.name,
                quantity_change=quantity_change,
                current_stock=current_stock,
                store_id=store_id,
                user_id=user_id,
            )
        )
        logger.debug("Recorded %s for product %s", history_type, product.id)


def build_products_config(
    store: BaseRecordStore,
    settings: Settings,
    history: ResourceCache[InventoryHistoryEntry] | None = None,
) -> ResourceConfig[Product]:
    return ResourceConfig(
        name="Product",
        backend=TableBackend(store, TABLE, PRODUCT_MAPPER),
        lazy=settings.is_lazy(TABLE, default=True),
        custom_operations=ProductOperations(history).as_dict(),
        selectors={
            "find_by_id": find_by_id,
            "effective_stock": effective_stock,
            "low_stock": functools.partial(
                low_stock, threshold=settings.low_stock_threshold
            ),
        },
        missing_item_policy=settings.missing_item_policy,
    )
