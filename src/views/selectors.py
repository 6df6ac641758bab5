# src/views/selectors.py
"""Pure derived views over cached collections.

Nothing here holds state: every function is re-evaluated against the
items it is given, so staleness is governed by the owning cache's
AsyncState alone.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol, TypeVar

from poscache.domain.models import InventoryHistoryEntry, Product, PurchaseOrder

DEFAULT_LOW_STOCK_THRESHOLD = 10


class _HasId(Protocol):
    id: str


E = TypeVar("E", bound=_HasId)


def find_by_id(items: Sequence[E], item_id: str) -> E | None:
    return next((item for item in items if item.id == item_id), None)


def total_stock(product: Product) -> int:
    """Sum of per-store stock when tracked per store, else the total field."""
    if product.stock_by_store:
        return sum(product.stock_by_store.values())
    return product.stock


def effective_stock(
    items: Sequence[Product], product_id: str, store_id: str | None = None
) -> int:
    """Stock of a product, optionally in one store.

    With a store id and a per-store map, the store's entry is used and a
    missing store counts as 0. Otherwise the product's total stock. An
    unknown product has 0 stock.
    """
    product = find_by_id(items, product_id)
    if product is None:
        return 0
    if store_id and product.stock_by_store is not None:
        return product.stock_by_store.get(store_id, 0)
    return product.stock


def low_stock(
    items: Sequence[Product], threshold: int = DEFAULT_LOW_STOCK_THRESHOLD
) -> list[Product]:
    """Products at or below ``threshold``, lowest stock first."""
    return sorted(
        (p for p in items if p.stock <= threshold), key=lambda p: p.stock
    )


def purchase_orders_by_supplier(
    items: Sequence[PurchaseOrder], supplier_id: str
) -> list[PurchaseOrder]:
    return [po for po in items if po.supplier_id == supplier_id]


def history_for_product(
    items: Sequence[InventoryHistoryEntry], product_id: str
) -> list[InventoryHistoryEntry]:
    """History entries of one product, newest first."""
    return sorted(
        (e for e in items if e.product_id == product_id),
        key=lambda e: e.date,
        reverse=True,
    )
