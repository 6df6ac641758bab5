# src/domain/models.py
"""Point-of-sale domain models shared by contexts, views and the CLI.

Entities carry a string ``id``. An empty id means "not yet persisted": the
table backend assigns a UUID on create.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

# === PARTIES ===


class Customer(BaseModel):
    """A retail customer with a loyalty balance."""

    id: str = ""
    name: str
    email: str
    phone: str | None = None
    address: str | None = None
    loyalty_points: int = Field(default=0, ge=0)
    vat_number: str | None = None
    tin_number: str | None = None


class Supplier(BaseModel):
    """A goods supplier."""

    id: str = ""
    name: str
    contact_person: str | None = None
    email: str | None = None
    phone: str | None = None
    address: str | None = None
    notes: str | None = None
    vat_number: str | None = None
    tin_number: str | None = None


class Store(BaseModel):
    """A physical store (stock partition)."""

    id: str = ""
    name: str
    address: str
    phone: str | None = None
    email: str | None = None


# === CATALOG ===


class Category(BaseModel):
    """Product category. One category may be flagged as the fallback bucket."""

    id: str = ""
    name: str
    is_uncategorized: bool = False


class Product(BaseModel):
    """A sellable product.

    ``stock`` is the total across stores when ``stock_by_store`` is set,
    otherwise the single-store stock level.
    """

    id: str = ""
    name: str
    category_id: str
    price: float = Field(ge=0)
    cost: float = Field(default=0.0, ge=0)
    wholesale_price: float = Field(default=0.0, ge=0)
    stock: int = 0
    stock_by_store: dict[str, int] | None = None
    track_stock: bool = True
    available_for_sale: bool = True
    sku: str
    image_url: str | None = None


# === PURCHASING ===

PurchaseOrderStatus = Literal["pending", "completed", "cancelled"]


class PurchaseOrderItem(BaseModel):
    """One line of a purchase order."""

    id: str
    product_id: str
    product_name: str | None = None
    quantity: int = Field(gt=0)
    unit_cost: float = Field(ge=0)


class PurchaseOrder(BaseModel):
    """A purchase order placed with a supplier."""

    id: str = ""
    reference_no: str
    supplier_id: str
    supplier_name: str
    order_date: str  # ISO date
    expected_delivery_date: str | None = None
    status: PurchaseOrderStatus = "pending"
    items: list[PurchaseOrderItem] = Field(default_factory=list)
    total_value: float = 0.0
    notes: str | None = None


# === INVENTORY HISTORY ===

InventoryHistoryType = Literal[
    "grn",
    "stock_adjustment_increase",
    "stock_adjustment_decrease",
    "transfer_out",
    "transfer_in",
    "sale",
    "refund",
    "initial_stock",
    "product_edit",
    "product_deleted",
]


class InventoryHistoryEntry(BaseModel):
    """Audit line for a stock movement."""

    id: str = ""
    date: str  # ISO timestamp
    type: InventoryHistoryType
    reference_id: str
    description: str
    product_id: str | None = None
    product_name: str | None = None
    quantity_change: int | None = None
    current_stock: int | None = None
    store_id: str | None = None
    store_name: str | None = None
    user_id: str | None = None
    user_name: str | None = None
