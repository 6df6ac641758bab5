# src/domain/records.py
"""Entity <-> storage record mapping.

Each entity type has one RecordMapper describing its columns. Mapping is
two-way and lossless for every field the UI reads: booleans are stored as
0/1, empty optional text as NULL, nested structures as JSON text. Entity
fields without a column are dropped on write.
"""

from __future__ import annotations

import json
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from typing import Annotated, Any, Generic, TypeVar

from pydantic import BaseModel, TypeAdapter

from poscache.domain.models import (
    Category,
    Customer,
    InventoryHistoryEntry,
    Product,
    PurchaseOrder,
    Store,
    Supplier,
)

T = TypeVar("T", bound=BaseModel)


# --- Value codecs ---


def _identity(value: Any) -> Any:
    return value


def optional_text(value: Any) -> Any:
    """Empty strings are stored as NULL."""
    return value or None


def bool_to_int(value: Any) -> int:
    return 1 if value else 0


def int_to_bool(value: Any) -> bool:
    return value == 1 or value is True


def _json_default(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json")
    raise TypeError(f"Not JSON serializable: {type(value).__name__}")


def to_json_text(value: Any) -> str | None:
    if value is None:
        return None
    return json.dumps(value, default=_json_default, ensure_ascii=False)


def from_json_text(value: Any) -> Any:
    if value is None or value == "":
        return None
    if isinstance(value, str):
        return json.loads(value)
    # JSON-file and memory backends may hand back already-decoded values.
    return value


@dataclass(frozen=True)
class Column:
    """One entity field and its storage column."""

    field: str
    column: str | None = None
    encode: Callable[[Any], Any] = _identity
    decode: Callable[[Any], Any] = _identity

    @property
    def name(self) -> str:
        return self.column or self.field


def plain(field: str, column: str | None = None) -> Column:
    return Column(field, column)


def opt_text(field: str, column: str | None = None) -> Column:
    return Column(field, column, encode=optional_text, decode=optional_text)


def flag(field: str, column: str | None = None) -> Column:
    return Column(field, column, encode=bool_to_int, decode=int_to_bool)


def json_blob(field: str, column: str | None = None) -> Column:
    return Column(field, column, encode=to_json_text, decode=from_json_text)


class RecordMapper(Generic[T]):
    """Two-way transform between an entity model and a flat storage record."""

    def __init__(self, model: type[T], columns: Sequence[Column]) -> None:
        self.model = model
        self._columns = {c.field: c for c in columns}
        self._by_name = {c.name: c for c in columns}
        self._adapters: dict[str, TypeAdapter[Any]] = {}

    @property
    def columns(self) -> list[str]:
        return list(self._by_name)

    def to_record(self, entity: T) -> dict[str, Any]:
        return {
            c.name: c.encode(getattr(entity, c.field))
            for c in self._columns.values()
        }

    def validate_patch(self, patch: Mapping[str, Any]) -> dict[str, Any]:
        """Check each patched field against the entity model. Unknown fields are dropped.

        Raises:
            pydantic.ValidationError: If a value violates its field's type or constraints.
        """
        return {
            f: self._adapter(f).validate_python(v)
            for f, v in patch.items()
            if f in self._columns and f in self.model.model_fields
        }

    def patch_to_record(self, patch: Mapping[str, Any]) -> dict[str, Any]:
        """Encode only the patched fields. Unknown fields are dropped."""
        return {
            self._columns[f].name: self._columns[f].encode(v)
            for f, v in patch.items()
            if f in self._columns
        }

    def from_record(self, record: Mapping[str, Any]) -> T:
        data = {
            c.field: c.decode(record[name])
            for name, c in self._by_name.items()
            if name in record
        }
        return self.model.model_validate(data)

    def _adapter(self, field: str) -> TypeAdapter[Any]:
        if field not in self._adapters:
            info = self.model.model_fields[field]
            annotation: Any = info.annotation
            if info.metadata:
                annotation = Annotated[(annotation, *info.metadata)]
            self._adapters[field] = TypeAdapter(annotation)
        return self._adapters[field]


# --- Per-entity mappers ---

CUSTOMER_MAPPER = RecordMapper(
    Customer,
    [
        plain("id"),
        plain("name"),
        plain("email"),
        opt_text("phone"),
        opt_text("address"),
        plain("loyalty_points"),
        opt_text("vat_number"),
        opt_text("tin_number"),
    ],
)

PRODUCT_MAPPER = RecordMapper(
    Product,
    [
        plain("id"),
        plain("name"),
        plain("category_id"),
        plain("price"),
        plain("cost"),
        plain("wholesale_price"),
        plain("stock"),
        json_blob("stock_by_store"),
        flag("track_stock"),
        flag("available_for_sale"),
        plain("sku"),
        opt_text("image_url"),
    ],
)

STORE_MAPPER = RecordMapper(
    Store,
    [
        plain("id"),
        plain("name"),
        plain("address"),
        opt_text("phone"),
        opt_text("email"),
    ],
)

SUPPLIER_MAPPER = RecordMapper(
    Supplier,
    [
        plain("id"),
        plain("name"),
        opt_text("contact_person"),
        opt_text("email"),
        opt_text("phone"),
        opt_text("address"),
        opt_text("notes"),
        opt_text("vat_number"),
        opt_text("tin_number"),
    ],
)

CATEGORY_MAPPER = RecordMapper(
    Category,
    [
        plain("id"),
        plain("name"),
        flag("is_uncategorized"),
    ],
)

PURCHASE_ORDER_MAPPER = RecordMapper(
    PurchaseOrder,
    [
        plain("id"),
        plain("reference_no"),
        plain("supplier_id"),
        plain("supplier_name"),
        plain("order_date"),
        opt_text("expected_delivery_date"),
        plain("status"),
        json_blob("items"),
        plain("total_value"),
        opt_text("notes"),
    ],
)

INVENTORY_HISTORY_MAPPER = RecordMapper(
    InventoryHistoryEntry,
    [
        plain("id"),
        plain("date"),
        plain("type"),
        plain("reference_id"),
        plain("description"),
        opt_text("product_id"),
        opt_text("product_name"),
        plain("quantity_change"),
        plain("current_stock"),
        opt_text("store_id"),
        opt_text("store_name"),
        opt_text("user_id"),
        opt_text("user_name"),
    ],
)
