# tests/unit/domain/test_records.py
"""Tests for domain/records.py: entity <-> storage record mapping."""

from __future__ import annotations

import json

import pytest
from pydantic import ValidationError

from poscache.domain.models import (
    Category,
    Customer,
    InventoryHistoryEntry,
    Product,
    PurchaseOrder,
    PurchaseOrderItem,
)
from poscache.domain.records import (
    CATEGORY_MAPPER,
    CUSTOMER_MAPPER,
    INVENTORY_HISTORY_MAPPER,
    PRODUCT_MAPPER,
    PURCHASE_ORDER_MAPPER,
    from_json_text,
    int_to_bool,
    optional_text,
    to_json_text,
)


class TestCodecs:
    def test_optional_text_maps_empty_to_none(self):
        assert optional_text("") is None
        assert optional_text(None) is None
        assert optional_text("x") == "x"

    @pytest.mark.parametrize("value,expected", [(1, True), (0, False), (True, True), (None, False)])
    def test_int_to_bool(self, value, expected):
        assert int_to_bool(value) is expected

    def test_json_text(self):
        assert to_json_text(None) is None
        assert from_json_text(None) is None
        assert from_json_text("") is None
        assert from_json_text(to_json_text({"s-1": 4})) == {"s-1": 4}

    def test_from_json_text_passes_decoded_values_through(self):
        assert from_json_text({"s-1": 4}) == {"s-1": 4}


class TestCustomerMapper:
    def test_to_record_stores_empty_optionals_as_null(self):
        record = CUSTOMER_MAPPER.to_record(
            Customer(id="c1", name="Ana", email="a@x.lk", phone="", loyalty_points=5)
        )
        assert record["phone"] is None
        assert record["loyalty_points"] == 5

    def test_from_record_ignores_storage_only_columns(self):
        record = {
            "id": "c1",
            "name": "Ana",
            "email": "a@x.lk",
            "phone": None,
            "address": None,
            "loyalty_points": 12,
            "vat_number": None,
            "tin_number": None,
            "created_at": "2024-01-01 10:00:00",
        }
        customer = CUSTOMER_MAPPER.from_record(record)
        assert customer.loyalty_points == 12
        assert customer.phone is None

    def test_patch_to_record_drops_unknown_fields(self):
        assert CUSTOMER_MAPPER.patch_to_record({"loyalty_points": 3, "nickname": "A"}) == {
            "loyalty_points": 3
        }

    def test_validate_patch_coerces_and_drops_unknown_fields(self):
        checked = CUSTOMER_MAPPER.validate_patch({"loyalty_points": "7", "nickname": "A"})
        assert checked == {"loyalty_points": 7}

    @pytest.mark.parametrize("patch", [{"loyalty_points": -5}, {"email": None}, {"name": 3}])
    def test_validate_patch_rejects_values_the_model_refuses(self, patch):
        with pytest.raises(ValidationError):
            CUSTOMER_MAPPER.validate_patch(patch)


class TestProductMapper:
    def test_flags_and_store_map_encoding(self):
        product = Product(
            id="p1",
            name="Tea",
            category_id="c",
            price=10,
            stock=6,
            stock_by_store={"s-1": 4, "s-2": 2},
            track_stock=False,
            sku="T1",
        )
        record = PRODUCT_MAPPER.to_record(product)
        assert record["track_stock"] == 0
        assert record["available_for_sale"] == 1
        assert json.loads(record["stock_by_store"]) == {"s-1": 4, "s-2": 2}

        restored = PRODUCT_MAPPER.from_record(record)
        assert restored == product

    def test_patch_encodes_only_patched_fields(self):
        patch = PRODUCT_MAPPER.patch_to_record({"available_for_sale": False, "stock": 3})
        assert patch == {"available_for_sale": 0, "stock": 3}

    def test_columns_follow_field_order(self):
        assert PRODUCT_MAPPER.columns[:3] == ["id", "name", "category_id"]

    def test_invalid_record_is_rejected(self):
        record = PRODUCT_MAPPER.to_record(
            Product(id="p1", name="Tea", category_id="c", price=10, sku="T1")
        )
        record["price"] = -1
        with pytest.raises(ValidationError):
            PRODUCT_MAPPER.from_record(record)


class TestOtherMappers:
    def test_purchase_order_items_are_json(self):
        order = PurchaseOrder(
            id="po1",
            reference_no="PO-001",
            supplier_id="sup-1",
            supplier_name="Ceylon Traders",
            order_date="2024-03-01",
            items=[
                PurchaseOrderItem(id="i1", product_id="p1", quantity=10, unit_cost=2.5)
            ],
            total_value=25.0,
        )
        record = PURCHASE_ORDER_MAPPER.to_record(order)
        assert json.loads(record["items"])[0]["product_id"] == "p1"
        assert PURCHASE_ORDER_MAPPER.from_record(record) == order

    def test_category_flag(self):
        record = CATEGORY_MAPPER.to_record(Category(id="u", name="Other", is_uncategorized=True))
        assert record["is_uncategorized"] == 1
        assert CATEGORY_MAPPER.from_record(record).is_uncategorized is True

    def test_history_entry_without_product(self):
        entry = InventoryHistoryEntry(
            date="2024-03-01T10:00:00+00:00",
            type="grn",
            reference_id="GRN-1",
            description="Goods received",
        )
        record = INVENTORY_HISTORY_MAPPER.to_record(entry)
        assert record["product_id"] is None
        assert INVENTORY_HISTORY_MAPPER.from_record(record) == entry
