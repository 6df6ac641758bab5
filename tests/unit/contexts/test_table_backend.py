# tests/unit/contexts/test_table_backend.py
"""Tests for contexts/table_backend.py over the in-memory store."""

from __future__ import annotations

import uuid
from unittest.mock import AsyncMock

import pytest
from pydantic import ValidationError

from poscache.contexts.table_backend import TableBackend
from poscache.domain.models import Customer, Product
from poscache.domain.records import CUSTOMER_MAPPER, PRODUCT_MAPPER
from poscache.storage.base_record_store import RecordNotFoundError


class TestTableBackend:
    @pytest.mark.asyncio
    async def test_create_assigns_uuid_when_id_empty(self, memory_store):
        backend = TableBackend(memory_store, "customers", CUSTOMER_MAPPER)
        created = await backend.create(Customer(name="Ana", email="a@x.lk"))
        assert uuid.UUID(created.id)
        assert backend.table == "customers"

    @pytest.mark.asyncio
    async def test_create_keeps_given_id(self, memory_store, sample_customer):
        backend = TableBackend(memory_store, "customers", CUSTOMER_MAPPER)
        created = await backend.create(sample_customer)
        assert created == sample_customer

    @pytest.mark.asyncio
    async def test_update_only_touches_patched_columns(self, memory_store, sample_products):
        backend = TableBackend(memory_store, "products", PRODUCT_MAPPER)
        await backend.create(sample_products[2])
        updated = await backend.update("p-3", {"available_for_sale": False, "note": "x"})
        assert updated.available_for_sale is False
        assert updated.stock_by_store == {"s-1": 5, "s-2": 3}

        stored = (await memory_store.load_all("products"))[0]
        assert stored["available_for_sale"] == 0
        assert "note" not in stored

    @pytest.mark.asyncio
    async def test_load_all_decodes_records(self, memory_store, sample_products):
        backend = TableBackend(memory_store, "products", PRODUCT_MAPPER)
        for product in sample_products:
            await backend.create(product)
        loaded = await backend.load_all()
        assert {p.id for p in loaded} == {p.id for p in sample_products}
        assert all(isinstance(p, Product) for p in loaded)

    @pytest.mark.asyncio
    async def test_store_errors_propagate(self, memory_store):
        backend = TableBackend(memory_store, "customers", CUSTOMER_MAPPER)
        with pytest.raises(RecordNotFoundError):
            await backend.remove("ghost")

    @pytest.mark.asyncio
    async def test_delegates_to_store(self, sample_customer):
        store = AsyncMock()
        store.insert.return_value = CUSTOMER_MAPPER.to_record(sample_customer)
        backend = TableBackend(store, "customers", CUSTOMER_MAPPER)
        await backend.create(sample_customer)
        store.insert.assert_awaited_once_with(
            "customers", CUSTOMER_MAPPER.to_record(sample_customer)
        )

    @pytest.mark.asyncio
    async def test_invalid_patch_never_reaches_store(self, memory_store, sample_customer):
        backend = TableBackend(memory_store, "customers", CUSTOMER_MAPPER)
        await backend.create(sample_customer)

        with pytest.raises(ValidationError):
            await backend.update("cust-1", {"loyalty_points": -5})

        (row,) = await memory_store.load_all("customers")
        assert row["loyalty_points"] == 40
        assert (await backend.load_all())[0].loyalty_points == 40

    @pytest.mark.asyncio
    async def test_patch_values_are_coerced_before_encoding(self, memory_store, sample_products):
        backend = TableBackend(memory_store, "products", PRODUCT_MAPPER)
        await backend.create(sample_products[0])
        updated = await backend.update("p-1", {"stock": "12", "track_stock": False})
        assert updated.stock == 12
        (row,) = await memory_store.load_all("products")
        assert row["stock"] == 12
        assert row["track_stock"] == 0
