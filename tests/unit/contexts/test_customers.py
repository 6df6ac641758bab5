# tests/unit/contexts/test_customers.py
"""Tests for contexts/customers.py: loyalty point adjustment."""

from __future__ import annotations

import pytest
import pytest_asyncio

from poscache.domain.models import Customer
from poscache.domain.records import CUSTOMER_MAPPER
from poscache.resources.errors import MutationFailure, NotFound


@pytest_asyncio.fixture
async def customers(container, sample_customer):
    await container.store.insert("customers", CUSTOMER_MAPPER.to_record(sample_customer))
    return await container.customers.mount()


class TestAdjustLoyaltyPoints:
    @pytest.mark.asyncio
    async def test_customers_are_lazy(self, container):
        assert container.customers.lazy is True
        assert container.customers.async_state.status == "idle"

    @pytest.mark.asyncio
    async def test_adds_points(self, customers):
        updated = await customers.adjust_loyalty_points("cust-1", 15)
        assert updated.loyalty_points == 55
        assert customers.find("cust-1").loyalty_points == 55

    @pytest.mark.asyncio
    async def test_balance_floors_at_zero(self, customers):
        updated = await customers.adjust_loyalty_points("cust-1", -100)
        assert updated.loyalty_points == 0

    @pytest.mark.asyncio
    async def test_change_is_persisted(self, container, customers):
        await customers.adjust_loyalty_points("cust-1", -10)
        rows = await container.store.load_all("customers")
        assert rows[0]["loyalty_points"] == 30

    @pytest.mark.asyncio
    async def test_unknown_customer(self, customers):
        with pytest.raises(NotFound):
            await customers.adjust_loyalty_points("ghost", 5)

    @pytest.mark.asyncio
    async def test_find_by_id_selector(self, customers):
        assert customers.find_by_id("cust-1").name == "Ana Perera"

    @pytest.mark.asyncio
    async def test_rejected_update_keeps_resource_loadable(self, container, customers):
        with pytest.raises(MutationFailure):
            await customers.update("cust-1", {"loyalty_points": -5})

        rows = await container.store.load_all("customers")
        assert rows[0]["loyalty_points"] == 40

        state = await customers.refresh()
        assert state.status == "ready"
        assert customers.find("cust-1").loyalty_points == 40

    @pytest.mark.asyncio
    async def test_rejected_update_of_uncached_customer(self, container):
        await container.store.insert("customers", CUSTOMER_MAPPER.to_record(
            Customer(id="late", name="Late", email="late@x.lk")
        ))
        customers = container.customers

        with pytest.raises(MutationFailure):
            await customers.update("late", {"loyalty_points": -1})

        state = await customers.refresh()
        assert state.is_ready
        assert customers.find("late").loyalty_points == 0
