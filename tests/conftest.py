# tests/conftest.py
"""Shared test fixtures for all unit and integration tests.

Provides sample POS entities, settings isolated from any .env file, and
containers over the in-memory record store.
"""

from __future__ import annotations

import logging

import pytest
import pytest_asyncio

from poscache.config.settings import Settings
from poscache.contexts.container import ResourceContainer
from poscache.domain.models import Category, Customer, Product
from poscache.storage.memory_store import MemoryRecordStore


# === FIXTURES: Settings and containers ===


@pytest.fixture(autouse=True)
def _reset_logging():
    """Drop handlers installed by setup_logging() so streams do not leak between tests."""
    yield
    root = logging.getLogger("poscache")
    for handler in root.handlers:
        handler.close()
    root.handlers.clear()


@pytest.fixture
def settings() -> Settings:
    """Memory-backed settings that ignore any local .env file."""
    return Settings(_env_file=None, store_backend="memory")  # type: ignore[call-arg]


@pytest.fixture
def memory_store() -> MemoryRecordStore:
    return MemoryRecordStore()


@pytest.fixture
def container(memory_store: MemoryRecordStore, settings: Settings) -> ResourceContainer:
    return ResourceContainer(memory_store, settings)


# === FIXTURES: Sample data ===


@pytest.fixture
def sample_customer() -> Customer:
    return Customer(
        id="cust-1",
        name="Ana Perera",
        email="ana@example.com",
        phone="0771234567",
        loyalty_points=40,
    )


@pytest.fixture
def sample_products() -> list[Product]:
    return [
        Product(id="p-1", name="Tea 100g", category_id="cat-1", price=450.0, stock=3, sku="TEA-100"),
        Product(id="p-2", name="Sugar 1kg", category_id="cat-1", price=320.0, stock=25, sku="SUG-1"),
        Product(
            id="p-3",
            name="Milk powder",
            category_id="cat-2",
            price=1200.0,
            stock=8,
            stock_by_store={"s-1": 5, "s-2": 3},
            sku="MLK-400",
        ),
        Product(id="p-4", name="Rice 5kg", category_id="cat-2", price=1500.0, stock=0, sku="RCE-5"),
    ]


@pytest.fixture
def sample_categories() -> list[Category]:
    return [
        Category(id="cat-1", name="Groceries"),
        Category(id="cat-2", name="Staples"),
        Category(id="cat-0", name="Uncategorized", is_uncategorized=True),
    ]


@pytest_asyncio.fixture
async def stocked_container(
    container: ResourceContainer,
    sample_products: list[Product],
    sample_categories: list[Category],
) -> ResourceContainer:
    """Container whose store already holds the sample products and categories."""
    from poscache.domain.records import CATEGORY_MAPPER, PRODUCT_MAPPER

    for product in sample_products:
        await container.store.insert("products", PRODUCT_MAPPER.to_record(product))
    for category in sample_categories:
        await container.store.insert("categories", CATEGORY_MAPPER.to_record(category))
    return container
