# tests/integration/logging/test_int_logging_subsystem.py
"""Integration tests: cache operations emit structured logs with their context."""

from __future__ import annotations

import io
import json

import pytest

from poscache.logging.logger import setup_logging


def _lines(stream: io.StringIO) -> list[dict]:
    return [json.loads(line) for line in stream.getvalue().splitlines() if line.strip()]


class TestCacheLogging:
    @pytest.mark.asyncio
    async def test_load_failure_logged_with_resource_context(self, container, monkeypatch):
        stream = io.StringIO()
        setup_logging(level="DEBUG", log_format="json", stream=stream)

        async def broken(table):
            raise OSError("disk unplugged")

        monkeypatch.setattr(container.store, "load_all", broken)
        await container.customers.mount()

        errors = [e for e in _lines(stream) if e["level"] == "ERROR"]
        assert errors
        assert errors[0]["context"] == {"resource": "Customer", "operation": "load"}
        assert "disk unplugged" in errors[0]["message"]

    @pytest.mark.asyncio
    async def test_missing_item_warning(self, stocked_container):
        stream = io.StringIO()
        setup_logging(level="WARNING", log_format="json", stream=stream)
        products = await stocked_container.products.mount()
        await stocked_container.store.insert("products", {
            **(await stocked_container.store.load_all("products"))[0], "id": "late",
        })

        await products.update("late", {"stock": 1})

        (warning,) = _lines(stream)
        assert warning["level"] == "WARNING"
        assert warning["context"]["operation"] == "update"
        assert "late" in warning["message"]

    @pytest.mark.asyncio
    async def test_text_format_to_file(self, container, tmp_path):
        log_file = tmp_path / "poscache.log"
        setup_logging(level="DEBUG", log_format="text", log_file=log_file, stream=io.StringIO())
        await container.stores.mount()

        content = log_file.read_text(encoding="utf-8")
        assert "[Store]" in content
        assert "(load)" in content
