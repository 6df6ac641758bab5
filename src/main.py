# src/main.py
"""CLI entry point: list, low-stock, stock, loyalty commands.

Usage:
    poscache list <resource>
    poscache low-stock [--threshold N]
    poscache stock <product_id> [--store STORE_ID]
    poscache loyalty <customer_id> <delta>

Records are printed to stdout one JSON object per line. Logs go to stderr.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from pydantic import ValidationError

from poscache.config.settings import (
    RESOURCE_NAMES,
    ConfigurationError,
    Settings,
    load_settings,
)
from poscache.contexts.container import ResourceContainer
from poscache.logging.logger import setup_logging
from poscache.resources.cache import ResourceCache
from poscache.version import __version__

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    try:
        settings = load_settings()
    except (ConfigurationError, ValidationError) as exc:
        print(f"Invalid configuration: {exc}", file=sys.stderr)
        return 1

    _setup_logging(settings, args.verbose)

    if not hasattr(args, "func"):
        parser.print_help()
        return 1

    args.settings = settings
    try:
        return asyncio.run(args.func(args))
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130
    except Exception as exc:
        logger.error("Fatal error: %s", exc, exc_info=args.verbose)
        return 1


def _build_parser() -> argparse.ArgumentParser:
    """Build CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="poscache",
        description=f"poscache v{__version__}: inspect and adjust cached POS records",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command")

    # --- list ---
    p_list = subparsers.add_parser("list", help="Print every record of a resource")
    p_list.add_argument("resource", choices=RESOURCE_NAMES, help="Resource name")
    p_list.set_defaults(func=_cmd_list)

    # --- low-stock ---
    p_low = subparsers.add_parser(
        "low-stock", help="Print products at or below the stock threshold",
    )
    p_low.add_argument(
        "--threshold", type=int, default=None,
        help="Stock threshold (default: POSCACHE_LOW_STOCK_THRESHOLD)",
    )
    p_low.set_defaults(func=_cmd_low_stock)

    # --- stock ---
    p_stock = subparsers.add_parser("stock", help="Print a product's effective stock")
    p_stock.add_argument("product_id", help="Product id")
    p_stock.add_argument(
        "--store", dest="store_id", default=None,
        help="Store id for per-store stock",
    )
    p_stock.set_defaults(func=_cmd_stock)

    # --- loyalty ---
    p_loyalty = subparsers.add_parser(
        "loyalty", help="Add (or subtract) loyalty points for a customer",
    )
    p_loyalty.add_argument("customer_id", help="Customer id")
    p_loyalty.add_argument("delta", type=int, help="Points to add; negative to subtract")
    p_loyalty.set_defaults(func=_cmd_loyalty)

    return parser


def _setup_logging(settings: Settings, verbose: bool) -> None:
    setup_logging(
        level="DEBUG" if verbose else settings.log_level,
        log_format=settings.log_format,
        log_file=settings.log_file,
        rotation=settings.log_rotation,
        retention=settings.log_retention,
        stream=sys.stderr,
    )


async def _mount(cache: ResourceCache) -> bool:
    """Mount a cache and report a load failure on stderr."""
    await cache.mount()
    if cache.async_state.has_error:
        print(f"Error: {cache.name}: {cache.async_state.error}", file=sys.stderr)
        return False
    return True


async def _cmd_list(args: argparse.Namespace) -> int:
    container = ResourceContainer.from_settings(args.settings)
    try:
        cache = container.get(args.resource)
        if not await _mount(cache):
            return 1
        for item in cache.items:
            print(item.model_dump_json())
        return 0
    finally:
        container.close()


async def _cmd_low_stock(args: argparse.Namespace) -> int:
    container = ResourceContainer.from_settings(args.settings)
    try:
        products = container.products
        if not await _mount(products):
            return 1
        threshold = args.threshold
        if threshold is None:
            threshold = args.settings.low_stock_threshold
        for product in products.low_stock(threshold=threshold):
            print(product.model_dump_json())
        return 0
    finally:
        container.close()


async def _cmd_stock(args: argparse.Namespace) -> int:
    container = ResourceContainer.from_settings(args.settings)
    try:
        products = container.products
        if not await _mount(products):
            return 1
        if products.find(args.product_id) is None:
            print(f"Error: product not found: {args.product_id}", file=sys.stderr)
            return 1
        print(products.effective_stock(args.product_id, store_id=args.store_id))
        return 0
    finally:
        container.close()


async def _cmd_loyalty(args: argparse.Namespace) -> int:
    container = ResourceContainer.from_settings(args.settings)
    try:
        customers = container.customers
        if not await _mount(customers):
            return 1
        updated = await customers.adjust_loyalty_points(args.customer_id, args.delta)
        print(updated.model_dump_json())
        return 0
    finally:
        container.close()


if __name__ == "__main__":
    sys.exit(main())
