# src/config/settings.py
"""Typed configuration loaded from .env via pydantic-settings.

Single source of truth for deployment-specific settings: record store
backend, resource laziness, cache consistency policy and logging.
Every field can be set through a ``POSCACHE_``-prefixed environment
variable (``POSCACHE_STORE_BACKEND=json``).
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

RESOURCE_NAMES: tuple[str, ...] = (
    "customers",
    "products",
    "stores",
    "suppliers",
    "categories",
    "purchase_orders",
    "inventory_history",
)


class ConfigurationError(Exception):
    """Raised when configuration is internally inconsistent."""


class Settings(BaseSettings):
    """Application settings loaded from .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="POSCACHE_",
        extra="ignore",
    )

    # === Record store ===
    store_backend: Literal["memory", "json", "sqlite"] = "sqlite"
    store_root: Path = Path("~/.poscache/data")
    sqlite_filename: str = "poscache.db"

    # === Resource caches ===
    # Comma-separated resource names loaded lazily. Empty keeps per-context defaults.
    lazy_resources: str = ""
    missing_item_policy: Literal["ignore", "raise", "refresh"] = "ignore"

    # === Derived views ===
    low_stock_threshold: int = 10

    # === Logging ===
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_format: Literal["json", "text"] = "json"
    log_file: Path | None = None
    log_rotation: str = "10MB"
    log_retention: int = 30

    # --- Validators ---

    @field_validator("low_stock_threshold")
    @classmethod
    def validate_low_stock_threshold(cls, v: int) -> int:  # noqa: N805
        if v < 0:
            raise ValueError("low_stock_threshold must be >= 0")
        return v

    @model_validator(mode="after")
    def validate_config_consistency(self) -> Settings:
        """Validate cross-field consistency rules."""
        errors: list[str] = []

        unknown = [n for n in self.lazy_resources_list if n not in RESOURCE_NAMES]
        if unknown:
            errors.append(
                f"LAZY_RESOURCES has unknown resources: {', '.join(unknown)}"
            )

        if self.store_backend == "sqlite" and not self.sqlite_filename.strip():
            errors.append("SQLITE_FILENAME must be set when STORE_BACKEND=sqlite")

        if errors:
            raise ConfigurationError("; ".join(errors))

        return self

    # --- Helpers ---

    @property
    def lazy_resources_list(self) -> list[str]:
        """Parse comma-separated lazy resource names."""
        return [r.strip() for r in self.lazy_resources.split(",") if r.strip()]

    @property
    def sqlite_path(self) -> Path:
        return Path(self.store_root).expanduser() / self.sqlite_filename

    def is_lazy(self, resource: str, default: bool) -> bool:
        """Laziness for a resource: explicit override list wins over the default."""
        overrides = self.lazy_resources_list
        if not overrides:
            return default
        return resource in overrides


def load_settings(**overrides: object) -> Settings:
    """Load settings from .env with optional overrides.

    Args:
        **overrides: Field-level overrides (for testing or scripted runs).

    Returns:
        Validated Settings instance.

    Raises:
        ConfigurationError: If configuration is internally inconsistent.
    """
    return Settings(**overrides)  # type: ignore[arg-type]
