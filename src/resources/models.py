# src/resources/models.py
"""Resource cache state models: AsyncState, LoadStatus, MissingItemPolicy."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict

LoadStatus = Literal["idle", "loading", "ready", "error"]

# What update/remove do when the target id is not in the cached items.
MissingItemPolicy = Literal["ignore", "raise", "refresh"]


class AsyncState(BaseModel):
    """Load-lifecycle state of one resource cache, shared by all consumers."""

    model_config = ConfigDict(frozen=True)

    status: LoadStatus = "idle"
    error: str | None = None
    loaded_at: datetime | None = None

    @property
    def is_loading(self) -> bool:
        return self.status == "loading"

    @property
    def is_ready(self) -> bool:
        return self.status == "ready"

    @property
    def has_error(self) -> bool:
        return self.status == "error"
