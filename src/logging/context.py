# src/logging/context.py
"""Contextual logging support: attach resource and operation to log records."""

from __future__ import annotations

import contextvars
from dataclasses import dataclass
from typing import Any

# Set for the duration of a cache operation.
_resource: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "resource", default=None
)
_operation: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "operation", default=None
)


@dataclass
class LogContext:
    """Immutable snapshot of current logging context."""

    resource: str | None = None
    operation: str | None = None

    def as_dict(self) -> dict[str, Any]:
        """Return non-None fields as dict for JSON log injection."""
        return {k: v for k, v in self.__dict__.items() if v is not None}


def get_context() -> LogContext:
    """Snapshot current context variables."""
    return LogContext(resource=_resource.get(), operation=_operation.get())


def set_operation_context(
    resource: str, operation: str
) -> tuple[contextvars.Token, contextvars.Token]:
    """Set resource/operation context; returns tokens for reset_operation_context."""
    return _resource.set(resource), _operation.set(operation)


def reset_operation_context(
    tokens: tuple[contextvars.Token, contextvars.Token],
) -> None:
    """Restore the context that was active before set_operation_context."""
    resource_token, operation_token = tokens
    _operation.reset(operation_token)
    _resource.reset(resource_token)


def clear_context() -> None:
    """Reset all context variables."""
    _resource.set(None)
    _operation.set(None)
