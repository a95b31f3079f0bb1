"""Observability – structlog processors and get_logger helper."""
from __future__ import annotations

import enum
from typing import Any

import structlog


def render_enums(
    logger: Any,           # noqa: ARG001
    method_name: str,      # noqa: ARG001
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """Replace enum members (event types, tiers, statuses) by their values."""
    for key, value in event_dict.items():
        if isinstance(value, enum.Enum):
            event_dict[key] = value.value
    return event_dict


def get_logger(name: str | None = None, **initial_values: Any) -> Any:
    """Return a structlog logger, optionally pre-bound with *initial_values*.

    Parameters
    ----------
    name:
        Logger name (typically ``__name__`` of the calling module).
    **initial_values:
        Key-value pairs bound on every log line (``scope="acme"``).
    """
    logger = structlog.get_logger(name)
    if initial_values:
        logger = logger.bind(**initial_values)
    return logger


def bind_scope(scope_id: str) -> None:
    """Bind *scope_id* to every log line emitted from the current context."""
    structlog.contextvars.bind_contextvars(scope=scope_id)


__all__ = ["bind_scope", "get_logger", "render_enums"]
