"""Observability – structured logging (structlog)."""
from governance_core.observability.logging.factory import configure_logging
from governance_core.observability.logging.processors import bind_scope, get_logger, render_enums

__all__ = ["bind_scope", "configure_logging", "get_logger", "render_enums"]
