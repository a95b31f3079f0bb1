"""Application events – in-process event bus."""
from governance_core.application.events.bus import PUBLISHED_COUNTER, EventBus, Handler, Unsubscribe

__all__ = ["PUBLISHED_COUNTER", "EventBus", "Handler", "Unsubscribe"]
