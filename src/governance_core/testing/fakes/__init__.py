"""Testing fakes – store outages and recording bus handlers."""
from governance_core.testing.fakes.handlers import RecordingHandler
from governance_core.testing.fakes.store import UnavailableDocumentStore

__all__ = ["RecordingHandler", "UnavailableDocumentStore"]
