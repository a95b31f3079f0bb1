"""Application store – document store port and in-memory implementation."""
from governance_core.application.store.memory import InMemoryDocumentStore, merge_update
from governance_core.application.store.port import DocumentStore, Record, Transaction

__all__ = ["DocumentStore", "InMemoryDocumentStore", "Record", "Transaction", "merge_update"]
