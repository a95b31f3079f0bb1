"""Application store – DocumentStore and Transaction ports.

The document store is an external collaborator: a hierarchical key/value
store addressed by slash-separated paths (``collection/doc/collection/doc``).
Records are plain ``dict`` objects.  Keys of an :meth:`DocumentStore.update`
may be dotted (``"skills.welding"``) to address one entry of a nested map.

Every method is an ``await`` point.  Implementations raise
:class:`~governance_core.kernel.errors.StoreUnavailableError` (or another
:class:`~governance_core.kernel.errors.InfrastructureError`) when the backend
cannot be reached; callers in this package never retry those.
"""

from __future__ import annotations

import abc
from typing import Any, Awaitable, Callable, TypeVar

T = TypeVar("T")

Record = dict[str, Any]


class Transaction(abc.ABC):
    """Read-modify-write unit handed to :meth:`DocumentStore.run_transaction`.

    Reads are tracked; writes are buffered and applied atomically, in the
    order they were issued, when the transaction function returns.  If any
    document read inside the transaction changed in the meantime the commit
    raises :class:`~governance_core.kernel.errors.ConcurrencyConflictError`
    and nothing is written.
    """

    @abc.abstractmethod
    async def get(self, path: str) -> Record | None: ...

    @abc.abstractmethod
    def set(self, path: str, record: Record) -> None: ...

    @abc.abstractmethod
    def update(self, path: str, partial: Record) -> None: ...

    @abc.abstractmethod
    def add(self, collection_path: str, record: Record) -> str:
        """Stage a new document under *collection_path*; return its generated id."""

    @abc.abstractmethod
    def delete(self, path: str) -> None: ...


class DocumentStore(abc.ABC):
    """Port – hosted document database."""

    @abc.abstractmethod
    async def get(self, path: str) -> Record | None: ...

    @abc.abstractmethod
    async def set(self, path: str, record: Record) -> None: ...

    @abc.abstractmethod
    async def update(self, path: str, partial: Record) -> None:
        """Merge *partial* into an existing document; raise ``NotFoundError`` if absent."""

    @abc.abstractmethod
    async def add(self, collection_path: str, record: Record) -> str: ...

    @abc.abstractmethod
    async def delete(self, path: str) -> None: ...

    @abc.abstractmethod
    async def list(self, collection_path: str) -> list[tuple[str, Record]]:
        """Return ``(doc_id, record)`` pairs of a collection in creation order."""

    @abc.abstractmethod
    async def run_transaction(self, fn: Callable[[Transaction], Awaitable[T]]) -> T:
        """Run *fn* inside one atomic transaction and return its result."""


__all__ = ["DocumentStore", "Record", "Transaction"]
