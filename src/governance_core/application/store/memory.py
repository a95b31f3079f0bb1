"""Application store – InMemoryDocumentStore.

Each document carries a revision number that increases on every write
(deletions included).  Transactions remember the revision of every path
they read and refuse to commit when one of them moved.
"""

from __future__ import annotations

import asyncio
import copy
import itertools
from typing import Any, Awaitable, Callable, TypeVar
from uuid import uuid4

from governance_core.application.store.port import DocumentStore, Record, Transaction
from governance_core.kernel.errors import ConcurrencyConflictError, NotFoundError, ValidationError

T = TypeVar("T")


def _segments(path: str) -> list[str]:
    parts = [p for p in path.strip("/").split("/") if p]
    if not parts:
        raise ValidationError(f"empty store path {path!r}")
    return parts


def _doc_path(path: str) -> str:
    parts = _segments(path)
    if len(parts) % 2:
        raise ValidationError(f"{path!r} is a collection path, expected a document path")
    return "/".join(parts)


def _collection_path(path: str) -> str:
    parts = _segments(path)
    if not len(parts) % 2:
        raise ValidationError(f"{path!r} is a document path, expected a collection path")
    return "/".join(parts)


def merge_update(record: Record, partial: Record) -> Record:
    """Return a copy of *record* with *partial* merged in (dotted keys nest)."""
    merged = copy.deepcopy(record)
    for key, value in partial.items():
        target = merged
        *parents, leaf = key.split(".")
        for parent in parents:
            child = target.get(parent)
            if not isinstance(child, dict):
                child = {}
                target[parent] = child
            target = child
        target[leaf] = copy.deepcopy(value)
    return merged


class InMemoryDocumentStore(DocumentStore):
    """Process-local :class:`DocumentStore` for tests and local development."""

    def __init__(self) -> None:
        self._docs: dict[str, Record] = {}
        self._revisions: dict[str, int] = {}
        self._clock = itertools.count(1)

    # ------------------------------------------------------------------
    # Hooks
    # ------------------------------------------------------------------

    async def _io(self, op: str, path: str) -> None:  # noqa: ARG002
        """Suspension point before every operation; subclasses inject faults here."""
        await asyncio.sleep(0)

    # ------------------------------------------------------------------
    # DocumentStore
    # ------------------------------------------------------------------

    async def get(self, path: str) -> Record | None:
        path = _doc_path(path)
        await self._io("get", path)
        return self._read(path)

    async def set(self, path: str, record: Record) -> None:
        path = _doc_path(path)
        await self._io("set", path)
        self._write(path, record)

    async def update(self, path: str, partial: Record) -> None:
        path = _doc_path(path)
        await self._io("update", path)
        self._apply_update(path, partial)

    async def add(self, collection_path: str, record: Record) -> str:
        collection_path = _collection_path(collection_path)
        await self._io("add", collection_path)
        doc_id = self._new_id()
        self._write(f"{collection_path}/{doc_id}", record)
        return doc_id

    async def delete(self, path: str) -> None:
        path = _doc_path(path)
        await self._io("delete", path)
        self._remove(path)

    async def list(self, collection_path: str) -> list[tuple[str, Record]]:
        collection_path = _collection_path(collection_path)
        await self._io("list", collection_path)
        prefix = collection_path + "/"
        depth = collection_path.count("/") + 2
        return [
            (path.rsplit("/", 1)[1], copy.deepcopy(record))
            for path, record in self._docs.items()
            if path.startswith(prefix) and path.count("/") + 1 == depth
        ]

    async def run_transaction(self, fn: Callable[[Transaction], Awaitable[T]]) -> T:
        tx = _InMemoryTransaction(self)
        result = await fn(tx)
        await self._io("commit", "")
        self._commit(tx)
        return result

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    def revision(self, path: str) -> int:
        """Current revision of *path* (``0`` when it was never written)."""
        return self._revisions.get(_doc_path(path), 0)

    def dump(self) -> dict[str, Record]:
        """Deep copy of every stored document keyed by path."""
        return copy.deepcopy(self._docs)

    # ------------------------------------------------------------------
    # Internals (synchronous: a commit never yields mid-way)
    # ------------------------------------------------------------------

    def _new_id(self) -> str:
        return uuid4().hex[:20]

    def _read(self, path: str) -> Record | None:
        record = self._docs.get(path)
        return copy.deepcopy(record) if record is not None else None

    def _write(self, path: str, record: Record) -> None:
        self._docs[path] = copy.deepcopy(record)
        self._revisions[path] = next(self._clock)

    def _apply_update(self, path: str, partial: Record) -> None:
        existing = self._docs.get(path)
        if existing is None:
            raise NotFoundError("document", path)
        self._docs[path] = merge_update(existing, partial)
        self._revisions[path] = next(self._clock)

    def _remove(self, path: str) -> None:
        if self._docs.pop(path, None) is not None:
            self._revisions[path] = next(self._clock)

    def _commit(self, tx: "_InMemoryTransaction") -> None:
        for path, seen in tx.reads.items():
            current = self._revisions.get(path, 0)
            if current != seen:
                raise ConcurrencyConflictError(path, seen, current)
        for op, path, record in tx.writes:
            if op == "set":
                self._write(path, record)
            elif op == "update":
                self._apply_update(path, record)
            else:
                self._remove(path)


class _InMemoryTransaction(Transaction):
    def __init__(self, store: InMemoryDocumentStore) -> None:
        self._store = store
        self.reads: dict[str, int] = {}
        self.writes: list[tuple[str, str, Any]] = []
        self._staged: dict[str, Record | None] = {}

    async def get(self, path: str) -> Record | None:
        path = _doc_path(path)
        if path in self._staged:
            staged = self._staged[path]
            return copy.deepcopy(staged) if staged is not None else None
        await self._store._io("get", path)
        self.reads.setdefault(path, self._store._revisions.get(path, 0))
        return self._store._read(path)

    def set(self, path: str, record: Record) -> None:
        path = _doc_path(path)
        self.writes.append(("set", path, copy.deepcopy(record)))
        self._staged[path] = copy.deepcopy(record)

    def update(self, path: str, partial: Record) -> None:
        path = _doc_path(path)
        base = self._staged[path] if path in self._staged else self._store._docs.get(path)
        if base is None:
            raise NotFoundError("document", path)
        self.writes.append(("update", path, copy.deepcopy(partial)))
        self._staged[path] = merge_update(base, partial)

    def add(self, collection_path: str, record: Record) -> str:
        collection_path = _collection_path(collection_path)
        doc_id = self._store._new_id()
        self.set(f"{collection_path}/{doc_id}", record)
        return doc_id

    def delete(self, path: str) -> None:
        path = _doc_path(path)
        self.writes.append(("delete", path, None))
        self._staged[path] = None


__all__ = ["InMemoryDocumentStore", "merge_update"]
