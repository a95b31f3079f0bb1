"""Testing fakes – UnavailableDocumentStore."""
from __future__ import annotations

from typing import Iterable

from governance_core.application.store import InMemoryDocumentStore
from governance_core.kernel.errors import StoreUnavailableError


class UnavailableDocumentStore(InMemoryDocumentStore):
    """In-memory store that fails with :class:`StoreUnavailableError` on demand.

    While ``available`` is ``False`` every operation in *operations* (all of
    them when ``None``) raises before touching any data.  Flip ``available``
    to simulate the store coming back.

    Example::

        store = UnavailableDocumentStore(operations={"commit"})
        with pytest.raises(StoreUnavailableError):
            await service.add_xp("alice", "welding", 10, XpContext("org-1"))
    """

    def __init__(
        self,
        *,
        available: bool = False,
        operations: Iterable[str] | None = None,
    ) -> None:
        super().__init__()
        self.available = available
        self._operations = frozenset(operations) if operations is not None else None
        self.failures = 0

    async def _io(self, op: str, path: str) -> None:
        if not self.available and (self._operations is None or op in self._operations):
            self.failures += 1
            raise StoreUnavailableError(message=f"injected outage during {op} {path}".rstrip())
        await super()._io(op, path)


__all__ = ["UnavailableDocumentStore"]
