"""Application projections – ProjectionVersionRegistry.

One record per logical projection at ``projectionVersions/{name}``::

    {projectionName, lastEventOffset, readModelVersion, updatedAt}

``lastEventOffset`` counts the events applied to that projection and only
ever grows; ``readModelVersion`` is the ISO timestamp of the last stamp.
"""

from __future__ import annotations

import dataclasses

from governance_core.application.store import DocumentStore
from governance_core.kernel.time import Clock, SystemClock


def version_path(name: str) -> str:
    return f"projectionVersions/{name}"


@dataclasses.dataclass(frozen=True)
class ProjectionVersion:
    projection_name: str
    last_event_offset: int
    read_model_version: str


class ProjectionVersionRegistry:
    def __init__(self, store: DocumentStore, clock: Clock | None = None) -> None:
        self._store = store
        self._clock = clock or SystemClock()
        self._names: set[str] = set()

    async def get(self, name: str) -> ProjectionVersion | None:
        record = await self._store.get(version_path(name))
        if record is None:
            return None
        return ProjectionVersion(
            projection_name=record["projectionName"],
            last_event_offset=record["lastEventOffset"],
            read_model_version=record["readModelVersion"],
        )

    async def next_offset(self, name: str) -> int:
        current = await self.get(name)
        return 1 if current is None else current.last_event_offset + 1

    async def stamp(self, name: str, offset: int) -> ProjectionVersion:
        """Record that *name* has applied events up to *offset*.

        Stamps never move backwards: a lower offset leaves the stored one.
        """
        current = await self.get(name)
        if current is not None and current.last_event_offset >= offset:
            return current
        now = self._clock.now().isoformat()
        await self._store.set(
            version_path(name),
            {
                "projectionName": name,
                "lastEventOffset": offset,
                "readModelVersion": now,
                "updatedAt": now,
            },
        )
        self._names.add(name)
        return ProjectionVersion(name, offset, now)

    async def reset(self) -> None:
        """Drop every stamp written through this registry (before a rebuild)."""
        for name in sorted(self._names):
            await self._store.delete(version_path(name))
        self._names.clear()

    async def all(self) -> dict[str, ProjectionVersion]:
        """Versions stamped through this registry, keyed by projection name."""
        out: dict[str, ProjectionVersion] = {}
        for name in sorted(self._names):
            version = await self.get(name)
            if version is not None:
                out[name] = version
        return out


__all__ = ["ProjectionVersion", "ProjectionVersionRegistry", "version_path"]
