"""Key-value persistence service.

The core never touches a storage backend directly; it receives something
satisfying `PersistenceService`. Values are strings (JSON documents).
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class PersistenceService(Protocol):
    """Async keyed storage scoped to one device or client."""

    async def get(self, key: str) -> str | None: ...

    async def set(self, key: str, value: str) -> None: ...

    async def remove(self, key: str) -> None: ...


class InMemoryStore:
    """Dict-backed store for tests and single-process runs."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(initial or {})

    async def get(self, key: str) -> str | None:
        return self._data.get(key)

    async def set(self, key: str, value: str) -> None:
        self._data[key] = value

    async def remove(self, key: str) -> None:
        self._data.pop(key, None)

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def __len__(self) -> int:
        return len(self._data)
