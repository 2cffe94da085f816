"""Identity-keyed containers.

Snapshot bookkeeping must distinguish two equal-but-distinct objects, and must
accept unhashable keys like lists. Keys are stored by ``id()`` alongside a
strong reference to the key itself, so an id cannot be recycled by the garbage
collector while the container is alive.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import Any


class IdentityMap[K, V]:
    _entries: dict[int, tuple[K, V]]

    def __init__(self) -> None:
        self._entries = {}

    def put(self, key: K, value: V) -> None:
        self._entries[id(key)] = (key, value)

    def put_if_absent(self, key: K, value: V) -> V:
        """Store value unless key is already present. Returns the value that ends up stored."""
        existing = self._entries.get(id(key))
        if existing is not None:
            return existing[1]
        self._entries[id(key)] = (key, value)
        return value

    def get(self, key: K, default: V | None = None) -> V | None:
        entry = self._entries.get(id(key))
        return entry[1] if entry is not None else default

    def __contains__(self, key: Any) -> bool:
        return id(key) in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def keys(self) -> list[K]:
        return [k for k, _ in self._entries.values()]

    def items(self) -> Iterator[tuple[K, V]]:
        return iter(self._entries.values())


class IdentitySet[K]:
    _members: dict[int, K]

    def __init__(self) -> None:
        self._members = {}

    def add(self, key: K) -> None:
        self._members[id(key)] = key

    def discard(self, key: K) -> None:
        self._members.pop(id(key), None)

    def __contains__(self, key: Any) -> bool:
        return id(key) in self._members

    def __len__(self) -> int:
        return len(self._members)

    def __iter__(self) -> Iterator[K]:
        # dicts keep insertion order, so this is the order objects were added
        return iter(list(self._members.values()))
