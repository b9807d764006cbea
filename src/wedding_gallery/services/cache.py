"""Simple cache abstractions."""

from collections import OrderedDict
from dataclasses import dataclass
from typing import Protocol


class Cache(Protocol):
    """Cache interface for decoded images keyed by source."""

    def get(self, key: str) -> object | None:
        """Return a cached value if present."""

    def set(self, key: str, value: object) -> None:
        """Store a value, evicting older entries if needed."""

    def clear(self) -> None:
        """Drop every cached entry."""


@dataclass
class LruCache(Cache):
    """Bounded in-memory cache that evicts the least recently used entry."""

    capacity: int
    _entries: OrderedDict[str, object]

    def __init__(self, capacity: int = 32) -> None:
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        self.capacity = capacity
        self._entries = OrderedDict()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: str) -> bool:
        return key in self._entries

    def get(self, key: str) -> object | None:
        """Return a cached value and mark it most recently used."""
        if key not in self._entries:
            return None
        self._entries.move_to_end(key)
        return self._entries[key]

    def set(self, key: str, value: object) -> None:
        """Store a value, evicting the oldest entry past capacity."""
        self._entries[key] = value
        self._entries.move_to_end(key)
        while len(self._entries) > self.capacity:
            self._entries.popitem(last=False)

    def clear(self) -> None:
        """Drop every cached entry."""
        self._entries.clear()
