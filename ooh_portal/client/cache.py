from __future__ import annotations

from collections.abc import Callable, Hashable
from typing import Any

CacheKey = tuple[Hashable, ...]


class QueryCache:
    def __init__(self) -> None:
        self._entries: dict[CacheKey, Any] = {}

    def __contains__(self, key: CacheKey) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def get_or_fetch(self, key: CacheKey, fetch: Callable[[], Any]) -> Any:
        if key not in self._entries:
            self._entries[key] = fetch()
        return self._entries[key]

    def invalidate(self, *prefix: Hashable) -> int:
        stale = [key for key in self._entries if key[: len(prefix)] == prefix]
        for key in stale:
            del self._entries[key]
        return len(stale)

    def clear(self) -> None:
        self._entries.clear()
