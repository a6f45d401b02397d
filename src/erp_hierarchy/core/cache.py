"""Time-bounded cache for fetched tree lists, with prefix invalidation."""

import threading
import time
from collections.abc import Callable, Hashable
from typing import Any

from loguru import logger

from erp_hierarchy.config import LIST_STALE_SECONDS

CacheKey = tuple[Hashable, ...]


def list_key(domain_name: str, params: dict[str, Any] | None = None) -> CacheKey:
    """Cache key for a list query: ``(domain, "list", sorted params)``."""
    items = tuple(sorted((k, v) for k, v in (params or {}).items() if v is not None))
    return (domain_name, "list", items)


class ListCache:
    """Fetched lists stay fresh for ``stale_after`` seconds or until invalidated."""

    def __init__(
        self,
        *,
        stale_after: float = LIST_STALE_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.stale_after = stale_after
        self._clock = clock
        self._entries: dict[CacheKey, tuple[float, Any]] = {}
        self._lock = threading.Lock()

    def get(self, key: CacheKey) -> Any | None:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            stored_at, value = entry
            if self._clock() - stored_at >= self.stale_after:
                del self._entries[key]
                return None
            return value

    def put(self, key: CacheKey, value: Any) -> None:
        with self._lock:
            self._entries[key] = (self._clock(), value)

    def invalidate(self, prefix: CacheKey = ()) -> int:
        """Drop every entry whose key starts with ``prefix``. Returns the count."""
        with self._lock:
            doomed = [key for key in self._entries if key[: len(prefix)] == prefix]
            for key in doomed:
                del self._entries[key]
        if doomed:
            logger.debug("Invalidated {} cached lists under {!r}", len(doomed), prefix)
        return len(doomed)
