# =============================================================================
# maintenance_core/offline/cache_manager.py
# Short-Lived In-Process Read Cache
# =============================================================================
"""
ReadCache - Keeps the result of recent reads for a short freshness window.

Keys are the entity name ("jobs") or the entity name plus a filter
("budgets:2569", "daily_expenses:2569:3:MTN"). Writes invalidate by entity
prefix, so one save drops every filtered view of that entity.
"""

from __future__ import annotations
import copy
import time
from typing import Any, Callable, Dict, Optional, Tuple
import logging

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 30.0


def cache_key(entity: str, *parts: Any) -> str:
    """Build a cache key: cache_key("budgets", 2569) -> "budgets:2569"."""
    return ":".join([entity, *(str(p) for p in parts)])


class ReadCache:
    """
    TTL map from cache key to (payload, stored_at).

    Payloads are deep-copied in and out; callers never share a cached object.
    """

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: Dict[str, Tuple[Any, float]] = {}
        self._hits = 0
        self._misses = 0

    def get(self, key: str) -> Optional[Any]:
        """
        Return a fresh cached payload, or None.

        Expired entries are dropped on access.
        """
        entry = self._entries.get(key)
        if entry is None:
            self._misses += 1
            return None

        payload, stored_at = entry
        if self._clock() - stored_at >= self.ttl_seconds:
            del self._entries[key]
            self._misses += 1
            return None

        self._hits += 1
        return copy.deepcopy(payload)

    def set(self, key: str, payload: Any) -> None:
        self._entries[key] = (copy.deepcopy(payload), self._clock())

    def invalidate(self, prefix: str) -> int:
        """
        Drop the entry named prefix and every "prefix:..." entry.

        Returns:
            Number of entries removed
        """
        doomed = [
            key for key in self._entries
            if key == prefix or key.startswith(prefix + ":")
        ]
        for key in doomed:
            del self._entries[key]
        if doomed:
            logger.debug(f"Invalidated {len(doomed)} cache entries for '{prefix}'")
        return len(doomed)

    def clear(self) -> None:
        self._entries.clear()

    def __contains__(self, key: str) -> bool:
        entry = self._entries.get(key)
        return entry is not None and self._clock() - entry[1] < self.ttl_seconds

    def __len__(self) -> int:
        return len(self._entries)

    def stats(self) -> Dict[str, Any]:
        """Get cache statistics."""
        return {
            "entries": len(self._entries),
            "hits": self._hits,
            "misses": self._misses,
            "ttl_seconds": self.ttl_seconds,
        }
