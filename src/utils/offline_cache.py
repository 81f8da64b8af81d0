"""Read-through cache for offline display.

Keeps the last successful payload for a few fixed keys. When a live fetch
fails the stored payload is returned, tagged with when it was fetched and
marked as not live, so callers can never mistake it for fresh data. Entries
are replaced wholesale on the next successful fetch; nothing is merged.

This is a client-side component: a dashboard or other API consumer wraps its
reads in ``OfflineCache.fetch``. The server itself never calls it.
"""

import logging
import threading
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Dict, MutableMapping, Optional, Tuple

import pytz

from core.exceptions import InvalidArgumentError

logger = logging.getLogger(__name__)

CACHE_KEYS = ("courses", "assignments", "progress")


@dataclass(frozen=True)
class CachedResponse:
    data: Any
    fetched_at: datetime
    is_live: bool


class OfflineCache:
    """Last-known-good payload store, one entry per key.

    Thread-safe; the storage mapping is pluggable so a persistent key-value
    store can stand in for the default dict.
    """

    def __init__(self, storage: Optional[MutableMapping[str, Tuple[Any, datetime]]] = None):
        self._storage = storage if storage is not None else {}
        self._lock = threading.Lock()

    @staticmethod
    def _check_key(key: str) -> None:
        if key not in CACHE_KEYS:
            raise InvalidArgumentError(f"Unknown cache key: {key}")

    def fetch(self, key: str, fetcher: Callable[[], Any]) -> CachedResponse:
        """Fetch live data, falling back to the last stored payload.

        Args:
            key: One of CACHE_KEYS.
            fetcher: Zero-argument callable returning the live payload.

        Returns:
            CachedResponse with is_live=True for fresh data, False for a
            fallback.

        Raises:
            InvalidArgumentError: If the key is unknown.
            Exception: Whatever the fetcher raised, when nothing is stored.
        """
        self._check_key(key)
        try:
            data = fetcher()
        except Exception:
            with self._lock:
                entry = self._storage.get(key)
            if entry is None:
                raise
            logger.warning("Live fetch for '%s' failed, serving copy from %s", key, entry[1])
            return CachedResponse(data=entry[0], fetched_at=entry[1], is_live=False)

        fetched_at = datetime.now(pytz.utc)
        with self._lock:
            self._storage[key] = (data, fetched_at)
        return CachedResponse(data=data, fetched_at=fetched_at, is_live=True)

    def get(self, key: str) -> Optional[CachedResponse]:
        """Return the stored entry without fetching, or None."""
        self._check_key(key)
        with self._lock:
            entry = self._storage.get(key)
        if entry is None:
            return None
        return CachedResponse(data=entry[0], fetched_at=entry[1], is_live=False)

    def clear(self) -> None:
        with self._lock:
            count = len(self._storage)
            self._storage.clear()
        logger.info("Offline cache cleared (%d entries removed)", count)

    def get_stats(self) -> Dict[str, Any]:
        with self._lock:
            return {
                "size": len(self._storage),
                "keys": sorted(self._storage.keys()),
            }
