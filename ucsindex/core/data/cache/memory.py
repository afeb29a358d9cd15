"""Thread-safe in-memory TTL cache."""

import time
from collections import OrderedDict
from collections.abc import Callable
from threading import Lock
from typing import Any


class ThreadSafeInMemoryCache:
    """Thread-safe LRU cache whose entries expire after a TTL."""

    def __init__(self, max_size: int = 256, default_ttl: int = 300, clock: Callable[[], float] = time.monotonic):
        self.max_size = max_size
        self.default_ttl = default_ttl
        self._clock = clock
        self._cache: OrderedDict[str, tuple[Any, float]] = OrderedDict()
        self._lock = Lock()

    def get(self, key: str) -> Any | None:
        with self._lock:
            if key not in self._cache:
                return None

            value, expiry = self._cache[key]
            if self._clock() > expiry:
                del self._cache[key]
                return None

            self._cache.move_to_end(key)
            return value

    def set(self, key: str, value: Any, ttl: int | None = None) -> None:
        expiry = self._clock() + (self.default_ttl if ttl is None else ttl)

        with self._lock:
            if key in self._cache:
                del self._cache[key]

            # evict least recently used
            while len(self._cache) >= self.max_size and self._cache:
                self._cache.popitem(last=False)

            self._cache[key] = (value, expiry)

    def delete(self, key: str) -> bool:
        with self._lock:
            if key in self._cache:
                del self._cache[key]
                return True
            return False

    def clear(self) -> None:
        with self._lock:
            self._cache.clear()

    def get_ttl(self, key: str) -> int | None:
        """Remaining TTL in seconds, ``None`` when absent or expired."""
        with self._lock:
            if key not in self._cache:
                return None

            _, expiry = self._cache[key]
            remaining = expiry - self._clock()
            if remaining <= 0:
                del self._cache[key]
                return None
            return int(remaining)

    def __len__(self) -> int:
        with self._lock:
            return len(self._cache)
