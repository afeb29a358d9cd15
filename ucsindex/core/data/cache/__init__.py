"""In-memory caching."""

from ucsindex.core.data.cache.memory import ThreadSafeInMemoryCache

__all__ = ["ThreadSafeInMemoryCache"]
