"""
In-memory response cache with per-key TTL.
"""

import time
from typing import Any, Dict, Optional


class SimpleCache:
    """Simple in-memory cache with TTL support."""

    def __init__(self):
        self._cache: Dict[str, tuple[Any, float]] = {}

    def get(self, key: str) -> Optional[Any]:
        if key in self._cache:
            value, expires_at = self._cache[key]
            if time.time() < expires_at:
                return value
            del self._cache[key]
        return None

    def set(self, key: str, value: Any, ttl_seconds: int = 3600):
        self._cache[key] = (value, time.time() + ttl_seconds)

    def invalidate(self, key: str):
        self._cache.pop(key, None)

    def clear(self):
        self._cache.clear()

    def __len__(self) -> int:
        return len(self._cache)


# Static responses (classification catalogue, ingestion category listings)
cache = SimpleCache()
