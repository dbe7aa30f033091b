"""In-memory cache with expiring entries."""

import sys

from cachetools import TTLCache

DEFAULT_EXPIRATION = 5 * 60.0


def new_cache(ttl: float = DEFAULT_EXPIRATION) -> TTLCache:
    """Create an unbounded cache whose entries expire after ``ttl`` seconds."""
    return TTLCache(maxsize=sys.maxsize, ttl=ttl)