"""Shared LRU cache for pure lookups."""

from __future__ import annotations

import functools
import logging
from typing import Any, Callable

from cachetools import LRUCache

logger = logging.getLogger(__name__)

_cache: LRUCache = LRUCache(maxsize=256)


def configure_cache(maxsize: int) -> None:
    global _cache
    _cache = LRUCache(maxsize=maxsize)


def memoized(namespace: str) -> Callable:
    """Decorator: cache a pure function's result by (namespace, *args)."""
    def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
        @functools.wraps(func)
        def wrapper(*args: Any) -> Any:
            key = (namespace, *args)
            if key in _cache:
                logger.debug("Cache hit: %s%r", namespace, args)
                return _cache[key]
            result = func(*args)
            _cache[key] = result
            return result
        return wrapper
    return decorator


def invalidate_all() -> None:
    _cache.clear()


def cache_size() -> int:
    return len(_cache)
