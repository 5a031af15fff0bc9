"""Read-through cache for repository lookups that must survive a database outage.

Each cached key lives in two cachetools stores: a TTLCache with the current
value and an LRUCache with the last value ever loaded. Reads are served from
the first; the second is only consulted once every load attempt has failed,
so a refresh can still render with slightly old guild settings.

Per-key loads are serialized with an ``asyncio.Lock`` kept in a weak-value
map: a lock exists only while some coroutine holds or waits on it.
"""

from __future__ import annotations

import asyncio
import functools
import logging
import weakref
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

from cachetools import LRUCache, TTLCache  # type: ignore[import-untyped]

logger = logging.getLogger(__name__)

# Distinguishes "not cached" from a cached None
_MISSING = object()

F = TypeVar("F", bound=Callable[..., Awaitable[Any]])


class AsyncTTLCache:
    def __init__(self, maxsize: int = 128, ttl: float = 60.0):
        self._fresh: TTLCache = TTLCache(maxsize=maxsize, ttl=ttl)
        self._last_good: LRUCache = LRUCache(maxsize=maxsize)
        self._locks: weakref.WeakValueDictionary[str, asyncio.Lock] = (
            weakref.WeakValueDictionary()
        )

    def lock_for(self, key: str) -> asyncio.Lock:
        """The load lock for ``key``; callers must keep a reference while using it."""
        lock = self._locks.get(key)
        if lock is None:
            lock = self._locks[key] = asyncio.Lock()
        return lock

    def get(self, key: str) -> Any:
        return self._fresh.get(key, _MISSING)

    def get_stale(self, key: str) -> Any:
        return self._last_good.get(key, _MISSING)

    def set(self, key: str, value: Any) -> None:
        self._fresh[key] = value
        self._last_good[key] = value

    def invalidate(self, key: str) -> None:
        """Force the next read to reload; the last good value stays as fallback."""
        self._fresh.pop(key, None)

    def clear(self) -> None:
        self._fresh.clear()
        self._last_good.clear()


async def _load(
    func: Callable[..., Awaitable[Any]],
    args: tuple,
    kwargs: dict,
    key: str,
    retry: int,
    retry_delay: float,
) -> Any:
    """Call ``func`` up to ``retry`` times, sleeping ``retry_delay * attempt`` between tries."""
    for attempt in range(1, retry + 1):
        try:
            return await func(*args, **kwargs)
        except Exception as exc:
            if attempt == retry:
                raise
            delay = retry_delay * attempt
            logger.warning(
                "Read attempt %d/%d failed for %s: %s, retrying in %.1fs",
                attempt,
                retry,
                key,
                type(exc).__name__,
                delay,
            )
            await asyncio.sleep(delay)
    raise ValueError(f"retry must be >= 1, got {retry}")


def cached(
    cache: AsyncTTLCache,
    key_func: Callable[..., str],
    *,
    retry: int = 3,
    retry_delay: float = 1.0,
):
    """Cache an async repository read.

    ``key_func`` receives the wrapped function's arguments and returns the
    key. Concurrent misses on one key share a single load. When the load
    still fails after ``retry`` attempts the last good value is returned if
    there is one, otherwise the error propagates.
    """

    def decorator(func: F) -> F:
        @functools.wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> Any:
            key = key_func(*args, **kwargs)
            value = cache.get(key)
            if value is not _MISSING:
                return value

            async with cache.lock_for(key):
                value = cache.get(key)
                if value is not _MISSING:
                    return value
                try:
                    value = await _load(func, args, kwargs, key, retry, retry_delay)
                except Exception as exc:
                    stale = cache.get_stale(key)
                    if stale is _MISSING:
                        raise
                    logger.warning("Returning stale data for %s (%s)", key, type(exc).__name__)
                    return stale
                cache.set(key, value)
                return value

        wrapper.cache = cache  # type: ignore[attr-defined]
        return wrapper  # type: ignore[return-value]

    return decorator
