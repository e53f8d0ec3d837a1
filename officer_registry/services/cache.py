"""
Cache gateway — a read-through accelerator for aggregate views.

The gateway is deliberately narrow: get, set with a TTL, and
delete. It sits in front of a backend that speaks the subset of
the redis-py client API those three calls need, so a real
``redis.Redis`` and the in-process ``MemoryBackend`` are
interchangeable.

A cache outage must never become a user-facing error. Every
backend failure is logged and treated as a miss (on read) or a
no-op (on write and delete); the caller then computes the value
directly. TTL is the safety net for invalidations that were
missed or raced.
"""

import json
import logging
import threading
import time
from collections.abc import Callable
from typing import Any

from redis import Redis, RedisError

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 300

# Backend errors that degrade to a miss. Anything else is a bug
# in our code and propagates.
CACHE_ERRORS = (RedisError, OSError)


class MemoryBackend:
    """
    In-process key/value store with per-key expiry.

    Mirrors redis-py: ``get`` returns None on a miss, ``set``
    takes ``ex`` in seconds, ``delete`` takes any number of keys
    and returns how many were removed. The clock is injectable
    so expiry can be tested without sleeping.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._data: dict[str, tuple[str, float | None]] = {}
        self._lock = threading.Lock()

    def get(self, name: str) -> str | None:
        with self._lock:
            item = self._data.get(name)
            if item is None:
                return None
            value, expires_at = item
            if expires_at is not None and self._clock() >= expires_at:
                del self._data[name]
                return None
            return value

    def set(self, name: str, value: str, ex: int | None = None) -> bool:
        expires_at = None if ex is None else self._clock() + ex
        with self._lock:
            self._data[name] = (value, expires_at)
        return True

    def delete(self, *names: str) -> int:
        removed = 0
        with self._lock:
            for name in names:
                if self._data.pop(name, None) is not None:
                    removed += 1
        return removed

    def ping(self) -> bool:
        return True


def create_redis_backend(url: str, socket_timeout: float) -> Redis:
    """
    Build a Redis client with short timeouts.

    A slow or hung cache is abandoned after ``socket_timeout``
    seconds and counted as a failure, so it can never hold a
    request for longer than that.
    """
    return Redis.from_url(
        url,
        socket_connect_timeout=socket_timeout,
        socket_timeout=socket_timeout,
        decode_responses=True,
        encoding="utf-8",
    )


class CacheGateway:
    """
    JSON-serializing, failure-tolerant front for a cache backend.
    """

    def __init__(self, backend, ttl_seconds: int = DEFAULT_TTL_SECONDS):
        self.backend = backend
        self.ttl_seconds = ttl_seconds

    def get(self, key: str) -> Any | None:
        """Return the cached value, or None on a miss or a backend failure."""
        try:
            raw = self.backend.get(key)
        except CACHE_ERRORS as e:
            logger.warning("Cache get failed for %s: %s", key, e)
            return None

        if raw is None:
            return None
        try:
            return json.loads(raw)
        except (TypeError, ValueError):
            logger.warning("Discarding unreadable cache entry %s", key)
            return None

    def set(self, key: str, value: Any, ttl_seconds: int | None = None) -> None:
        """Store a JSON-serializable value. Backend failures are logged only."""
        payload = json.dumps(value)
        ttl = self.ttl_seconds if ttl_seconds is None else ttl_seconds
        try:
            self.backend.set(key, payload, ex=ttl)
        except CACHE_ERRORS as e:
            logger.warning("Cache set failed for %s: %s", key, e)

    def delete(self, *keys: str) -> None:
        """Remove keys. Backend failures are logged only."""
        if not keys:
            return
        try:
            self.backend.delete(*keys)
        except CACHE_ERRORS as e:
            logger.warning(
                "Cache invalidation failed for %s: %s", ", ".join(keys), e
            )

    def read_through(self, key: str, compute: Callable[[], Any]) -> Any:
        """
        Return the cached value for ``key``, computing and storing
        it on a miss.

        ``compute`` must return JSON-serializable data. Errors
        raised by ``compute`` itself propagate: they come from the
        primary store, not from the cache.
        """
        cached = self.get(key)
        if cached is not None:
            return cached

        value = compute()
        self.set(key, value)
        return value

    def is_healthy(self) -> bool:
        try:
            return bool(self.backend.ping())
        except CACHE_ERRORS:
            return False
