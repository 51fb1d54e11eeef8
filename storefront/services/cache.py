# storefront/services/cache.py
# Key/value cache with per-entry TTL: in-process dict (memory) or Redis.
import copy
import json
import logging
import threading
import time
from abc import ABC, abstractmethod
from typing import Any, Callable

import redis
from redis.backoff import ConstantBackoff
from redis.retry import Retry

from storefront.core.errors import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_TTL = 300
SWEEP_INTERVAL = 60


class Cache(ABC):
    """get / set / delete with TTL in whole seconds. A missing or expired key reads as None."""

    @abstractmethod
    def get(self, key: str) -> Any | None:
        ...

    @abstractmethod
    def set(self, key: str, value: Any, ttl: int = DEFAULT_TTL) -> None:
        ...

    @abstractmethod
    def delete(self, key: str) -> None:
        ...

    def get_or_set(self, key: str, loader: Callable[[], Any], ttl: int = DEFAULT_TTL) -> Any:
        """Read-through helper: returns the cached value or stores loader()'s result."""
        value = self.get(key)
        if value is not None:
            return value
        value = loader()
        self.set(key, value, ttl)
        return copy.deepcopy(value)

    def close(self) -> None:
        pass


class MemoryCache(Cache):
    """
    Process-local cache.

    Expired entries are evicted when read and by a background sweep every
    sweep_interval seconds (pass 0 to disable the sweep thread).
    """

    def __init__(self, sweep_interval: int = SWEEP_INTERVAL, clock: Callable[[], float] = time.time):
        self._entries: dict[str, tuple[Any, float]] = {}
        self._lock = threading.Lock()
        self._clock = clock
        self._sweep_interval = sweep_interval
        self._timer: threading.Timer | None = None
        if sweep_interval:
            self._schedule_sweep()

    def get(self, key: str) -> Any | None:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            value, expire_at = entry
            if self._clock() >= expire_at:
                del self._entries[key]
                return None
        # Copied on the way in and out; callers never share the stored object
        return copy.deepcopy(value)

    def set(self, key: str, value: Any, ttl: int = DEFAULT_TTL) -> None:
        with self._lock:
            self._entries[key] = (copy.deepcopy(value), self._clock() + ttl)

    def delete(self, key: str) -> None:
        with self._lock:
            self._entries.pop(key, None)

    def sweep(self) -> int:
        """Drops every expired entry; returns how many were removed."""
        now = self._clock()
        with self._lock:
            expired = [key for key, (_, expire_at) in self._entries.items() if now >= expire_at]
            for key in expired:
                del self._entries[key]
        if expired:
            logger.debug(f"[Cache] Swept {len(expired)} expired entries")
        return len(expired)

    def __len__(self) -> int:
        return len(self._entries)

    def _schedule_sweep(self) -> None:
        self._timer = threading.Timer(self._sweep_interval, self._sweep_and_reschedule)
        self._timer.daemon = True
        self._timer.start()

    def _sweep_and_reschedule(self) -> None:
        try:
            self.sweep()
        finally:
            if self._timer is not None:
                self._schedule_sweep()

    def close(self) -> None:
        timer, self._timer = self._timer, None
        if timer is not None:
            timer.cancel()


class RedisCache(Cache):
    """
    Redis-backed cache. Values travel as JSON text.

    The client is created on first use. Connection errors are retried
    `retries` times, `backoff` seconds apart, then raised to the caller.
    """

    def __init__(self, host: str, port: int, retries: int = 3, backoff: float = 2.0, client=None):
        self.host = host
        self.port = port
        self.retries = retries
        self.backoff = backoff
        self._client = client

    @property
    def client(self) -> redis.Redis:
        if self._client is None:
            self._client = redis.Redis(
                host=self.host,
                port=self.port,
                decode_responses=True,
                retry=Retry(ConstantBackoff(self.backoff), self.retries),
                retry_on_error=[redis.exceptions.ConnectionError, redis.exceptions.TimeoutError],
            )
            logger.info(f"[Cache] Redis client created for {self.host}:{self.port}")
        return self._client

    def get(self, key: str) -> Any | None:
        try:
            raw = self.client.get(key)
        except redis.exceptions.ConnectionError as e:
            logger.error(f"[Cache] Redis connection error: {e}")
            raise
        return json.loads(raw) if raw is not None else None

    def set(self, key: str, value: Any, ttl: int = DEFAULT_TTL) -> None:
        try:
            self.client.set(key, json.dumps(value, default=str), ex=ttl)
        except redis.exceptions.ConnectionError as e:
            logger.error(f"[Cache] Redis connection error: {e}")
            raise

    def delete(self, key: str) -> None:
        self.client.delete(key)

    def close(self) -> None:
        if self._client is not None:
            self._client.close()


def create_cache(settings) -> Cache:
    if settings.CACHE_TYPE == "memory":
        cache = MemoryCache()
    elif settings.CACHE_TYPE == "redis":
        cache = RedisCache(settings.REDIS_HOST, settings.REDIS_PORT)
    else:
        raise ConfigurationError(f"Unsupported CACHE_TYPE: {settings.CACHE_TYPE!r}")
    logger.info(f"[Cache] Using {settings.CACHE_TYPE} cache")
    return cache
