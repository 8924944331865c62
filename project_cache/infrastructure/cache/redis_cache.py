"""Redis-based cache service for the project backend.

Provides async Redis caching with TTL support for project lists, project
details and dashboards, team allocations and reports. Key format lives in
project_cache.infrastructure.cache.keys.

The cache is an optimization layer only: an unreachable store or an
unencodable value never raises to the caller. Reads degrade to a miss,
writes to False, bulk deletes to 0. Invalid arguments (TTL, pattern) do
raise CacheMisuseException since they are programming errors.
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Awaitable, Callable
from functools import wraps
from typing import Any, TypeVar

import redis.asyncio as redis

from project_cache.core.config import Settings, get_settings
from project_cache.domain.exceptions import CacheMisuseException, CacheSerializationError
from project_cache.infrastructure.cache import keys
from project_cache.infrastructure.cache.results import CacheLookup
from project_cache.infrastructure.cache.serialization import decode, encode
from project_cache.shared.telemetry.tracing import add_span_attributes, traced

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")

# Fallback returned by _run when the store could not be reached
_UNREACHABLE: Any = object()


class CacheService:
    """Async Redis cache service with TTL support.

    One instance per process, created explicitly and passed to callers
    (app.state.cache in the API). Call connect() at startup and
    disconnect() at shutdown. Operations on a service that was never
    connected, or whose connection broke, reconnect lazily; after an
    explicit disconnect() they return soft-failure values until connect()
    is called again.
    """

    project_list_key = staticmethod(keys.project_list_key)
    project_detail_key = staticmethod(keys.project_detail_key)
    project_dashboard_key = staticmethod(keys.project_dashboard_key)
    team_allocation_key = staticmethod(keys.team_allocation_key)
    report_key = staticmethod(keys.report_key)

    def __init__(
        self,
        settings: Settings | None = None,
        redis_client: redis.Redis | None = None,
        default_ttl: int | None = None,
    ) -> None:
        """Initialize cache service.

        Args:
            settings: Settings to build the client from; defaults to get_settings().
            redis_client: Optional Redis client for testing or DI. The caller
                keeps ownership; disconnect() does not close it.
            default_ttl: TTL in seconds used when set() gets none; defaults to
                settings.cache_default_ttl. 0 stores without expiry.
        """
        self.settings = settings or get_settings()
        self.redis = redis_client
        self._owns_client = redis_client is None
        self._connected = False
        self._closed = False
        self.default_ttl = _validate_ttl(
            self.settings.cache_default_ttl if default_ttl is None else default_ttl
        )

    def _create_client(self) -> redis.Redis:
        options: dict[str, Any] = {
            "decode_responses": True,
            "max_connections": self.settings.redis_max_connections,
            "socket_connect_timeout": self.settings.redis_socket_connect_timeout,
            "socket_timeout": self.settings.redis_socket_timeout,
            "socket_keepalive": True,
        }
        if self.settings.redis_url:
            return redis.Redis.from_url(self.settings.redis_url, **options)
        password = self.settings.redis_password
        return redis.Redis(
            host=self.settings.redis_host,
            port=self.settings.redis_port,
            db=self.settings.redis_db,
            password=password.get_secret_value() if password else None,
            **options,
        )

    async def connect(self) -> None:
        """Establish Redis connection. Call on app startup; no-op when connected."""
        self._closed = False
        if self._connected:
            return
        if self.redis is None:
            self.redis = self._create_client()
        try:
            await self.redis.ping()
        except redis.RedisError as e:
            logger.warning(
                "Redis connection to %s failed: %s. Cache disabled.",
                self.settings.redis_location(),
                e,
            )
            self._connected = False
            await self._drop_owned_client()
            return
        self._connected = True
        logger.info("Redis cache connected: %s", self.settings.redis_location())

    async def disconnect(self) -> None:
        """Close Redis connection. Call on app shutdown; no-op when disconnected."""
        was_connected = self._connected
        self._closed = True
        self._connected = False
        await self._drop_owned_client()
        if was_connected:
            logger.info("Redis cache disconnected")

    async def _drop_owned_client(self) -> None:
        if self.redis is None or not self._owns_client:
            return
        client, self.redis = self.redis, None
        try:
            await client.aclose()
        except redis.RedisError as e:
            logger.debug("Ignoring error while closing Redis client: %s", e)

    async def ensure_connection(self) -> bool:
        """Connect lazily unless explicitly disconnected. Returns is_available()."""
        if self._closed:
            return False
        if not self._connected:
            await self.connect()
        return self._connected

    async def _reconnect(self) -> bool:
        """Reconnect after a dropped connection. Returns True if reconnected."""
        self._connected = False
        await self._drop_owned_client()
        await self.connect()
        return self._connected

    def is_available(self) -> bool:
        """Return True if Redis is connected and usable."""
        return self._connected and self.redis is not None

    async def ping(self) -> bool:
        """Round-trip PING to Redis. Returns False when unreachable or closed."""
        return bool(await self._run("ping", "server", lambda r: r.ping(), False))

    async def _run(
        self,
        op: str,
        target: str,
        command: Callable[[redis.Redis], Awaitable[R]],
        fallback: R,
    ) -> R:
        """Run one Redis command with fail-soft semantics.

        A dropped connection gets one reconnect and one retry. Any other
        Redis error, non-UTF-8 data or a second failure yields fallback.
        """
        if not await self.ensure_connection():
            logger.debug("Cache %s skipped for %s (Redis unavailable)", op, target)
            return fallback
        try:
            return await command(self.redis)
        except (redis.ConnectionError, redis.TimeoutError) as e:
            logger.warning("Cache %s lost connection for %s: %s", op, target, e)
            if await self._reconnect():
                try:
                    return await command(self.redis)
                except (redis.RedisError, UnicodeDecodeError):
                    logger.exception("Cache %s error for %s after reconnect", op, target)
                    return fallback
            logger.warning("Cache %s unavailable for %s (Redis disconnected)", op, target)
            return fallback
        except UnicodeDecodeError as e:
            logger.warning("Cache %s got non-UTF-8 data for %s: %s", op, target, e)
            return fallback
        except redis.RedisError:
            logger.exception("Cache %s error for %s", op, target)
            return fallback

    async def lookup(self, key: str) -> CacheLookup[Any]:
        """Read key and report whether it was a hit, a miss or an error.

        Args:
            key: Cache key (use project_cache.infrastructure.cache.keys builders).

        Returns:
            CacheLookup with status HIT (value decoded), MISS, or ERROR.
        """
        raw = await self._run("get", key, lambda r: r.get(key), _UNREACHABLE)
        if raw is _UNREACHABLE:
            return CacheLookup.failed()
        if raw is None:
            logger.debug("Cache MISS: %s", key)
            return CacheLookup.missing()
        try:
            value = decode(raw)
        except CacheSerializationError as e:
            logger.warning("Cache payload for %s is not decodable: %s", key, e)
            return CacheLookup.failed()
        logger.debug("Cache HIT: %s", key)
        return CacheLookup.found(value)

    async def get(self, key: str) -> Any | None:
        """Return cached value or None if missing, expired or unavailable.

        Args:
            key: Cache key.

        Returns:
            Cached value or None.
        """
        return (await self.lookup(key)).value

    async def set(self, key: str, value: Any, ttl: int | None = None) -> bool:
        """Store value, overwriting any previous entry. Returns True on success.

        Args:
            key: Cache key.
            value: Value to cache (JSON-serializable, pydantic models allowed).
            ttl: Time-to-live in seconds; None uses default_ttl, 0 means no expiry.

        Returns:
            True if stored, False otherwise.

        Raises:
            CacheMisuseException: If ttl is negative or not an integer.
        """
        expiry = self.default_ttl if ttl is None else _validate_ttl(ttl)
        try:
            payload = encode(value)
        except CacheSerializationError as e:
            logger.warning("Cache set skipped for %s: %s", key, e)
            return False
        if expiry > 0:
            stored = await self._run("set", key, lambda r: r.setex(key, expiry, payload), False)
        else:
            stored = await self._run("set", key, lambda r: r.set(key, payload), False)
        if stored:
            logger.debug("Cache SET: %s (TTL: %ss)", key, expiry or "none")
        return bool(stored)

    async def delete(self, key: str) -> bool:
        """Remove key from cache. Returns True if a key was removed.

        Args:
            key: Cache key to delete.

        Returns:
            True if deleted, False if absent or unavailable.
        """
        removed = await self._run("delete", key, lambda r: r.delete(key), 0)
        if removed:
            logger.debug("Cache DELETE: %s", key)
        return bool(removed)

    async def delete_pattern(self, pattern: str) -> int:
        """Delete all keys matching pattern using SCAN + batched UNLINK (non-blocking).

        Uses scan_iter to avoid KEYS blocking; collects keys in chunks and
        UNLINKs each chunk to minimize round-trips and keep deletion async on server.

        Args:
            pattern: Redis SCAN match pattern (e.g. project:list:*).

        Returns:
            Number of keys deleted.

        Raises:
            CacheMisuseException: If pattern is empty or not a string.
        """
        if not isinstance(pattern, str) or not pattern:
            raise CacheMisuseException("Cache pattern must be a non-empty string", pattern=pattern)
        batch_size = self.settings.cache_scan_batch_size

        async def unlink_matching(client: redis.Redis) -> int:
            deleted = 0
            chunk: list[str] = []
            async for key in client.scan_iter(match=pattern, count=batch_size):
                chunk.append(key)
                if len(chunk) >= batch_size:
                    deleted += await _unlink(client, chunk)
                    chunk = []
            if chunk:
                deleted += await _unlink(client, chunk)
            return deleted

        deleted = await self._run("delete_pattern", pattern, unlink_matching, 0)
        if deleted > 0:
            logger.info("Cache INVALIDATE: %s (%s keys)", pattern, deleted)
        return deleted

    async def exists(self, key: str) -> bool:
        """Return True if key is present (False when unavailable)."""
        return bool(await self._run("exists", key, lambda r: r.exists(key), 0))

    async def flush_db(self) -> bool:
        """Clear the entire cache database. Maintenance and test resets only.

        Returns:
            True if cleared, False otherwise.
        """
        flushed = await self._run("flush_db", "*", lambda r: r.flushdb(), False)
        if flushed:
            logger.warning("Cache CLEARED: all keys deleted")
        return bool(flushed)

    @traced("cache.get_or_set")
    async def get_or_set(
        self,
        key: str,
        factory: Callable[[], T | Awaitable[T]],
        ttl: int | None = None,
    ) -> T:
        """Return the cached value for key, or compute, store and return it.

        The factory runs only when the cache cannot serve a non-None hit.
        Its result is returned even if storing it fails; a None result is
        returned but not stored. Concurrent misses on one key may each run
        the factory. Factory exceptions propagate.

        Args:
            key: Cache key.
            factory: Sync or async callable computing the value.
            ttl: Time-to-live for the stored value (see set()).

        Returns:
            Cached or freshly computed value.
        """
        if ttl is not None:
            _validate_ttl(ttl)
        cached = await self.lookup(key)
        add_span_attributes(**{"cache.key": key, "cache.hit": cached.hit})
        if cached.hit and cached.value is not None:
            return cached.value

        result = factory()
        if inspect.isawaitable(result):
            result = await result
        if result is not None:
            await self.set(key, result, ttl)
        return result


async def _unlink(client: redis.Redis, chunk: list[str]) -> int:
    async with client.pipeline(transaction=False) as pipe:
        pipe.unlink(*chunk)
        results = await pipe.execute()
    return sum(int(r or 0) for r in results)


def _validate_ttl(ttl: Any) -> int:
    """Return ttl if it is a non-negative int number of seconds."""
    if isinstance(ttl, bool) or not isinstance(ttl, int):
        raise CacheMisuseException("Cache TTL must be an integer number of seconds", ttl=ttl)
    if ttl < 0:
        raise CacheMisuseException("Cache TTL must be >= 0", ttl=ttl)
    return ttl


def _resolve_cache(
    args: tuple[Any, ...], kwargs: dict[str, Any]
) -> tuple[CacheService | None, tuple[Any, ...], dict[str, Any]]:
    """Resolve CacheService and the remaining args/kwargs for key building.

    Resolution order: keyword "cache", then args[0] if CacheService, then
    args[0].cache. The cache itself never takes part in the key.
    """
    if isinstance(kwargs.get("cache"), CacheService):
        call_kwargs = {k: v for k, v in kwargs.items() if k != "cache"}
        return kwargs["cache"], args, call_kwargs
    if args:
        first = args[0]
        if isinstance(first, CacheService):
            return first, args[1:], kwargs
        cache_attr = getattr(first, "cache", None)
        if isinstance(cache_attr, CacheService):
            return cache_attr, args[1:], kwargs
    return None, args, kwargs


def cached(
    key_prefix: str,
    ttl: int | None = None,
    key_builder: Callable[..., str] | None = None,
) -> Callable[[Callable[..., Awaitable[Any]]], Callable[..., Awaitable[Any]]]:
    """Decorator to cache async function results through CacheService.get_or_set.

    The wrapped function must receive a CacheService in one of these ways:
    - keyword argument "cache" (recommended, e.g. from Depends),
    - first argument is the CacheService instance,
    - or first argument has a .cache attribute that is a CacheService.
    Without one the function runs uncached.

    Args:
        key_prefix: Prefix for cache key (e.g. 'report:utilization').
        ttl: Time-to-live in seconds; None uses the service default.
        key_builder: Optional callable(*args, **kwargs) -> key; else the key is
            key_prefix plus a digest of the remaining arguments.

    Returns:
        Decorator that caches return value when CacheService is resolved.
    """

    def decorator(func: Callable[..., Awaitable[Any]]) -> Callable[..., Awaitable[Any]]:
        @wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> Any:
            cache, key_args, key_kwargs = _resolve_cache(args, kwargs)
            if cache is None:
                return await func(*args, **kwargs)
            if key_builder:
                cache_key = key_builder(*key_args, **key_kwargs)
            else:
                digest = keys.filter_digest({"args": list(key_args), "kwargs": key_kwargs})
                cache_key = f"{key_prefix}:{digest}"
            return await cache.get_or_set(cache_key, lambda: func(*args, **kwargs), ttl=ttl)

        return wrapper

    return decorator
