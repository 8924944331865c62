"""In-memory stand-in for the subset of redis.asyncio.Redis used by CacheService.

Expiry uses an injectable clock so TTL tests advance time instead of sleeping.
Setting ``down`` makes every command raise ConnectionError; ``fail_next``
makes only the next N commands raise.
"""

from collections.abc import AsyncIterator, Callable
from fnmatch import fnmatchcase

from redis.exceptions import ConnectionError as RedisConnectionError


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakePipeline:
    def __init__(self, redis: "FakeRedis") -> None:
        self._redis = redis
        self._queued: list[tuple[str, ...]] = []

    async def __aenter__(self) -> "FakePipeline":
        return self

    async def __aexit__(self, *exc: object) -> None:
        self._queued.clear()

    def unlink(self, *keys: str) -> "FakePipeline":
        self._redis.unlink_calls.append(len(keys))
        self._queued.append(keys)
        return self

    async def execute(self) -> list[int]:
        self._redis._check()
        results = [self._redis._remove(keys) for keys in self._queued]
        self._queued = []
        return results


class FakeRedis:
    def __init__(self, clock: Callable[[], float] | None = None) -> None:
        self.clock = clock or FakeClock()
        self.down = False
        self.fail_next = 0
        self.closed = False
        self.unlink_calls: list[int] = []
        self._data: dict[str, tuple[str, float | None]] = {}

    def _check(self) -> None:
        if self.down:
            raise RedisConnectionError("Connection refused")
        if self.fail_next > 0:
            self.fail_next -= 1
            raise RedisConnectionError("Connection reset by peer")

    def _live(self, key: str) -> str | None:
        entry = self._data.get(key)
        if entry is None:
            return None
        value, expires_at = entry
        if expires_at is not None and self.clock() >= expires_at:
            del self._data[key]
            return None
        return value

    def _remove(self, keys: tuple[str, ...]) -> int:
        removed = 0
        for key in keys:
            if self._live(key) is not None:
                del self._data[key]
                removed += 1
        return removed

    def ttl_of(self, key: str) -> float | None:
        """Remaining seconds for key; None when it has no expiry or is absent."""
        if self._live(key) is None:
            return None
        expires_at = self._data[key][1]
        return None if expires_at is None else expires_at - self.clock()

    async def ping(self) -> bool:
        self._check()
        return True

    async def get(self, key: str) -> str | None:
        self._check()
        return self._live(key)

    async def set(self, key: str, value: str) -> bool:
        self._check()
        self._data[key] = (value, None)
        return True

    async def setex(self, key: str, ttl: int, value: str) -> bool:
        self._check()
        self._data[key] = (value, self.clock() + ttl)
        return True

    async def delete(self, *keys: str) -> int:
        self._check()
        return self._remove(keys)

    async def exists(self, *keys: str) -> int:
        self._check()
        return sum(1 for key in keys if self._live(key) is not None)

    async def flushdb(self) -> bool:
        self._check()
        self._data.clear()
        return True

    async def scan_iter(self, match: str | None = None, count: int | None = None) -> AsyncIterator[str]:
        self._check()
        for key in list(self._data):
            if self._live(key) is not None and (match is None or fnmatchcase(key, match)):
                yield key

    def pipeline(self, transaction: bool = True) -> FakePipeline:
        return FakePipeline(self)

    async def aclose(self) -> None:
        self.closed = True
