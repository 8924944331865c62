"""Cache protocol for callers that only need data operations (DIP)."""

from collections.abc import Awaitable, Callable
from typing import Any, Protocol, TypeVar

T = TypeVar("T")


class CacheProtocol(Protocol):
    """Protocol for cache backends (e.g. Redis). Used by services and handlers."""

    def is_available(self) -> bool:
        """Return True if cache is connected and usable."""
        ...

    async def get(self, key: str) -> Any:
        """Return cached value or None."""
        ...

    async def set(self, key: str, value: Any, ttl: int | None = None) -> bool:
        """Store value with optional TTL in seconds."""
        ...

    async def delete(self, key: str) -> bool:
        """Remove key from cache."""
        ...

    async def delete_pattern(self, pattern: str) -> int:
        """Remove every key matching a glob pattern."""
        ...

    async def exists(self, key: str) -> bool:
        """Return True if key is present."""
        ...

    async def get_or_set(
        self,
        key: str,
        factory: Callable[[], T | Awaitable[T]],
        ttl: int | None = None,
    ) -> T:
        """Return cached value, computing and storing it on a miss."""
        ...
