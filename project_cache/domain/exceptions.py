"""Exceptions for the project cache layer.

Only programming errors (misuse) are meant to reach callers. Transient
failures (store unreachable, undecodable payload) are absorbed inside
CacheService and surface as None / False / 0.
"""

from typing import Any


class ProjectCacheException(Exception):
    """Base exception for all project cache errors.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code.
        details: Additional error context (e.g. key, ttl).
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            error_code: Optional machine-readable code; defaults to class name.
            details: Optional dict of extra context.
        """
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)


class CacheMisuseException(ProjectCacheException, ValueError):
    """Raised for invalid arguments to cache operations (bad TTL, bad pattern)."""

    def __init__(self, message: str, **details: Any) -> None:
        super().__init__(message, "CACHE_MISUSE", details)


class CacheKeyError(CacheMisuseException):
    """Raised when a key component would make a key ambiguous or glob-active."""

    def __init__(self, name: str, value: str, reason: str) -> None:
        super().__init__(
            f"Cache key component {name!r} {reason}: {value!r}",
            component=name,
            value=value,
        )


class CacheSerializationError(ProjectCacheException):
    """Raised when a value cannot be encoded to, or decoded from, the cache format."""

    def __init__(self, message: str) -> None:
        super().__init__(message, "CACHE_SERIALIZATION")
