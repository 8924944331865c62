"""Domain layer: exceptions shared by every cache component."""

from project_cache.domain.exceptions import (
    CacheKeyError,
    CacheMisuseException,
    CacheSerializationError,
    ProjectCacheException,
)

__all__ = [
    "ProjectCacheException",
    "CacheMisuseException",
    "CacheKeyError",
    "CacheSerializationError",
]
