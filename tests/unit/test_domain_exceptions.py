"""Tests for cache exceptions (error_code, message, details)."""

from project_cache.domain.exceptions import (
    CacheKeyError,
    CacheMisuseException,
    CacheSerializationError,
    ProjectCacheException,
)


def test_base_exception_default_error_code() -> None:
    """Base ProjectCacheException uses class name as error_code when not provided."""
    exc = ProjectCacheException("Something failed")
    assert exc.message == "Something failed"
    assert exc.error_code == "ProjectCacheException"
    assert exc.details == {}


def test_misuse_exception_details() -> None:
    exc = CacheMisuseException("Cache TTL must be >= 0", ttl=-1)
    assert exc.error_code == "CACHE_MISUSE"
    assert exc.details == {"ttl": -1}
    assert isinstance(exc, ValueError)


def test_key_error_message() -> None:
    exc = CacheKeyError("project_id", "a:b", "must not contain separator ':'")
    assert "project_id" in exc.message
    assert exc.details == {"component": "project_id", "value": "a:b"}
    assert isinstance(exc, CacheMisuseException)


def test_serialization_error_is_not_misuse() -> None:
    exc = CacheSerializationError("bad payload")
    assert exc.error_code == "CACHE_SERIALIZATION"
    assert not isinstance(exc, ValueError)
