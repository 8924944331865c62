"""Maintenance script commands against the in-memory cache."""

from project_cache.infrastructure.cache import keys
from project_cache.infrastructure.cache.redis_cache import CacheService
from scripts.cache_maintenance import run


async def test_invalidate_project(cache: CacheService, capsys) -> None:
    await cache.set(keys.project_detail_key("7"), {"id": "7"})
    await cache.set(keys.project_list_key({"status": "active"}), ["7"])
    assert await run(["invalidate-project", "7"], cache) == 0
    assert "Deleted 2 key(s)" in capsys.readouterr().out
    assert await cache.exists(keys.project_detail_key("7")) is False


async def test_invalidate_reports_of_type(cache: CacheService) -> None:
    await cache.set(keys.report_key("cost", "1"), {})
    await cache.set(keys.report_key("follow-up", "1"), {})
    assert await run(["invalidate-reports", "cost"], cache) == 0
    assert await cache.exists(keys.report_key("follow-up", "1")) is True


async def test_flush_requires_confirmation(cache: CacheService) -> None:
    await cache.set("k", 1)
    assert await run(["flush"], cache) == 2
    assert await cache.exists("k") is True
    assert await run(["flush", "--yes"], cache) == 0
    assert await cache.exists("k") is False


async def test_unknown_command_prints_usage(cache: CacheService, capsys) -> None:
    assert await run(["frobnicate"], cache) == 2
    assert "invalidate-project" in capsys.readouterr().err


async def test_invalid_project_id_is_a_usage_error(cache: CacheService, capsys) -> None:
    await cache.set(keys.project_detail_key("7"), {"id": "7"})
    assert await run(["invalidate-project", "a:b"], cache) == 2
    assert "must not contain separator" in capsys.readouterr().err
    assert await cache.exists(keys.project_detail_key("7")) is True


async def test_empty_pattern_is_a_usage_error(cache: CacheService, capsys) -> None:
    assert await run(["delete-pattern", ""], cache) == 2
    assert "non-empty string" in capsys.readouterr().err
