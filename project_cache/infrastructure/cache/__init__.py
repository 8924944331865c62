"""Cache: Redis service, cache key builders and invalidation helpers.

Used by request handlers, report generators and dashboard aggregators to
avoid recomputing expensive queries. CacheService reads
project_cache.core.config; key format is in keys.py.
"""

from project_cache.infrastructure.cache.cache_protocol import CacheProtocol
from project_cache.infrastructure.cache.invalidation import (
    invalidate_project,
    invalidate_project_lists,
    invalidate_reports,
)
from project_cache.infrastructure.cache.keys import (
    project_dashboard_key,
    project_detail_key,
    project_list_key,
    project_list_pattern,
    report_key,
    report_pattern,
    team_allocation_key,
)
from project_cache.infrastructure.cache.redis_cache import CacheService, cached
from project_cache.infrastructure.cache.results import CacheLookup, CacheStatus

__all__ = [
    "CacheLookup",
    "CacheProtocol",
    "CacheService",
    "CacheStatus",
    "cached",
    "invalidate_project",
    "invalidate_project_lists",
    "invalidate_reports",
    "project_dashboard_key",
    "project_detail_key",
    "project_list_key",
    "project_list_pattern",
    "report_key",
    "report_pattern",
    "team_allocation_key",
]
