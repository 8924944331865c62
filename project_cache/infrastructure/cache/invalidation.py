"""Cache invalidation helpers.

Called after a write to the underlying resource so later reads recompute
instead of serving stale views. Pattern deletes use SCAN (non-blocking).
"""

import logging
from uuid import UUID

from project_cache.infrastructure.cache.cache_protocol import CacheProtocol
from project_cache.infrastructure.cache.keys import (
    project_dashboard_key,
    project_detail_key,
    project_list_pattern,
    report_pattern,
    team_allocation_key,
)

logger = logging.getLogger(__name__)


async def invalidate_project_lists(cache: CacheProtocol) -> int:
    """Delete every cached project list view.

    Returns:
        Number of keys deleted.
    """
    return await cache.delete_pattern(project_list_pattern())


async def invalidate_project(cache: CacheProtocol, project_id: str | int | UUID) -> int:
    """Delete all views derived from one project, including every list view.

    A change to one project can move it in or out of any filtered list,
    so all list views go along with the project's own keys.

    Args:
        cache: Cache to invalidate.
        project_id: Project that was created, updated or deleted.

    Returns:
        Number of keys deleted.
    """
    deleted = 0
    for key in (
        project_detail_key(project_id),
        project_dashboard_key(project_id),
        team_allocation_key(project_id),
    ):
        if await cache.delete(key):
            deleted += 1
    deleted += await invalidate_project_lists(cache)
    logger.info("Invalidated %s cache keys for project %s", deleted, project_id)
    return deleted


async def invalidate_reports(cache: CacheProtocol, report_type: str | None = None) -> int:
    """Delete cached reports of one type, or all reports when report_type is None.

    Returns:
        Number of keys deleted.
    """
    deleted = await cache.delete_pattern(report_pattern(report_type))
    if deleted == 0:
        logger.debug("No cached reports found for type %s", report_type or "*")
    return deleted
