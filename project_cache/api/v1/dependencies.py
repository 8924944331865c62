"""FastAPI dependencies shared by route handlers."""

from fastapi import Request

from project_cache.infrastructure.cache.redis_cache import CacheService


def get_cache(request: Request) -> CacheService | None:
    """Return the process-wide CacheService, or None when Redis is disabled.

    Cache is set in app lifespan (app.state.cache) when Redis is enabled.
    Handlers and @cached functions accept None and run uncached.
    """
    return getattr(request.app.state, "cache", None)
