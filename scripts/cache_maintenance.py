"""Cache maintenance: invalidate cached views or reset the cache database.

Usage:
    uv run python -m scripts.cache_maintenance invalidate-project <project_id>
    uv run python -m scripts.cache_maintenance invalidate-lists
    uv run python -m scripts.cache_maintenance invalidate-reports [report_type]
    uv run python -m scripts.cache_maintenance delete-pattern <pattern>
    uv run python -m scripts.cache_maintenance flush --yes
Connects with the REDIS_* settings. Exits 1 if Redis is unreachable.
"""

import asyncio
import sys

from project_cache.domain.exceptions import CacheMisuseException
from project_cache.infrastructure.cache.invalidation import (
    invalidate_project,
    invalidate_project_lists,
    invalidate_reports,
)
from project_cache.infrastructure.cache.redis_cache import CacheService
from project_cache.shared.telemetry import setup_logging

USAGE = __doc__.split("Usage:")[1].split("Connects")[0]


async def run(args: list[str], cache: CacheService) -> int:
    """Execute one maintenance command against a connected cache. Returns exit code."""
    if not args:
        print(f"Usage:{USAGE}", file=sys.stderr)
        return 2
    command, rest = args[0], args[1:]
    try:
        if command == "invalidate-project" and len(rest) == 1:
            deleted = await invalidate_project(cache, rest[0])
        elif command == "invalidate-lists" and not rest:
            deleted = await invalidate_project_lists(cache)
        elif command == "invalidate-reports" and len(rest) <= 1:
            deleted = await invalidate_reports(cache, rest[0] if rest else None)
        elif command == "delete-pattern" and len(rest) == 1:
            deleted = await cache.delete_pattern(rest[0])
        else:
            deleted = None
    except CacheMisuseException as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return 2
    if deleted is not None:
        print(f"Done. Deleted {deleted} key(s)")
        return 0
    if command == "flush":
        if rest != ["--yes"]:
            print("Refusing to flush without --yes", file=sys.stderr)
            return 2
        if not await cache.flush_db():
            print("Flush failed", file=sys.stderr)
            return 1
        print("Cache database flushed")
        return 0
    print(f"Usage:{USAGE}", file=sys.stderr)
    return 2


async def main() -> None:
    setup_logging()
    cache = CacheService()
    await cache.connect()
    if not cache.is_available():
        print("Redis not reachable; check REDIS_URL / REDIS_HOST", file=sys.stderr)
        sys.exit(1)
    try:
        code = await run(sys.argv[1:], cache)
    finally:
        await cache.disconnect()
    sys.exit(code)


if __name__ == "__main__":
    asyncio.run(main())
