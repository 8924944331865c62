"""Core constants: cache key prefixes and shared literal values.

Single source of truth for cache key structure. Used by the key builders
and the invalidation helpers.
"""

# Cache key prefixes (combined with a kind, e.g. project:list, project:detail)
CACHE_PREFIX_PROJECT = "project"
CACHE_PREFIX_TEAM = "team"
CACHE_PREFIX_REPORT = "report"

# Kinds under the prefixes above
CACHE_KIND_LIST = "list"
CACHE_KIND_DETAIL = "detail"
CACHE_KIND_DASHBOARD = "dashboard"
CACHE_KIND_ALLOCATION = "allocation"

# Delimiter for composite keys
CACHE_KEY_SEP = ":"

# Characters with meaning in Redis SCAN MATCH patterns; never allowed in key components
CACHE_GLOB_CHARS = frozenset("*?[]")

# Hex digits of the SHA-256 filter digest embedded in list-view keys
CACHE_FILTER_DIGEST_LEN = 32
