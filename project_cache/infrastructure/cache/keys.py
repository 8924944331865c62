"""Cache key builders. Single place for key format.

Key components (project ids, report types, etc.) must not contain
CACHE_KEY_SEP or SCAN glob characters, otherwise keys could collide across
families or a family pattern could match keys outside it.

List views are keyed by a digest of the canonicalized filter so that two
filters with the same content but different key order share one entry.
"""

import hashlib
import json
from collections.abc import Mapping
from datetime import date, datetime, time
from decimal import Decimal
from enum import Enum
from typing import Any
from uuid import UUID

from pydantic import BaseModel

from project_cache.core.constants import (
    CACHE_FILTER_DIGEST_LEN,
    CACHE_GLOB_CHARS,
    CACHE_KEY_SEP,
    CACHE_KIND_ALLOCATION,
    CACHE_KIND_DASHBOARD,
    CACHE_KIND_DETAIL,
    CACHE_KIND_LIST,
    CACHE_PREFIX_PROJECT,
    CACHE_PREFIX_REPORT,
    CACHE_PREFIX_TEAM,
)
from project_cache.domain.exceptions import CacheKeyError


def _key_component(value: str | int | UUID, name: str) -> str:
    """Return value as a key component; raise if it is unusable.

    Args:
        value: Identifier used in a cache key.
        name: Name of the component (for error message).

    Raises:
        CacheKeyError: If value is empty, contains CACHE_KEY_SEP or a glob character.
    """
    if isinstance(value, bool) or not isinstance(value, (str, int, UUID)):
        raise CacheKeyError(name, repr(value), "must be a str, int or UUID")
    text = str(value)
    if not text:
        raise CacheKeyError(name, text, "must not be empty")
    if CACHE_KEY_SEP in text:
        raise CacheKeyError(name, text, f"must not contain separator {CACHE_KEY_SEP!r}")
    if CACHE_GLOB_CHARS.intersection(text):
        raise CacheKeyError(name, text, "must not contain glob characters")
    return text


def _join(*parts: str) -> str:
    return CACHE_KEY_SEP.join(parts)


def canonicalize(obj: Any) -> Any:
    """Normalize a filter value into JSON-native data with a fixed ordering.

    Raises:
        CacheKeyError: If a value has a type without a stable text form.
    """
    if isinstance(obj, Enum):
        return canonicalize(obj.value)
    if obj is None or isinstance(obj, (str, bool, int, float)):
        return obj
    if isinstance(obj, (datetime, date, time)):
        return obj.isoformat()
    if isinstance(obj, (UUID, Decimal)):
        return str(obj)
    if isinstance(obj, BaseModel):
        return canonicalize(obj.model_dump(mode="json", exclude_none=True))
    if isinstance(obj, Mapping):
        return {str(k): canonicalize(v) for k, v in obj.items()}
    if isinstance(obj, (set, frozenset)):
        items = [canonicalize(item) for item in obj]
        return sorted(items, key=lambda item: json.dumps(item, sort_keys=True))
    if isinstance(obj, (list, tuple)):
        return [canonicalize(item) for item in obj]
    raise CacheKeyError("filter", type(obj).__name__, "has no canonical form for type")


def canonical_json(data: Any) -> str:
    """Canonical JSON (sorted keys, no whitespace) for deterministic digests."""
    return json.dumps(canonicalize(data), sort_keys=True, separators=(",", ":"))


def filter_digest(filters: Mapping[str, Any] | BaseModel | None) -> str:
    """Return the hex digest identifying a filter; None and {} are the same filter."""
    payload = canonical_json(filters if filters is not None else {})
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()[:CACHE_FILTER_DIGEST_LEN]


def project_list_key(filters: Mapping[str, Any] | BaseModel | None = None) -> str:
    """Cache key for a project list view under the given filter."""
    return _join(CACHE_PREFIX_PROJECT, CACHE_KIND_LIST, filter_digest(filters))


def project_list_pattern() -> str:
    """SCAN pattern matching every project list view."""
    return _join(CACHE_PREFIX_PROJECT, CACHE_KIND_LIST, "*")


def project_detail_key(project_id: str | int | UUID) -> str:
    """Cache key for a single project."""
    return _join(
        CACHE_PREFIX_PROJECT,
        CACHE_KIND_DETAIL,
        _key_component(project_id, "project_id"),
    )


def project_dashboard_key(project_id: str | int | UUID) -> str:
    """Cache key for a project's dashboard aggregate."""
    return _join(
        CACHE_PREFIX_PROJECT,
        CACHE_KIND_DASHBOARD,
        _key_component(project_id, "project_id"),
    )


def team_allocation_key(project_id: str | int | UUID) -> str:
    """Cache key for the team allocation view of a project."""
    return _join(
        CACHE_PREFIX_TEAM,
        CACHE_KIND_ALLOCATION,
        _key_component(project_id, "project_id"),
    )


def report_key(report_type: str, report_id: str | int | UUID) -> str:
    """Cache key for a generated report (type + id)."""
    return _join(
        CACHE_PREFIX_REPORT,
        _key_component(report_type, "report_type"),
        _key_component(report_id, "report_id"),
    )


def report_pattern(report_type: str | None = None) -> str:
    """SCAN pattern for all reports, or all reports of one type."""
    if report_type is None:
        return _join(CACHE_PREFIX_REPORT, "*")
    return _join(CACHE_PREFIX_REPORT, _key_component(report_type, "report_type"), "*")
