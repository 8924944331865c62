"""Lookup result type: makes hit / miss / error explicit instead of a bare None."""

from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar

T = TypeVar("T")


class CacheStatus(str, Enum):
    """Outcome of a cache read."""

    HIT = "hit"
    MISS = "miss"
    ERROR = "error"


@dataclass(frozen=True, slots=True)
class CacheLookup(Generic[T]):
    """Result of CacheService.lookup.

    value is set only for HIT. ERROR covers an unreachable store and an
    undecodable payload; callers treat it like a miss.
    """

    status: CacheStatus
    value: T | None = None

    @property
    def hit(self) -> bool:
        return self.status is CacheStatus.HIT

    @classmethod
    def found(cls, value: T) -> "CacheLookup[T]":
        return cls(CacheStatus.HIT, value)

    @classmethod
    def missing(cls) -> "CacheLookup[T]":
        return cls(CacheStatus.MISS)

    @classmethod
    def failed(cls) -> "CacheLookup[T]":
        return cls(CacheStatus.ERROR)
