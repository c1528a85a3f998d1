"""
Core cache data structures.
"""
from dataclasses import dataclass
from typing import Any, Union
from enum import Enum


class DataCategory(Enum):
    """Categories of data with different expiration windows."""
    TOURNAMENTS = "tournaments"           # 5 minutes
    TOURNAMENT_DATA = "tournament_data"   # 3 minutes, joined tournament + match bundles
    LIVE_MATCHES = "live_matches"         # 30 seconds
    NEWS = "news"                         # 10 minutes
    VIDEOS = "videos"                     # 15 minutes
    STATIC_DATA = "static_data"           # 30 minutes, anything uncategorized

    @classmethod
    def coerce(cls, value: Union["DataCategory", str, None]) -> "DataCategory":
        """
        Resolve a category from an enum member or its string value.

        Unknown values fall back to STATIC_DATA.
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            return cls.STATIC_DATA


@dataclass(frozen=True)
class CacheEntry:
    """
    A cached payload. Entries are never mutated; `set` replaces them whole.
    """
    key: str
    data: Any
    category: DataCategory
    inserted_at: float

    def age_seconds(self, now: float) -> float:
        return now - self.inserted_at

    def is_fresh(self, now: float, ttl_seconds: float) -> bool:
        return self.age_seconds(now) < ttl_seconds
