"""
Process-local caching with per-category TTL, request coalescing and a periodic sweep.
"""
from .core import CacheEntry, DataCategory
from .ttl_policies import (
    TTL_CONFIG,
    get_ttl_for_category,
    ttl_config_from_settings,
)
from .coalescer import RequestCoalescer
from .manager import CacheManager
from .sweeper import CacheSweeper

__all__ = [
    # Core types
    "CacheEntry",
    "DataCategory",
    # TTL policies
    "TTL_CONFIG",
    "get_ttl_for_category",
    "ttl_config_from_settings",
    # Coalescing
    "RequestCoalescer",
    # Manager
    "CacheManager",
    "CacheSweeper",
]
