"""Tag-addressed read cache and the invalidation patterns that keep it fresh."""

from mundamanager.cache.store import TagCache, get_cache
from mundamanager.cache.tags import CacheTag

__all__ = ["CacheTag", "TagCache", "get_cache"]
