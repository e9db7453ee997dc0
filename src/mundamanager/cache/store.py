"""In-process tag cache.

Entries are stored under a key together with the set of tags that guard
them. Invalidating a tag evicts every entry carrying it, mirroring
tag-based revalidation in a CDN or framework data cache.
"""

from __future__ import annotations

import logging
import threading
from collections import deque
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(slots=True)
class _Entry:
    value: Any
    tags: frozenset[str]


class TagCache:
    """Thread-safe key/value cache with tag-based eviction."""

    def __init__(self, history_size: int = 1000) -> None:
        self._entries: dict[str, _Entry] = {}
        self._keys_by_tag: dict[str, set[str]] = {}
        self._lock = threading.RLock()
        self.hits = 0
        self.misses = 0
        self.invalidated: deque[str] = deque(maxlen=history_size)

    def __contains__(self, key: str) -> bool:
        with self._lock:
            return key in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def get(self, key: str, default: Any = None) -> Any:
        with self._lock:
            entry = self._entries.get(key)
            return default if entry is None else entry.value

    def set(self, key: str, value: Any, tags: Iterable[str]) -> None:
        """Store ``value`` under ``key`` guarded by ``tags``."""

        tag_set = frozenset(tags)
        with self._lock:
            self._drop(key)
            self._entries[key] = _Entry(value=value, tags=tag_set)
            for tag in tag_set:
                self._keys_by_tag.setdefault(tag, set()).add(key)

    def get_or_set(self, key: str, tags: Iterable[str], factory: Callable[[], T]) -> T:
        """Return the cached value for ``key`` or compute, store and return it.

        The factory runs outside the lock; two concurrent misses may both
        compute, and the later write wins.
        """

        with self._lock:
            entry = self._entries.get(key)
            if entry is not None:
                self.hits += 1
                return entry.value
            self.misses += 1

        value = factory()
        self.set(key, value, tags)
        return value

    def invalidate_tag(self, tag: str) -> int:
        """Evict every entry tagged with ``tag``. Returns the eviction count."""

        with self._lock:
            self.invalidated.append(tag)
            keys = self._keys_by_tag.pop(tag, set())
            for key in keys:
                self._drop(key)
        if keys:
            logger.debug("cache tag %s evicted %d entries", tag, len(keys))
        return len(keys)

    def invalidate_tags(self, tags: Iterable[str]) -> int:
        return sum(self.invalidate_tag(tag) for tag in tags)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self._keys_by_tag.clear()
            self.invalidated.clear()
            self.hits = 0
            self.misses = 0

    def _drop(self, key: str) -> None:
        entry = self._entries.pop(key, None)
        if entry is None:
            return
        for tag in entry.tags:
            keys = self._keys_by_tag.get(tag)
            if keys is not None:
                keys.discard(key)
                if not keys:
                    del self._keys_by_tag[tag]


@lru_cache
def get_cache() -> TagCache:
    """Return the process-wide cache."""

    return TagCache()
