"""In-memory LRU cache for pipeline output, with time-based expiry.

Instances are independent; nothing here is module-level state.  The cache
only ever holds successful, non-empty results, so a transient failure is
recomputed on the next identical request instead of being replayed.
"""

from __future__ import annotations

import hashlib
import logging
import time
from collections import OrderedDict
from collections.abc import Callable, Iterable

from mark_clipper.core.models import CacheEntry, CacheStats

logger = logging.getLogger(__name__)

DEFAULT_MAX_SIZE = 100
DEFAULT_MAX_AGE_SECONDS = 30 * 60
ENTRY_OVERHEAD_BYTES = 64


def make_key(html: str, variant: str = "") -> str:
    """Deterministic key for *html*; *variant* separates option sets."""
    digest = hashlib.sha256(f"{variant}\x00{html}".encode()).hexdigest()
    return f"html_{digest[:32]}"


class TranslationCache:
    """LRU + max-age memoization keyed by content hash."""

    def __init__(
        self,
        max_size: int = DEFAULT_MAX_SIZE,
        max_age: float = DEFAULT_MAX_AGE_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if max_size <= 0:
            raise ValueError("max_size must be positive")
        self.max_size = max_size
        self.max_age = max_age
        self._clock = clock
        self._entries: OrderedDict[str, CacheEntry] = OrderedDict()
        self.hits = 0
        self.misses = 0

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: str) -> bool:
        entry = self._entries.get(key)
        return entry is not None and not self._is_expired(entry)

    def _is_expired(self, entry: CacheEntry) -> bool:
        return self._clock() - entry.created_at > self.max_age

    def get(self, key: str) -> str | None:
        """Return the cached result, or None on a miss or an expired entry."""
        entry = self._entries.get(key)
        if entry is None:
            self.misses += 1
            return None
        if self._is_expired(entry):
            del self._entries[key]
            self.misses += 1
            return None
        self._entries.move_to_end(key)
        entry.hit_count += 1
        self.hits += 1
        return entry.result

    def set(self, key: str, result: str) -> None:
        """Store *result*, evicting least-recently-used entries over capacity."""
        if key in self._entries:
            del self._entries[key]
        self._entries[key] = CacheEntry(result=result, created_at=self._clock())
        while len(self._entries) > self.max_size:
            evicted, _ = self._entries.popitem(last=False)
            logger.debug("Evicted cache entry %s", evicted)

    def entry(self, key: str) -> CacheEntry | None:
        return self._entries.get(key)

    def memoize(self, html: str, compute: Callable[[str], str], variant: str = "") -> str:
        """Return ``compute(html)``, served from cache when possible.

        Exceptions from *compute* propagate and nothing is stored.  Empty
        results are returned but not stored.  A failure in the cache's own
        bookkeeping is treated as a miss.
        """
        key = make_key(html, variant)
        try:
            cached = self.get(key)
        except Exception as exc:
            logger.warning("Cache read failed, recomputing: %s", exc)
            cached = None
        if cached is not None:
            return cached

        result = compute(html)
        if result and result.strip():
            try:
                self.set(key, result)
            except Exception as exc:
                logger.warning("Cache write failed: %s", exc)
        return result

    def cleanup(self) -> int:
        """Drop every expired entry; return how many were removed."""
        expired = [k for k, e in self._entries.items() if self._is_expired(e)]
        for key in expired:
            del self._entries[key]
        if expired:
            logger.debug("Cleaned %d expired cache entries", len(expired))
        return len(expired)

    def warmup(self, htmls: Iterable[str], compute: Callable[[str], str]) -> int:
        """Pre-populate the cache; failing inputs are logged and skipped."""
        warmed = 0
        for html in htmls:
            if not html or not html.strip():
                continue
            try:
                self.memoize(html, compute)
                warmed += 1
            except Exception as exc:
                logger.warning("Cache warmup failed for one input: %s", exc)
        return warmed

    def clear(self) -> None:
        self._entries.clear()
        self.hits = 0
        self.misses = 0

    def stats(self) -> CacheStats:
        total = self.hits + self.misses
        memory = sum(
            len(key) * 2 + len(entry.result) * 2 + ENTRY_OVERHEAD_BYTES
            for key, entry in self._entries.items()
        )
        return CacheStats(
            size=len(self._entries),
            max_size=self.max_size,
            hits=self.hits,
            misses=self.misses,
            hit_rate=round(self.hits / total, 2) if total else 0.0,
            total_memory=memory,
        )
