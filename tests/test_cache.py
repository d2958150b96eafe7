"""Tests for the translation cache."""

from __future__ import annotations

import pytest

from mark_clipper.core.content_engine.cache import TranslationCache, make_key


class FakeClock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


def _upper(html: str) -> str:
    return html.upper()


class _UnreadableCache(TranslationCache):
    def get(self, key: str) -> str | None:
        raise RuntimeError("corrupt entry")


class TestMakeKey:
    def test_deterministic(self) -> None:
        assert make_key("<p>a</p>") == make_key("<p>a</p>")

    def test_content_and_variant_separate_keys(self) -> None:
        assert make_key("<p>a</p>") != make_key("<p>b</p>")
        assert make_key("<p>a</p>", "strict") != make_key("<p>a</p>", "loose")

    def test_prefix(self) -> None:
        key = make_key("x")
        assert key.startswith("html_")
        assert len(key) == len("html_") + 32


class TestGetSet:
    def test_miss_then_hit(self) -> None:
        cache = TranslationCache()
        assert cache.get("k") is None
        cache.set("k", "v")
        assert cache.get("k") == "v"
        assert cache.hits == 1
        assert cache.misses == 1
        assert cache.entry("k").hit_count == 1

    def test_rejects_non_positive_size(self) -> None:
        with pytest.raises(ValueError):
            TranslationCache(max_size=0)

    def test_lru_eviction(self) -> None:
        cache = TranslationCache(max_size=2)
        cache.set("a", "1")
        cache.set("b", "2")
        cache.get("a")
        cache.set("c", "3")
        assert "a" in cache
        assert "b" not in cache
        assert "c" in cache
        assert len(cache) == 2

    def test_overwrite_does_not_grow(self) -> None:
        cache = TranslationCache(max_size=2)
        cache.set("a", "1")
        cache.set("a", "2")
        assert len(cache) == 1
        assert cache.get("a") == "2"


class TestExpiry:
    def test_expired_entry_is_a_miss(self) -> None:
        clock = FakeClock()
        cache = TranslationCache(max_age=1800, clock=clock)
        cache.set("k", "v")
        clock.now = 1801
        assert cache.get("k") is None
        assert len(cache) == 0
        assert cache.misses == 1

    def test_entry_valid_at_exact_age(self) -> None:
        clock = FakeClock()
        cache = TranslationCache(max_age=1800, clock=clock)
        cache.set("k", "v")
        clock.now = 1800
        assert cache.get("k") == "v"

    def test_cleanup_removes_only_expired(self) -> None:
        clock = FakeClock()
        cache = TranslationCache(max_age=1800, clock=clock)
        cache.set("old", "1")
        clock.now = 1000
        cache.set("new", "2")
        clock.now = 1900
        assert cache.cleanup() == 1
        assert "old" not in cache
        assert "new" in cache


class TestMemoize:
    def test_computes_once(self) -> None:
        calls: list[str] = []

        def compute(html: str) -> str:
            calls.append(html)
            return html.upper()

        cache = TranslationCache()
        assert cache.memoize("<p>a</p>", compute) == "<P>A</P>"
        assert cache.memoize("<p>a</p>", compute) == "<P>A</P>"
        assert calls == ["<p>a</p>"]
        assert cache.hits == 1

    def test_failure_not_cached(self) -> None:
        cache = TranslationCache()

        def failing(html: str) -> str:
            raise RuntimeError("transient")

        with pytest.raises(RuntimeError):
            cache.memoize("<p>a</p>", failing)
        assert len(cache) == 0
        assert cache.memoize("<p>a</p>", _upper) == "<P>A</P>"

    def test_empty_result_not_cached(self) -> None:
        cache = TranslationCache()
        assert cache.memoize("<p>a</p>", lambda html: "  ") == "  "
        assert len(cache) == 0

    def test_variants_do_not_collide(self) -> None:
        cache = TranslationCache()
        cache.memoize("x", lambda html: "first", variant="one")
        assert cache.memoize("x", lambda html: "second", variant="two") == "second"
        assert len(cache) == 2

    def test_read_failure_counts_as_miss(self) -> None:
        cache = _UnreadableCache()
        assert cache.memoize("<p>a</p>", _upper) == "<P>A</P>"


class TestWarmupAndStats:
    def test_warmup_skips_failures_and_blanks(self) -> None:
        def compute(html: str) -> str:
            if html == "bad":
                raise ValueError("nope")
            return html.upper()

        cache = TranslationCache()
        assert cache.warmup(["a", "bad", "", "b"], compute) == 2
        assert len(cache) == 2

    def test_stats(self) -> None:
        cache = TranslationCache(max_size=10)
        cache.get("missing")
        cache.set("k", "value")
        cache.get("k")
        stats = cache.stats()
        assert stats.size == 1
        assert stats.max_size == 10
        assert stats.hits == 1
        assert stats.misses == 1
        assert stats.hit_rate == 0.5
        assert stats.total_memory > 0

    def test_empty_stats(self) -> None:
        stats = TranslationCache().stats()
        assert stats.hit_rate == 0.0
        assert stats.total_memory == 0

    def test_clear_resets_counters(self) -> None:
        cache = TranslationCache()
        cache.set("k", "v")
        cache.get("k")
        cache.clear()
        assert len(cache) == 0
        assert cache.hits == 0
        assert cache.misses == 0
