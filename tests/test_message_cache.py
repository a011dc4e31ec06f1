"""Tests for message/cache.py - MessageCache LRU behavior and thread safety."""

from __future__ import annotations

import threading

import pytest

from localekit.diagnostics import TemplateSyntaxError
from localekit.message import MessageCache, parse_template
from localekit.message.ast import CompiledMessage


class CountingCompiler:
    """parse_template wrapper that counts calls."""

    def __init__(self) -> None:
        self.calls = 0

    def __call__(self, template: str) -> CompiledMessage:
        self.calls += 1
        return parse_template(template)


class TestMessageCacheBasics:
    """get / put / get_or_compile."""

    def test_miss_then_hit(self) -> None:
        cache = MessageCache(maxsize=10)
        compiler = CountingCompiler()
        first = cache.get_or_compile("Hi {name}", compiler)
        second = cache.get_or_compile("Hi {name}", compiler)
        assert first is second
        assert compiler.calls == 1
        stats = cache.get_stats()
        assert stats["hits"] == 1
        assert stats["misses"] == 1
        assert stats["hit_rate"] == 50.0

    def test_get_returns_none_on_miss(self) -> None:
        cache = MessageCache()
        assert cache.get("nope") is None
        assert cache.get_stats()["misses"] == 1

    def test_put_keeps_first_entry(self) -> None:
        cache = MessageCache()
        first = parse_template("x {a}")
        second = parse_template("x {a}")
        assert cache.put("x {a}", first) is first
        assert cache.put("x {a}", second) is first
        assert len(cache) == 1

    def test_content_addressed(self) -> None:
        """Equal template text shares one entry regardless of origin."""
        cache = MessageCache()
        compiler = CountingCompiler()
        cache.get_or_compile("Hello", compiler)
        cache.get_or_compile("".join(["Hel", "lo"]), compiler)
        assert compiler.calls == 1

    def test_syntax_error_not_cached(self) -> None:
        cache = MessageCache()
        with pytest.raises(TemplateSyntaxError):
            cache.get_or_compile("{broken", parse_template)
        assert len(cache) == 0

    def test_clear_resets_stats(self) -> None:
        cache = MessageCache()
        cache.get_or_compile("a", parse_template)
        cache.get_or_compile("a", parse_template)
        cache.clear()
        assert cache.get_stats() == {
            "size": 0,
            "maxsize": cache.maxsize,
            "hits": 0,
            "misses": 0,
            "hit_rate": 0.0,
        }

    @pytest.mark.parametrize("maxsize", [0, -1])
    def test_non_positive_size_rejected(self, maxsize: int) -> None:
        with pytest.raises(ValueError, match="maxsize"):
            MessageCache(maxsize=maxsize)


class TestMessageCacheEviction:
    """Least recently used entries are evicted first."""

    def test_bounded(self) -> None:
        cache = MessageCache(maxsize=2)
        for template in ("a", "b", "c"):
            cache.get_or_compile(template, parse_template)
        assert len(cache) == 2
        assert cache.get("a") is None

    def test_access_refreshes_entry(self) -> None:
        cache = MessageCache(maxsize=2)
        cache.get_or_compile("a", parse_template)
        cache.get_or_compile("b", parse_template)
        cache.get("a")
        cache.get_or_compile("c", parse_template)
        assert cache.get("a") is not None
        assert cache.get("b") is None


class TestMessageCacheConcurrency:
    """Concurrent compiles of one template converge on a single entry."""

    def test_concurrent_compiles_return_same_object(self) -> None:
        cache = MessageCache()
        template = "{n, plural, one{# file} other{# files}}"
        barrier = threading.Barrier(8)
        results: list[CompiledMessage] = []
        lock = threading.Lock()

        def compile_slowly(text: str) -> CompiledMessage:
            barrier.wait()
            return parse_template(text)

        def worker() -> None:
            compiled = cache.get_or_compile(template, compile_slowly)
            with lock:
                results.append(compiled)

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join(timeout=10)

        assert len(results) == 8
        assert all(compiled is results[0] for compiled in results)
        assert len(cache) == 1
