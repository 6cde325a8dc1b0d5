"""Tests for the bounded image cache."""

import asyncio

import pytest
import requests

from lofi_radio.core.image_cache import ImageCache


class TestLimits:
    def test_count_limit_evicts_least_recently_used(self):
        cache = ImageCache(count_limit=2)
        cache.put("a", b"1")
        cache.put("b", b"2")
        assert cache.get("a") == b"1"  # a is now most recent

        cache.put("c", b"3")

        assert "b" not in cache
        assert "a" in cache and "c" in cache
        assert len(cache) == 2

    def test_cost_limit_evicts_until_under_budget(self):
        cache = ImageCache(cost_limit=10)
        cache.put("a", b"x" * 4)
        cache.put("b", b"x" * 4)
        cache.put("c", b"x" * 4)

        assert "a" not in cache
        assert cache.total_cost == 8

    def test_oversized_item_is_not_cached(self):
        cache = ImageCache(cost_limit=10)
        cache.put("small", b"x")
        cache.put("huge", b"x" * 11)

        assert "huge" not in cache
        assert "small" in cache

    def test_replace_remove_and_clear(self):
        cache = ImageCache()
        cache.put("a", b"12345")
        cache.put("a", b"12")
        assert cache.total_cost == 2

        cache.remove("a")
        cache.remove("missing")
        assert len(cache) == 0
        assert cache.total_cost == 0

        cache.put("b", b"1")
        cache.clear()
        assert cache.get("b") is None
        assert cache.total_cost == 0


class TestLoad:
    @pytest.mark.anyio
    async def test_concurrent_loads_share_one_download(self):
        calls = []

        def fetcher(url):
            calls.append(url)
            return b"image-bytes"

        cache = ImageCache(fetcher=fetcher)

        results = await asyncio.gather(
            cache.load("https://img.example.com/a.png"),
            cache.load("https://img.example.com/a.png"),
        )

        assert results == [b"image-bytes", b"image-bytes"]
        assert calls == ["https://img.example.com/a.png"]
        assert cache.get("https://img.example.com/a.png") == b"image-bytes"

    @pytest.mark.anyio
    async def test_cached_image_skips_fetch(self):
        def fetcher(url):
            raise AssertionError("should not fetch")

        cache = ImageCache(fetcher=fetcher)
        cache.put("u", b"cached")
        assert await cache.load("u") == b"cached"

    @pytest.mark.anyio
    async def test_failed_load_returns_none(self):
        def fetcher(url):
            raise requests.ConnectionError("offline")

        cache = ImageCache(fetcher=fetcher)

        assert await cache.load("https://img.example.com/b.png") is None
        assert "https://img.example.com/b.png" not in cache
