"""Bounded LRU cache for album art and station images.

Images are stored as raw bytes keyed by URL. The cache is bounded both by
entry count and by total size, evicting least recently used entries first.
Concurrent loads of the same URL share a single download.
"""

import asyncio
from collections import OrderedDict
from typing import Callable, Optional

import requests
from loguru import logger

DEFAULT_COUNT_LIMIT = 100
DEFAULT_COST_LIMIT = 50 * 1024 * 1024  # 50 MB

Fetcher = Callable[[str], bytes]


def fetch_image_bytes(url: str, timeout: float = 30.0) -> bytes:
    """Download an image with requests (blocking, run in a worker thread)."""
    response = requests.get(url, timeout=timeout)
    response.raise_for_status()
    return response.content


class ImageCache:
    """LRU image cache with count and byte-size limits."""

    def __init__(
        self,
        count_limit: int = DEFAULT_COUNT_LIMIT,
        cost_limit: int = DEFAULT_COST_LIMIT,
        fetcher: Optional[Fetcher] = None,
    ):
        self.count_limit = count_limit
        self.cost_limit = cost_limit
        self._fetcher = fetcher or fetch_image_bytes
        self._entries: "OrderedDict[str, bytes]" = OrderedDict()
        self._total_cost = 0
        self._loading: dict[str, asyncio.Task] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, url: str) -> bool:
        return url in self._entries

    @property
    def total_cost(self) -> int:
        return self._total_cost

    def get(self, url: str) -> Optional[bytes]:
        """Return cached image bytes and mark the entry as recently used."""
        data = self._entries.get(url)
        if data is not None:
            self._entries.move_to_end(url)
        return data

    def put(self, url: str, data: bytes) -> None:
        """Store image bytes, evicting least recently used entries as needed."""
        cost = len(data)
        if cost > self.cost_limit:
            logger.debug(f"Image too large to cache ({cost} bytes): {url}")
            return

        if url in self._entries:
            self._total_cost -= len(self._entries.pop(url))

        self._entries[url] = data
        self._total_cost += cost
        self._evict()

    def remove(self, url: str) -> None:
        data = self._entries.pop(url, None)
        if data is not None:
            self._total_cost -= len(data)

    def clear(self) -> None:
        self._entries.clear()
        self._total_cost = 0

    def _evict(self) -> None:
        while self._entries and (
            len(self._entries) > self.count_limit or self._total_cost > self.cost_limit
        ):
            url, data = self._entries.popitem(last=False)
            self._total_cost -= len(data)
            logger.debug(f"Evicted image from cache: {url}")

    async def load(self, url: str) -> Optional[bytes]:
        """Return image bytes from cache or download them.

        Returns None if the download fails; failures are logged, not raised.
        """
        cached = self.get(url)
        if cached is not None:
            return cached

        task = self._loading.get(url)
        if task is None:
            task = asyncio.create_task(self._download(url))
            self._loading[url] = task
            task.add_done_callback(lambda _t: self._loading.pop(url, None))

        return await asyncio.shield(task)

    async def _download(self, url: str) -> Optional[bytes]:
        try:
            data = await asyncio.to_thread(self._fetcher, url)
        except (requests.RequestException, OSError) as e:
            logger.warning(f"Failed to load image from {url}: {e}")
            return None

        self.put(url, data)
        return data
