"""
Catalog-backed track and station lists.

Wraps a CatalogService with the app's recovery policy: a failed refresh
falls back to the sample playlist so there is always something to play,
and only the most recent request's result is applied.
"""

from typing import Optional

from loguru import logger

from lofi_radio.core.exceptions import CatalogFetchError
from lofi_radio.domain.library.models import RadioStation, Track
from lofi_radio.domain.library.samples import SAMPLE_STATIONS, SAMPLE_TRACKS

from .api import CatalogService


class CatalogLibrary:
    """Current track list (possibly filtered) and radio stations."""

    def __init__(self, service: CatalogService, page_size: int = 20):
        self.service = service
        self.page_size = page_size
        self.tracks: list[Track] = []
        self.all_tracks: list[Track] = []  # Unfiltered list from the last refresh
        self.stations: list[RadioStation] = []
        self.is_loading = False
        self.error_message: Optional[str] = None
        self._tracks_request_id = 0
        self._stations_request_id = 0

    def _begin_tracks_request(self) -> int:
        self._tracks_request_id += 1
        self.is_loading = True
        self.error_message = None
        return self._tracks_request_id

    def _is_stale(self, request_id: int) -> bool:
        return request_id != self._tracks_request_id

    async def refresh(self) -> list[Track]:
        """Fetch the first page of tracks, falling back to the samples on failure."""
        request_id = self._begin_tracks_request()
        error: Optional[str] = None
        try:
            tracks = await self.service.fetch_tracks(page=1, limit=self.page_size)
        except CatalogFetchError as e:
            logger.warning(f"Track refresh failed, using sample tracks: {e}")
            error = f"Failed to load tracks: {e}"
            tracks = list(SAMPLE_TRACKS)

        if self._is_stale(request_id):
            logger.debug("Discarding superseded track refresh")
            return self.tracks

        self.tracks = list(tracks)
        self.all_tracks = list(tracks)
        self.error_message = error
        self.is_loading = False
        return self.tracks

    async def search(self, query: str) -> list[Track]:
        """Filter tracks via the catalog. An empty query restores the full list."""
        if not query.strip():
            self._tracks_request_id += 1
            self.tracks = list(self.all_tracks)
            self.is_loading = False
            return self.tracks

        request_id = self._begin_tracks_request()
        try:
            tracks = await self.service.search_tracks(query)
        except CatalogFetchError as e:
            logger.warning(f"Search for {query!r} failed: {e}")
            if not self._is_stale(request_id):
                self.error_message = f"Search failed: {e}"
                self.is_loading = False
            return self.tracks

        if self._is_stale(request_id):
            return self.tracks

        self.tracks = list(tracks)
        self.is_loading = False
        return self.tracks

    async def by_genre(self, genre: str) -> list[Track]:
        """Replace the list with one genre. On failure the list is left as is."""
        request_id = self._begin_tracks_request()
        try:
            tracks = await self.service.fetch_tracks_by_genre(genre)
        except CatalogFetchError as e:
            logger.warning(f"Genre {genre!r} fetch failed: {e}")
            if not self._is_stale(request_id):
                self.error_message = f"Failed to load genre: {e}"
                self.is_loading = False
            return self.tracks

        if self._is_stale(request_id):
            return self.tracks

        self.tracks = list(tracks)
        self.is_loading = False
        return self.tracks

    async def refresh_stations(self) -> list[RadioStation]:
        """Fetch radio stations, falling back to the sample stations on failure."""
        self._stations_request_id += 1
        request_id = self._stations_request_id
        error: Optional[str] = None
        try:
            stations = await self.service.fetch_radio_stations()
        except CatalogFetchError as e:
            logger.warning(f"Station refresh failed, using sample stations: {e}")
            error = "Failed to load radio stations"
            stations = list(SAMPLE_STATIONS)

        if request_id != self._stations_request_id:
            return self.stations

        self.stations = list(stations)
        if error:
            self.error_message = error
        return self.stations

    async def refresh_all(self) -> None:
        await self.refresh()
        await self.refresh_stations()
