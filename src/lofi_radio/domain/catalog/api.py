"""Catalog API client.

Talks to the track/station catalog over HTTP with requests. Each blocking
request runs in a worker thread so the event loop keeps serving transport
controls while a fetch is in flight.
"""

import asyncio
from typing import Any, Optional, Protocol

import requests
from loguru import logger

from lofi_radio.core.exceptions import CatalogFetchError
from lofi_radio.domain.library.models import RadioStation, Track
from lofi_radio.domain.library.samples import SAMPLE_STATIONS, SAMPLE_TRACKS

REQUEST_TIMEOUT = 30.0
RESOURCE_TIMEOUT = 60.0


class Endpoints:
    TRACKS = "/tracks"
    SEARCH = "/tracks/search"
    TRENDING = "/tracks/trending"
    RADIO = "/radio/stations"


class CatalogService(Protocol):
    """Remote catalog interface. Every call may raise CatalogFetchError."""

    async def fetch_tracks(self, page: int = 1, limit: int = 20) -> list[Track]: ...

    async def search_tracks(self, query: str) -> list[Track]: ...

    async def fetch_tracks_by_genre(self, genre: str) -> list[Track]: ...

    async def fetch_radio_stations(self) -> list[RadioStation]: ...

    async def fetch_trending_tracks(self) -> list[Track]: ...


class CatalogClient:
    """HTTP implementation of CatalogService."""

    def __init__(
        self,
        base_url: str,
        api_key: str = "",
        request_timeout: float = REQUEST_TIMEOUT,
        resource_timeout: float = RESOURCE_TIMEOUT,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.request_timeout = request_timeout
        self.resource_timeout = resource_timeout
        self.session = session or requests.Session()

    def _headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    def _get(self, path: str, params: Optional[dict[str, Any]] = None) -> Any:
        """Blocking GET returning decoded JSON."""
        url = f"{self.base_url}{path}"
        try:
            response = self.session.get(
                url, params=params, headers=self._headers(), timeout=self.request_timeout
            )
            response.raise_for_status()
            return response.json()
        except requests.HTTPError as e:
            status = e.response.status_code if e.response is not None else "?"
            raise CatalogFetchError(f"Server error {status} for {url}") from e
        except ValueError as e:
            raise CatalogFetchError(f"Failed to decode response from {url}") from e
        except requests.RequestException as e:
            raise CatalogFetchError(f"Network error for {url}: {e}") from e

    async def _request(self, path: str, params: Optional[dict[str, Any]] = None) -> Any:
        logger.debug(f"GET {path} params={params}")
        try:
            return await asyncio.wait_for(
                asyncio.to_thread(self._get, path, params), timeout=self.resource_timeout
            )
        except asyncio.TimeoutError as e:
            raise CatalogFetchError(
                f"Request to {path} timed out after {self.resource_timeout}s"
            ) from e

    @staticmethod
    def _parse_tracks(data: Any) -> list[Track]:
        if not isinstance(data, dict) or not isinstance(data.get("tracks"), list):
            raise CatalogFetchError("Tracks response missing 'tracks' list")
        return [Track.from_api(item) for item in data["tracks"]]

    @staticmethod
    def _parse_stations(data: Any) -> list[RadioStation]:
        if not isinstance(data, dict) or not isinstance(data.get("stations"), list):
            raise CatalogFetchError("Stations response missing 'stations' list")
        return [RadioStation.from_api(item) for item in data["stations"]]

    async def fetch_tracks(self, page: int = 1, limit: int = 20) -> list[Track]:
        data = await self._request(Endpoints.TRACKS, {"page": page, "limit": limit})
        return self._parse_tracks(data)

    async def search_tracks(self, query: str) -> list[Track]:
        data = await self._request(Endpoints.SEARCH, {"q": query})
        return self._parse_tracks(data)

    async def fetch_tracks_by_genre(self, genre: str) -> list[Track]:
        data = await self._request(Endpoints.TRACKS, {"genre": genre})
        return self._parse_tracks(data)

    async def fetch_radio_stations(self) -> list[RadioStation]:
        data = await self._request(Endpoints.RADIO)
        return self._parse_stations(data)

    async def fetch_trending_tracks(self) -> list[Track]:
        data = await self._request(Endpoints.TRENDING)
        return self._parse_tracks(data)


class SampleCatalog:
    """CatalogService over the built-in sample data. Never fails."""

    def __init__(
        self,
        tracks: tuple[Track, ...] = SAMPLE_TRACKS,
        stations: tuple[RadioStation, ...] = SAMPLE_STATIONS,
    ):
        self.tracks = tracks
        self.stations = stations

    async def fetch_tracks(self, page: int = 1, limit: int = 20) -> list[Track]:
        start = max(0, (page - 1) * limit)
        return list(self.tracks[start : start + limit])

    async def search_tracks(self, query: str) -> list[Track]:
        needle = query.casefold()
        return [
            t
            for t in self.tracks
            if needle in t.title.casefold() or needle in t.artist.casefold()
        ]

    async def fetch_tracks_by_genre(self, genre: str) -> list[Track]:
        return [t for t in self.tracks if t.genre == genre]

    async def fetch_radio_stations(self) -> list[RadioStation]:
        return list(self.stations)

    async def fetch_trending_tracks(self) -> list[Track]:
        return list(self.tracks)
