"""
Music library domain models.

Contains data structures for representing tracks and radio stations,
plus conversions from catalog API payloads.
"""

import uuid
from dataclasses import dataclass, field
from typing import Any, Optional

from lofi_radio.core.exceptions import CatalogFetchError


def _new_id() -> str:
    return str(uuid.uuid4())


@dataclass(frozen=True)
class Track:
    """Represents a streamable track.

    Tracks compare and hash by id only, so the same track fetched twice
    with refreshed metadata is still "the same" track in a queue.
    """

    title: str
    artist: str
    stream_url: str
    album_art_url: Optional[str] = None
    duration: float = 0.0  # in seconds
    genre: str = "Lofi"
    id: str = field(default_factory=_new_id)

    def __post_init__(self) -> None:
        if self.duration < 0:
            raise ValueError(f"Track duration must be >= 0, got {self.duration}")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Track):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "Track":
        """Build a Track from a catalog API track object.

        Raises:
            CatalogFetchError: If required fields are missing
        """
        try:
            return cls(
                id=str(data.get("id") or _new_id()),
                title=data["title"],
                artist=data["artist"],
                album_art_url=data.get("albumArt"),
                stream_url=data["streamUrl"],
                duration=max(0.0, float(data.get("duration") or 0.0)),
                genre=data.get("genre") or "Lofi",
            )
        except (KeyError, TypeError, ValueError) as e:
            raise CatalogFetchError(f"Malformed track payload: {e}") from e

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "artist": self.artist,
            "albumArt": self.album_art_url,
            "streamUrl": self.stream_url,
            "duration": self.duration,
            "genre": self.genre,
        }


@dataclass(frozen=True)
class RadioStation:
    """Represents a live radio stream."""

    name: str
    stream_url: str
    image_url: Optional[str] = None
    genre: str = "Lofi"
    description: Optional[str] = None
    is_live: bool = True
    id: str = field(default_factory=_new_id)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RadioStation):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    def as_track(self) -> Track:
        """The Track the player loads when tuning in to this station."""
        return Track(
            id=f"station:{self.id}",
            title=self.name,
            artist="Live Radio",
            album_art_url=self.image_url,
            stream_url=self.stream_url,
            genre=self.genre,
        )

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "RadioStation":
        """Build a RadioStation from a catalog API station object.

        Raises:
            CatalogFetchError: If required fields are missing
        """
        try:
            return cls(
                id=str(data.get("id") or _new_id()),
                name=data["name"],
                stream_url=data["streamUrl"],
                image_url=data.get("imageUrl"),
                genre=data.get("genre") or "Lofi",
                description=data.get("description"),
                is_live=True,
            )
        except (KeyError, TypeError) as e:
            raise CatalogFetchError(f"Malformed station payload: {e}") from e
