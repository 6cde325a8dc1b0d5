"""
Favorite tracks, persisted in SQLite.

Each favorite keeps a snapshot of its track so the list can be shown
without a catalog round trip. Free accounts are capped; premium accounts
are not.
"""

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Optional, Protocol

from loguru import logger

from lofi_radio.core.database import get_db_connection, init_database
from lofi_radio.domain.library import Track

FREE_TIER_LIMIT = 25


class TierSource(Protocol):
    def is_premium_tier(self) -> bool: ...


@dataclass(frozen=True)
class Favorite:
    track_id: str
    added_at: datetime = field(default_factory=datetime.now)
    id: str = field(default_factory=lambda: str(uuid.uuid4()))


class FavoritesStore:
    def __init__(
        self,
        tier: TierSource,
        db_path: Optional[Path] = None,
        free_tier_limit: int = FREE_TIER_LIMIT,
    ):
        self.tier = tier
        self.db_path = db_path
        self.free_tier_limit = free_tier_limit
        init_database(db_path)

    @property
    def count(self) -> int:
        with get_db_connection(self.db_path) as conn:
            row = conn.execute("SELECT COUNT(*) AS count FROM favorites").fetchone()
        return int(row["count"])

    @property
    def can_add_more(self) -> bool:
        return self.tier.is_premium_tier() or self.count < self.free_tier_limit

    @property
    def remaining_favorites(self) -> Optional[int]:
        """Slots left on the free tier, or None when unlimited."""
        if self.tier.is_premium_tier():
            return None
        return max(0, self.free_tier_limit - self.count)

    def is_favorite(self, track_id: str) -> bool:
        with get_db_connection(self.db_path) as conn:
            row = conn.execute(
                "SELECT 1 FROM favorites WHERE track_id = ?", (track_id,)
            ).fetchone()
        return row is not None

    def add_favorite(self, track: Track) -> bool:
        """Add a track.

        Returns:
            False if it is already a favorite or the free-tier cap is reached
        """
        if self.is_favorite(track.id):
            return False
        if not self.can_add_more:
            logger.info(
                f"Favorites limit of {self.free_tier_limit} reached, not adding {track.title!r}"
            )
            return False

        favorite = Favorite(track_id=track.id)
        with get_db_connection(self.db_path) as conn:
            conn.execute(
                """
                INSERT INTO favorites
                    (id, track_id, added_at, title, artist, album_art_url,
                     stream_url, duration, genre)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    favorite.id,
                    favorite.track_id,
                    favorite.added_at.isoformat(),
                    track.title,
                    track.artist,
                    track.album_art_url,
                    track.stream_url,
                    track.duration,
                    track.genre,
                ),
            )
            conn.commit()
        logger.debug(f"Added favorite: {track.artist} - {track.title}")
        return True

    def remove_favorite(self, track_id: str) -> None:
        with get_db_connection(self.db_path) as conn:
            conn.execute("DELETE FROM favorites WHERE track_id = ?", (track_id,))
            conn.commit()
        logger.debug(f"Removed favorite: {track_id}")

    def toggle_favorite(self, track: Track) -> bool:
        """Flip the favorite flag. Returns whether the track is now a favorite."""
        if self.is_favorite(track.id):
            self.remove_favorite(track.id)
            return False
        return self.add_favorite(track)

    def favorites(self) -> list[Favorite]:
        with get_db_connection(self.db_path) as conn:
            rows = conn.execute(
                "SELECT id, track_id, added_at FROM favorites ORDER BY added_at, rowid"
            ).fetchall()
        return [
            Favorite(
                id=row["id"],
                track_id=row["track_id"],
                added_at=datetime.fromisoformat(row["added_at"]),
            )
            for row in rows
        ]

    @property
    def favorite_tracks(self) -> list[Track]:
        """Favorited tracks in the order they were added."""
        with get_db_connection(self.db_path) as conn:
            rows = conn.execute(
                """
                SELECT track_id, title, artist, album_art_url, stream_url, duration, genre
                FROM favorites
                ORDER BY added_at, rowid
                """
            ).fetchall()
        return [
            Track(
                id=row["track_id"],
                title=row["title"] or "",
                artist=row["artist"] or "",
                album_art_url=row["album_art_url"],
                stream_url=row["stream_url"] or "",
                duration=row["duration"] or 0.0,
                genre=row["genre"] or "Lofi",
            )
            for row in rows
        ]

    def clear_all(self) -> None:
        with get_db_connection(self.db_path) as conn:
            conn.execute("DELETE FROM favorites")
            conn.commit()
        logger.info("Cleared all favorites")
