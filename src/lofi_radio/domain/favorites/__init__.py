"""Favorites domain - starred tracks with a free-tier cap."""

from .store import FREE_TIER_LIMIT, Favorite, FavoritesStore, TierSource

__all__ = [
    "Favorite",
    "FavoritesStore",
    "TierSource",
    "FREE_TIER_LIMIT",
]
