"""Library domain - track and station models plus the built-in sample catalog."""

from .models import RadioStation, Track
from .samples import SAMPLE_STATIONS, SAMPLE_TRACKS, find_sample_track

__all__ = [
    "Track",
    "RadioStation",
    "SAMPLE_TRACKS",
    "SAMPLE_STATIONS",
    "find_sample_track",
]
