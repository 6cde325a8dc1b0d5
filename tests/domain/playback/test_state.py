"""Tests for the playback queue and stream URL helpers."""

import random

import pytest

from lofi_radio.core.exceptions import InvalidStreamLocatorError
from lofi_radio.domain.playback import PlaybackQueue, format_time, validate_stream_url


class TestPlaybackQueue:
    def test_replace_sets_snapshot_and_start(self, abc_tracks):
        queue = PlaybackQueue()
        queue.replace(abc_tracks, start_index=1)

        assert queue.original == abc_tracks
        assert queue.current == abc_tracks[1]
        assert queue.has_next and queue.has_previous

    def test_replace_with_bad_start_index(self, abc_tracks):
        queue = PlaybackQueue()
        queue.replace(abc_tracks, start_index=9)
        assert queue.current_index is None
        assert not queue.has_next

    def test_shuffle_moves_current_to_front(self, track_factory):
        tracks = [track_factory(str(i)) for i in range(8)]
        queue = PlaybackQueue()
        queue.replace(tracks, start_index=5)

        queue.shuffle(random.Random(7))

        assert queue.current_index == 0
        assert queue.tracks[0] == tracks[5]
        assert set(queue.tracks) == set(tracks)
        assert queue.original == tracks

    def test_shuffle_empty_queue(self):
        queue = PlaybackQueue()
        queue.shuffle(random.Random(0))
        queue.unshuffle(None)
        assert queue.tracks == []
        assert queue.current_index is None


class TestStreamUrls:
    @pytest.mark.parametrize(
        "url",
        [
            "https://cdn.example.com/a.mp3",
            "http://radio.example.com:8000/stream",
            "file:///music/a.flac",
            "/home/user/music/a.mp3",
        ],
    )
    def test_valid_urls(self, url):
        validate_stream_url(url)

    @pytest.mark.parametrize("url", ["", "   ", "not a url", "ftp:/", "https://"])
    def test_invalid_urls(self, url):
        with pytest.raises(InvalidStreamLocatorError):
            validate_stream_url(url)


@pytest.mark.parametrize(
    "seconds,expected",
    [(0, "0:00"), (59.9, "0:59"), (61, "1:01"), (3600, "60:00"), (-3, "0:00"), (float("nan"), "0:00")],
)
def test_format_time(seconds, expected):
    assert format_time(seconds) == expected
