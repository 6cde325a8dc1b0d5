"""Tests for track and station models."""

import pytest

from lofi_radio.core.exceptions import CatalogFetchError
from lofi_radio.domain.library import (
    SAMPLE_TRACKS,
    RadioStation,
    Track,
    find_sample_track,
)


class TestTrack:
    def test_equality_is_by_id(self):
        a = Track(id="same", title="One", artist="X", stream_url="https://a/1.mp3")
        b = Track(id="same", title="Renamed", artist="Y", stream_url="https://a/2.mp3")
        c = Track(id="other", title="One", artist="X", stream_url="https://a/1.mp3")

        assert a == b
        assert hash(a) == hash(b)
        assert a != c
        assert len({a, b, c}) == 2

    def test_generated_ids_are_unique(self):
        a = Track(title="A", artist="X", stream_url="https://a/1.mp3")
        b = Track(title="A", artist="X", stream_url="https://a/1.mp3")
        assert a != b

    def test_negative_duration_rejected(self):
        with pytest.raises(ValueError):
            Track(title="A", artist="X", stream_url="https://a/1.mp3", duration=-1)

    def test_api_round_trip(self):
        track = SAMPLE_TRACKS[0]
        assert Track.from_api(track.to_dict()) == track
        assert Track.from_api(track.to_dict()).genre == "College Music"

    def test_from_api_missing_fields(self):
        with pytest.raises(CatalogFetchError):
            Track.from_api({"title": "No artist"})


class TestRadioStation:
    def test_as_track(self):
        station = RadioStation(
            id="s-9",
            name="Cafe FM",
            stream_url="https://radio.example.com/cafe",
            image_url="https://img.example.com/cafe.png",
            genre="Jazz",
        )
        track = station.as_track()

        assert track.id == "station:s-9"
        assert track.title == "Cafe FM"
        assert track.artist == "Live Radio"
        assert track.duration == 0
        assert track.album_art_url == station.image_url

    def test_from_api_missing_stream(self):
        with pytest.raises(CatalogFetchError):
            RadioStation.from_api({"name": "Silent"})


def test_find_sample_track():
    assert find_sample_track("sample-track-2").title == "Midnight Dreams"
    assert find_sample_track("missing") is None
