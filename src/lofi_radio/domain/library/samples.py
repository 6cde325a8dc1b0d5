"""Built-in sample catalog.

Used when no catalog API is configured and as the fallback whenever a
catalog refresh fails, so the player never ends up with an empty queue.
Ids are fixed so favorites made against sample data survive restarts.
"""

from .models import RadioStation, Track

SAMPLE_TRACKS: tuple[Track, ...] = (
    Track(
        id="sample-track-1",
        title="Neighbourhood",
        artist="Colombo & Massaman",
        album_art_url="https://picsum.photos/400/400?blur=2",
        stream_url="https://www.soundhelix.com/examples/mp3/SoundHelix-Song-1.mp3",
        duration=180,
        genre="College Music",
    ),
    Track(
        id="sample-track-2",
        title="Midnight Dreams",
        artist="Lofi Collective",
        album_art_url="https://picsum.photos/400/400?blur=2&random=2",
        stream_url="https://www.soundhelix.com/examples/mp3/SoundHelix-Song-2.mp3",
        duration=210,
        genre="Lofi Hip Hop",
    ),
    Track(
        id="sample-track-3",
        title="Study Session",
        artist="Chill Beats",
        album_art_url="https://picsum.photos/400/400?blur=2&random=3",
        stream_url="https://www.soundhelix.com/examples/mp3/SoundHelix-Song-3.mp3",
        duration=195,
        genre="Focus Music",
    ),
)

SAMPLE_STATIONS: tuple[RadioStation, ...] = (
    RadioStation(
        id="sample-station-1",
        name="Lofi Girl Radio",
        stream_url="https://streams.ilovemusic.de/iloveradio17.mp3",
        image_url="https://picsum.photos/400/400?random=10",
        genre="Lofi Hip Hop",
        description="24/7 lofi hip hop beats to relax/study to",
    ),
    RadioStation(
        id="sample-station-2",
        name="ChillHop Radio",
        stream_url="https://streams.ilovemusic.de/iloveradio2.mp3",
        image_url="https://picsum.photos/400/400?random=11",
        genre="Chillhop",
        description="Chill beats and smooth jazz",
    ),
    RadioStation(
        id="sample-station-3",
        name="Ambient Sounds",
        stream_url="https://streams.ilovemusic.de/iloveradio1.mp3",
        image_url="https://picsum.photos/400/400?random=12",
        genre="Ambient",
        description="Peaceful ambient music for sleep and focus",
    ),
)


def find_sample_track(track_id: str) -> Track | None:
    for track in SAMPLE_TRACKS:
        if track.id == track_id:
            return track
    return None
