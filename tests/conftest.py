"""
Pytest configuration and shared fixtures for Musik tests.
"""
import pytest
from pathlib import Path
from tempfile import TemporaryDirectory

from musik.api.storage import MemoryStore
from musik.controllers.audio import AudioOutput
from musik.models import Track


class RecordingAudioOutput(AudioOutput):
    """Audio output that records the commands it receives."""

    def __init__(self):
        super().__init__()
        self.calls = []

    def load(self, url):
        self.calls.append(('load', url))

    def play(self):
        self.calls.append(('play',))

    def pause(self):
        self.calls.append(('pause',))

    def finish(self):
        """Simulate the preview reaching its end."""
        self._emit_ended()


@pytest.fixture
def temp_dir():
    """Provide a temporary directory that's cleaned up after each test."""
    with TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def storage_path(temp_dir):
    """Provide path for a temporary storage.json file."""
    return temp_dir / 'storage.json'


@pytest.fixture
def memory_store():
    return MemoryStore()


@pytest.fixture
def audio():
    return RecordingAudioOutput()


@pytest.fixture
def sample_results():
    """Raw catalog items as returned by the search API."""
    return [
        {
            'wrapperType': 'track',
            'kind': 'song',
            'trackId': 1440857781,
            'collectionId': 1440857517,
            'artistName': 'Daft Punk',
            'collectionName': 'Discovery',
            'trackName': 'One More Time',
            'previewUrl': 'https://audio.example.com/one-more-time.m4a',
            'artworkUrl60': 'https://img.example.com/60x60bb.jpg',
            'artworkUrl100': 'https://img.example.com/100x100bb.jpg',
            'collectionPrice': 9.99,
            'trackPrice': 1.29,
            'releaseDate': '2001-03-07T08:00:00Z',
            'trackTimeMillis': 320357,
            'currency': 'USD',
            'primaryGenreName': 'Electronic',
            'trackExplicitness': 'notExplicit',
        },
        {
            'wrapperType': 'track',
            'kind': 'song',
            'trackId': 1440857790,
            'artistName': 'Daft Punk',
            'collectionName': 'Discovery',
            'trackName': 'Digital Love',
            'collectionPrice': 9.99,
            'releaseDate': '2001-03-12T08:00:00Z',
            'currency': 'USD',
        },
        {
            'wrapperType': 'audiobook',
            'collectionId': 555,
            'artistName': 'Narrator',
            'collectionName': 'An Audiobook',
            'collectionPrice': 14.99,
        },
    ]


@pytest.fixture
def make_track():
    """Factory for Tracks with only the fields a test cares about."""
    def factory(track_id, **fields):
        raw = {'trackId': track_id, 'trackName': f'Track {track_id}'}
        raw.update(fields)
        return Track.from_api(raw)
    return factory
