"""
Playlist Store - The user's saved tracks.

Handles:
- Restoring the playlist from storage at startup
- Add with duplicate rejection, remove, clear
- Persisting after every change (empty playlist removes the stored key)
"""
import json
import logging
from decimal import Decimal
from typing import Optional, List

from ..api.storage import KeyValueStore
from ..config import PLAYLIST_KEY
from ..models import Track

logger = logging.getLogger(__name__)


class StorageCorrupt(ValueError):
    """Stored playlist data could not be decoded."""


class PlaylistSaveError(IOError):
    """The playlist change could not be written to storage."""


def decode_playlist(text: str) -> List[Track]:
    """Decode a stored JSON array of tracks. Raises StorageCorrupt."""
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise StorageCorrupt(f'Invalid JSON: {e}') from e
    if not isinstance(data, list):
        raise StorageCorrupt(f'Expected a list, got {type(data).__name__}')

    tracks = []
    for item in data:
        track = Track.from_api(item)
        if track is None:
            raise StorageCorrupt(f'Unreadable track entry: {str(item)[:80]}')
        tracks.append(track)
    return tracks


def encode_playlist(tracks: List[Track]) -> str:
    return json.dumps([t.to_dict() for t in tracks])


class PlaylistStore:
    """Ordered, deduplicated playlist backed by a key-value store."""

    def __init__(self, storage: KeyValueStore, key: str = PLAYLIST_KEY):
        self.storage = storage
        self.key = key
        self._tracks: List[Track] = []

    # ============================================
    # LOADING
    # ============================================

    def restore(self) -> List[Track]:
        """Load the playlist from storage. Absent or corrupt data gives []."""
        self._tracks = []
        try:
            text = self.storage.get(self.key)
        except (IOError, OSError) as e:
            logger.error(f'Cannot read playlist storage: {e}', exc_info=True)
            return self.tracks

        if not text:
            logger.info('No saved playlist')
            return self.tracks

        try:
            tracks = decode_playlist(text)
        except StorageCorrupt as e:
            logger.warning(f'Ignoring corrupt saved playlist: {e}')
            return self.tracks

        seen = set()
        for track in tracks:
            if track.id in seen:
                logger.debug(f'Dropping duplicate saved track: {track.id}')
                continue
            seen.add(track.id)
            self._tracks.append(track)

        logger.info(f'Restored {len(self._tracks)} playlist tracks')
        return self.tracks

    # ============================================
    # CHANGES
    # ============================================

    def add(self, track: Track) -> bool:
        """
        Append a track. Returns False if a track with its id is present.

        Raises PlaylistSaveError (playlist unchanged) when storage fails.
        """
        if track.id in self:
            logger.warning(f'Track already in playlist: {track.title} ({track.id})')
            return False

        self._tracks.append(track)
        self._persist(rollback=self._tracks[:-1])
        logger.info(f'Added to playlist: {track.title} ({track.id})')
        return True

    def remove(self, track_id: int) -> bool:
        """Remove a track by id. Absent ids are a no-op. Returns True if removed."""
        index = next((i for i, t in enumerate(self._tracks) if t.id == track_id), None)
        if index is None:
            logger.debug(f'Track not in playlist: {track_id}')
            return False

        previous = list(self._tracks)
        removed = self._tracks.pop(index)
        self._persist(rollback=previous)
        logger.info(f'Removed from playlist: {removed.title} ({removed.id})')
        return True

    def clear(self):
        """Empty the playlist and delete the stored record."""
        previous = self._tracks
        self._tracks = []
        self._persist(rollback=previous)
        logger.info('Playlist cleared')

    def _persist(self, rollback: List[Track]):
        """Write the playlist, or remove the key when it is empty."""
        try:
            if self._tracks:
                self.storage.set(self.key, encode_playlist(self._tracks))
            else:
                self.storage.remove(self.key)
        except (IOError, OSError) as e:
            logger.error(f'Cannot save playlist: {e}', exc_info=True)
            self._tracks = rollback
            raise PlaylistSaveError(f'Cannot save playlist: {e}') from e

    # ============================================
    # QUERIES
    # ============================================

    @property
    def tracks(self) -> List[Track]:
        return list(self._tracks)

    @property
    def count(self) -> int:
        return len(self._tracks)

    @property
    def total_price(self) -> Decimal:
        return sum((t.effective_price for t in self._tracks), Decimal('0'))

    def get(self, track_id: int) -> Optional[Track]:
        return next((t for t in self._tracks if t.id == track_id), None)

    def __contains__(self, track_id) -> bool:
        return any(t.id == track_id for t in self._tracks)

    def __len__(self) -> int:
        return len(self._tracks)
