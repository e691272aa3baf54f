"""
Playback Controller - The single shared preview player state.

States:
- Idle: nothing playing
- Playing(id): one track's preview is playing

Only one preview plays at a time across every view, so every view must
share one controller.
"""
import logging
from typing import Optional

from ..models import PlaybackState
from .audio import AudioOutput

logger = logging.getLogger(__name__)


class PlaybackController:
    """Toggles track previews on a shared audio output."""

    def __init__(self, audio: AudioOutput):
        """
        Args:
            audio: AudioOutput that receives load/play/pause commands
        """
        self.audio = audio
        self.audio.on_ended = self.on_ended
        self._state = PlaybackState()

    @property
    def state(self) -> PlaybackState:
        return self._state

    def is_playing(self, track_id: int) -> bool:
        return self._state.playing_id == track_id

    def toggle(self, track_id: int, preview_url: Optional[str]) -> Optional[PlaybackState]:
        """
        Play or pause a track's preview.

        Returns the new state, or None when the track has no preview
        (state unchanged).
        """
        if not preview_url:
            logger.info(f'No preview available for track {track_id}')
            return None

        current = self._state.playing_id
        if current == track_id:
            self.audio.pause()
            self._state = PlaybackState()
            logger.info(f'Paused preview {track_id}')
            return self._state

        if current is not None:
            self.audio.pause()
        # Set before play(): an output that fails to start emits ended synchronously
        self._state = PlaybackState(playing_id=track_id)
        self.audio.load(preview_url)
        self.audio.play()
        if self._state.playing_id == track_id:
            logger.info(f'Playing preview {track_id}')
        else:
            logger.warning(f'Preview {track_id} ended before it started')
        return self._state

    def on_ended(self):
        """Playback finished event from the audio output."""
        if self._state.playing_id is not None:
            logger.debug(f'Preview {self._state.playing_id} ended')
        self._state = PlaybackState()

    def stop(self):
        """Pause anything playing and go idle."""
        if self._state.playing_id is not None:
            self.audio.pause()
        self._state = PlaybackState()
