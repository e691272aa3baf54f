"""
Audio Outputs - Preview playback through an external player.
"""
import shutil
import logging
import subprocess
from typing import Callable, List, Optional

from ..config import PLAYER_COMMAND

logger = logging.getLogger(__name__)


class AudioOutput:
    """Audio-output capability: load, play, pause and an ended event."""

    def __init__(self):
        self.on_ended: Optional[Callable[[], None]] = None

    def load(self, url: str):
        raise NotImplementedError

    def play(self):
        raise NotImplementedError

    def pause(self):
        raise NotImplementedError

    def poll(self):
        """Check for playback that finished on its own."""

    def _emit_ended(self):
        if self.on_ended:
            self.on_ended()


class SubprocessAudioOutput(AudioOutput):
    """Plays preview URLs with an external player process (ffplay by default)."""

    def __init__(self, command: List[str] = None):
        super().__init__()
        self.command = list(command or PLAYER_COMMAND)
        self.url: Optional[str] = None
        self._process: Optional[subprocess.Popen] = None

    def load(self, url: str):
        self._stop_process()
        self.url = url

    def play(self):
        if not self.url:
            logger.warning('Play without a loaded preview')
            return
        self._stop_process()
        try:
            self._process = subprocess.Popen(
                self.command + [self.url],
                stdin=subprocess.DEVNULL,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
            )
            logger.info(f'Preview started: {self.url[:60]}')
        except (OSError, subprocess.SubprocessError) as e:
            logger.error(f'Could not start player {self.command[0]}: {e}', exc_info=True)
            self._process = None
            self._emit_ended()

    def pause(self):
        self._stop_process()
        logger.debug('Preview paused')

    def poll(self):
        if self._process is None:
            return
        if self._process.poll() is not None:
            logger.debug(f'Player exited with {self._process.returncode}')
            self._process = None
            self._emit_ended()

    def _stop_process(self):
        process, self._process = self._process, None
        if process is None or process.poll() is not None:
            return
        process.terminate()
        try:
            process.wait(timeout=2)
        except subprocess.TimeoutExpired:
            logger.warning('Player did not stop, killing it')
            process.kill()


class NullAudioOutput(AudioOutput):
    """Audio output that only logs. Used without a player or in mock mode."""

    def load(self, url: str):
        logger.info(f'[null audio] load {url[:60]}')

    def play(self):
        logger.info('[null audio] play')

    def pause(self):
        logger.info('[null audio] pause')


def create_audio_output(command: List[str] = None) -> AudioOutput:
    """Subprocess output when the player is installed, else the null output."""
    command = list(command or PLAYER_COMMAND)
    if command and shutil.which(command[0]):
        return SubprocessAudioOutput(command)
    logger.warning(f'Player {command[0] if command else "(none)"} not found, previews are silent')
    return NullAudioOutput()
