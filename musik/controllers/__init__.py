"""
Musik Controllers - Preview playback.
"""
from .audio import AudioOutput, SubprocessAudioOutput, NullAudioOutput, create_audio_output
from .playback import PlaybackController

__all__ = [
    'AudioOutput',
    'SubprocessAudioOutput',
    'NullAudioOutput',
    'create_audio_output',
    'PlaybackController',
]
