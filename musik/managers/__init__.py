"""
Musik Managers - Playlist, search and result state.
"""
from .playlist import PlaylistStore, PlaylistSaveError, StorageCorrupt
from .search import SearchSession
from .sorting import sort_tracks

__all__ = ['PlaylistStore', 'PlaylistSaveError', 'StorageCorrupt', 'SearchSession', 'sort_tracks']
