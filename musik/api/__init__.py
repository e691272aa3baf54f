"""
Musik API modules - External service integrations.
"""
from .itunes import ITunesSearchClient
from .storage import KeyValueStore, JsonFileStore, MemoryStore

__all__ = ['ITunesSearchClient', 'KeyValueStore', 'JsonFileStore', 'MemoryStore']
