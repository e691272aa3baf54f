"""
Musik - Music search and playlist builder for the iTunes catalog.
"""
__version__ = '0.1.0'
