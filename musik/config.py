"""
Musik Configuration - All constants and settings.
"""
import os
import shlex
from pathlib import Path

# ============================================
# NETWORK ENDPOINTS
# ============================================

SEARCH_URL = os.environ.get('MUSIK_SEARCH_URL', 'https://itunes.apple.com/search')

# No timeout by default: a hung search simply stays pending
_timeout = os.environ.get('MUSIK_SEARCH_TIMEOUT')
SEARCH_TIMEOUT = float(_timeout) if _timeout else None

USER_AGENT = 'musik/0.1 (+https://itunes.apple.com/search)'

# ============================================
# PATHS
# ============================================

DATA_DIR = Path(os.environ.get('MUSIK_DATA_DIR', Path.home() / '.musik'))
STORAGE_PATH = DATA_DIR / 'storage.json'

# Storage key for the saved playlist
PLAYLIST_KEY = 'musicPlaylist'

# Logging directory
LOG_DIR = Path(os.environ.get('MUSIK_LOG_DIR', DATA_DIR / 'logs'))
LOG_FILE = LOG_DIR / 'musik.log'
LOG_MAX_BYTES = 5 * 1024 * 1024  # 5MB per file
LOG_BACKUP_COUNT = 10
LOG_LEVEL = os.environ.get('MUSIK_LOG_LEVEL', 'WARNING').upper()

# ============================================
# SEARCH FORM
# ============================================

KEYWORD_MIN_LENGTH = 2
KEYWORD_MAX_LENGTH = 100

LIMIT_MIN = 1
LIMIT_MAX = 200

MEDIA_TYPES = {
    'music': 'Music',
    'movie': 'Movie',
    'podcast': 'Podcast',
    'musicVideo': 'Music Video',
    'audiobook': 'Audiobook',
    'tvShow': 'TV Show',
    'ebook': 'eBook',
}

COUNTRIES = {
    'US': 'United States',
    'GB': 'United Kingdom',
    'CA': 'Canada',
    'AU': 'Australia',
    'JP': 'Japan',
    'KR': 'South Korea',
    'ID': 'Indonesia',
    'SG': 'Singapore',
    'MY': 'Malaysia',
    'TH': 'Thailand',
}

EXPLICIT_CHOICES = ('all', 'yes', 'no')

FORM_DEFAULTS = {
    'keyword': '',
    'mediaType': 'music',
    'country': 'US',
    'limit': '25',
    'explicit': 'all',
}

# ============================================
# RESULTS
# ============================================

SORT_KEYS = ('none', 'releaseDate', 'price')

NO_RESULTS_MESSAGE = 'No results found. Try different search terms.'

# ============================================
# AUDIO PREVIEW
# ============================================

# Player command, the preview URL is appended as the last argument
PLAYER_COMMAND = shlex.split(
    os.environ.get('MUSIK_PLAYER', 'ffplay -nodisp -autoexit -loglevel quiet')
)
