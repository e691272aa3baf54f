"""
Musik Data Models - Core data structures.
"""
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Optional, List, Dict, Literal

logger = logging.getLogger(__name__)

SortKey = Literal['none', 'releaseDate', 'price']
ExplicitPreference = Literal['all', 'yes', 'no']


def _to_decimal(value) -> Optional[Decimal]:
    """Convert a catalog price to Decimal (None when absent or unusable)."""
    if value is None or isinstance(value, bool):
        return None
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError):
        return None


def _to_int(value) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _to_str(value) -> Optional[str]:
    if value is None:
        return None
    return str(value)


def parse_release_date(value) -> Optional[datetime]:
    """Parse an ISO-8601 release date into an aware UTC datetime."""
    if not value or not isinstance(value, str):
        return None
    text = value.strip()
    if text.endswith('Z'):
        text = text[:-1] + '+00:00'
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        logger.debug(f'Unparseable release date: {value!r}')
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


@dataclass
class Track:
    """One catalog item, from a search result or the saved playlist."""
    id: int
    title: Optional[str] = None
    artist_name: Optional[str] = None
    collection_name: Optional[str] = None
    track_price: Optional[Decimal] = None
    collection_price: Optional[Decimal] = None
    currency: Optional[str] = None
    release_date: Optional[datetime] = None
    preview_url: Optional[str] = None
    artwork_url: Optional[str] = None
    duration_millis: Optional[int] = None
    genre: Optional[str] = None
    kind: Optional[str] = None
    explicitness: Optional[str] = None

    @classmethod
    def from_api(cls, raw: dict) -> Optional['Track']:
        """Build a Track from a catalog item, None if it has no usable id."""
        if not isinstance(raw, dict):
            return None
        track_id = _to_int(raw.get('trackId'))
        if track_id is None:
            track_id = _to_int(raw.get('collectionId'))
        if track_id is None:
            return None
        return cls(
            id=track_id,
            title=_to_str(raw.get('trackName') or raw.get('collectionName')),
            artist_name=_to_str(raw.get('artistName')),
            collection_name=_to_str(raw.get('collectionName')),
            track_price=_to_decimal(raw.get('trackPrice')),
            collection_price=_to_decimal(raw.get('collectionPrice')),
            currency=_to_str(raw.get('currency')),
            release_date=parse_release_date(raw.get('releaseDate')),
            preview_url=_to_str(raw.get('previewUrl')) or None,
            artwork_url=_to_str(raw.get('artworkUrl100') or raw.get('artworkUrl60')),
            duration_millis=_to_int(raw.get('trackTimeMillis')),
            genre=_to_str(raw.get('primaryGenreName')),
            kind=_to_str(raw.get('kind') or raw.get('wrapperType')),
            explicitness=_to_str(raw.get('trackExplicitness') or raw.get('collectionExplicitness')),
        )

    def to_dict(self) -> dict:
        """Serialize using the catalog's field names."""
        data = {
            'trackId': self.id,
            'trackName': self.title,
            'artistName': self.artist_name,
            'collectionName': self.collection_name,
            'trackPrice': float(self.track_price) if self.track_price is not None else None,
            'collectionPrice': float(self.collection_price) if self.collection_price is not None else None,
            'currency': self.currency,
            'releaseDate': self.release_date.strftime('%Y-%m-%dT%H:%M:%SZ') if self.release_date else None,
            'previewUrl': self.preview_url,
            'artworkUrl100': self.artwork_url,
            'trackTimeMillis': self.duration_millis,
            'primaryGenreName': self.genre,
            'kind': self.kind,
            'trackExplicitness': self.explicitness,
        }
        return {k: v for k, v in data.items() if v is not None}

    @property
    def price(self) -> Optional[Decimal]:
        """Track price, falling back to the collection price."""
        if self.track_price is not None:
            return self.track_price
        return self.collection_price

    @property
    def effective_price(self) -> Decimal:
        price = self.price
        return price if price is not None else Decimal('0')

    @property
    def has_preview(self) -> bool:
        return bool(self.preview_url)


@dataclass(frozen=True)
class SearchQuery:
    """A validated search request. Built fresh per submission."""
    keyword: str
    media_type: str = 'music'
    country: str = 'US'
    limit: int = 25
    explicit: ExplicitPreference = 'all'


@dataclass
class Validation:
    """Result of validating the search form."""
    query: Optional[SearchQuery] = None
    errors: Dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return self.query is not None and not self.errors


@dataclass(frozen=True)
class SearchError:
    """A failed search: HTTP status error or transport failure."""
    kind: Literal['http', 'network']
    message: str
    status: Optional[int] = None

    @property
    def user_message(self) -> str:
        return f'Failed to fetch data: {self.message}'


@dataclass
class SearchOutcome:
    """Normalized result of one catalog search."""
    tracks: List[Track] = field(default_factory=list)
    error: Optional[SearchError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def empty(self) -> bool:
        """Successful search with zero results."""
        return self.ok and not self.tracks


@dataclass(frozen=True)
class PlaybackState:
    """Preview playback state: idle, or playing one track."""
    playing_id: Optional[int] = None

    @property
    def is_idle(self) -> bool:
        return self.playing_id is None
