"""
Result Sorting - Orders search results by release date or price.
"""
from datetime import datetime, timezone
from typing import List

from ..models import Track

# Missing release dates sort as the earliest possible date
_EARLIEST = datetime.min.replace(tzinfo=timezone.utc)


def normalize_sort_key(key: str) -> str:
    """Map a sort selection to a known key. '' means 'none'."""
    if not key or key == 'none':
        return 'none'
    if key in ('releaseDate', 'price'):
        return key
    raise ValueError(f'Unknown sort key: {key}')


def sort_tracks(tracks: List[Track], key: str) -> List[Track]:
    """
    Return a new list ordered by key.

    releaseDate: newest first, tracks without a date last.
    price: cheapest first (track price, else collection price, else 0).
    none: the given order.

    Sorting is stable, so ties keep their original relative order.
    """
    key = normalize_sort_key(key)
    if key == 'releaseDate':
        return sorted(tracks, key=lambda t: t.release_date or _EARLIEST, reverse=True)
    if key == 'price':
        return sorted(tracks, key=lambda t: t.effective_price)
    return list(tracks)
