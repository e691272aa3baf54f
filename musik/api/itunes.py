"""
iTunes Search Client - Catalog search over the public search API.
"""
import logging
from typing import List, Optional, Tuple
from urllib.parse import urlencode, quote

import requests

from ..config import SEARCH_URL, SEARCH_TIMEOUT, USER_AGENT
from ..models import SearchQuery, SearchOutcome, SearchError, Track

logger = logging.getLogger(__name__)

EXPLICIT_PARAM = {'yes': 'Yes', 'no': 'No'}


class ITunesSearchClient:
    """Issues catalog searches and normalizes the responses."""

    def __init__(self, base_url: str = SEARCH_URL, session: requests.Session = None,
                 timeout: Optional[float] = SEARCH_TIMEOUT):
        self.base_url = base_url
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers['User-Agent'] = USER_AGENT

    @staticmethod
    def build_params(query: SearchQuery) -> List[Tuple[str, str]]:
        """Query parameters in request order. 'explicit' only when filtering."""
        params = [
            ('term', query.keyword),
            ('media', query.media_type),
            ('country', query.country),
            ('limit', str(query.limit)),
        ]
        explicit = EXPLICIT_PARAM.get(query.explicit)
        if explicit:
            params.append(('explicit', explicit))
        return params

    def build_url(self, query: SearchQuery) -> str:
        """Full request URL with the term percent-encoded."""
        return f'{self.base_url}?{urlencode(self.build_params(query), quote_via=quote)}'

    def search(self, query: SearchQuery) -> SearchOutcome:
        """Run one search. Blocks until the request completes."""
        url = self.build_url(query)
        logger.info(f'Search: term={query.keyword!r} media={query.media_type} '
                    f'country={query.country} limit={query.limit} explicit={query.explicit}')
        try:
            resp = self.session.get(url, timeout=self.timeout)
        except requests.RequestException as e:
            logger.error(f'Search request failed: {e}', exc_info=True)
            return SearchOutcome(error=SearchError(kind='network', message=str(e)))

        if not resp.ok:
            logger.warning(f'Search failed: {resp.status_code}')
            return SearchOutcome(error=SearchError(
                kind='http',
                status=resp.status_code,
                message=f'HTTP error! status: {resp.status_code}',
            ))

        try:
            data = resp.json()
        except ValueError as e:
            logger.error(f'Invalid JSON in search response: {e}')
            return SearchOutcome(error=SearchError(kind='network', message=str(e)))

        raw_items = data.get('results') if isinstance(data, dict) else None
        if raw_items is not None and not isinstance(raw_items, list):
            logger.error(f'Unexpected results type in search response: {type(raw_items).__name__}')
            return SearchOutcome(error=SearchError(
                kind='network',
                message=f'Unexpected response format: results is {type(raw_items).__name__}',
            ))
        tracks = self._normalize(raw_items or [])
        logger.info(f'Search returned {len(tracks)} results')
        return SearchOutcome(tracks=tracks)

    @staticmethod
    def _normalize(raw_items: list) -> List[Track]:
        """Convert raw items to Tracks, dropping items without an id."""
        tracks = []
        for raw in raw_items:
            track = Track.from_api(raw)
            if track is None:
                logger.warning(f'Skipping result without id: {str(raw)[:80]}')
                continue
            tracks.append(track)
        return tracks
