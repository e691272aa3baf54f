"""
Search Session - Search state shown to the user.

Tracks the pending search, the fetched results in API order, the current
sort key and the status message (error or empty results).
"""
import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Optional, List, Dict, Literal, Union

from ..config import NO_RESULTS_MESSAGE
from ..handlers.search_form import SearchForm, validate
from ..models import SearchQuery, SearchOutcome, Track
from .sorting import normalize_sort_key, sort_tracks

logger = logging.getLogger(__name__)


class SearchSession:
    """Runs searches one at a time and keeps the latest results."""

    def __init__(self, client):
        """
        Args:
            client: ITunesSearchClient (anything with search(query) -> SearchOutcome)
        """
        self.client = client
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix='search')
        self._lock = threading.Lock()

        self.pending = False
        self.query: Optional[SearchQuery] = None
        self.errors: Dict[str, str] = {}
        self.message: Optional[str] = None
        self.message_kind: Optional[Literal['info', 'error']] = None
        self.sort_key = 'none'
        self._fetched: List[Track] = []

    # ============================================
    # SUBMIT
    # ============================================

    def submit(self, form: Union[SearchForm, dict]) -> Optional[Future]:
        """
        Validate and start a search.

        Returns a Future resolving to the SearchOutcome once the session
        state is updated, or None if validation failed or a search is
        already pending.
        """
        if isinstance(form, SearchForm):
            validation = form.submit()
        else:
            validation = validate(form)

        with self._lock:
            self.errors = dict(validation.errors)
            if not validation.ok:
                return None
            if self.pending:
                logger.info('Search already in progress, ignoring submission')
                return None
            self.pending = True
            self.query = validation.query
            self.message = None
            self.message_kind = None

        return self._executor.submit(self._run, validation.query)

    def _run(self, query: SearchQuery) -> SearchOutcome:
        try:
            outcome = self.client.search(query)
        except Exception as e:
            logger.error(f'Unexpected search failure: {e}', exc_info=True)
            with self._lock:
                self.pending = False
            raise
        self._apply(outcome)
        return outcome

    def _apply(self, outcome: SearchOutcome):
        with self._lock:
            self.pending = False
            self.sort_key = 'none'
            if not outcome.ok:
                self._fetched = []
                self.message = outcome.error.user_message
                self.message_kind = 'error'
            else:
                self._fetched = list(outcome.tracks)
                if outcome.empty:
                    self.message = NO_RESULTS_MESSAGE
                    self.message_kind = 'info'

    # ============================================
    # RESULTS
    # ============================================

    def sort(self, key: str) -> List[Track]:
        """Select the sort key and return the reordered results."""
        self.sort_key = normalize_sort_key(key)
        logger.debug(f'Sort results by {self.sort_key}')
        return self.results

    @property
    def results(self) -> List[Track]:
        """Fetched results ordered by the current sort key."""
        return sort_tracks(self._fetched, self.sort_key)

    def find(self, track_id: int) -> Optional[Track]:
        return next((t for t in self._fetched if t.id == track_id), None)

    def close(self):
        self._executor.shutdown(wait=False)
