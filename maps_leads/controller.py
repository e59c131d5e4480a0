"""
Search controller: owns the query session state for one user.

A search resets the state and fetches the first page synchronously. Detail
lookups for every place on a page run on a worker pool and append to the
results as they complete, so results arrive progressively and in completion
order. ``load_more`` fetches the next page after the provider's mandatory
pagination delay.

Every lookup and continuation carries the generation of the search that
issued it. Completions from a superseded search are dropped.
"""
import copy
import logging
import threading
from concurrent.futures import Executor, ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any, Callable, Optional

from .config import API_REQUEST_DELAY, DETAIL_FIELDS, DETAIL_WORKERS
from .places import Failure, PlacesProvider

logger = logging.getLogger(__name__)

VIEW_SEARCH = "search"
VIEW_RESULTS = "results"

MISSING_CLIENT_ERROR = (
    "Google Maps client not available. "
    "Set GOOGLE_MAPS_API_KEY in your .env file."
)


def format_failure(status: str) -> str:
    return f"Google Places request failed: {status}"


def start_timer(delay: float, callback: Callable, *args) -> threading.Timer:
    """Run ``callback(*args)`` on a daemon timer thread after ``delay`` seconds."""
    timer = threading.Timer(delay, callback, args=args)
    timer.daemon = True
    timer.start()
    return timer


@dataclass
class QuerySessionState:
    query: str = ""
    results: list = field(default_factory=list)
    loading: bool = False
    error: str = ""
    continuation: Optional[Callable[[], Any]] = None
    view: str = VIEW_SEARCH
    generation: int = 0

    @property
    def has_more(self) -> bool:
        return self.continuation is not None


class SearchController:
    """
    Drive searches, detail fan-out and pagination against a places provider.

    Args:
        provider: Places provider, or None when no API key is configured
        executor: Runs detail lookups (defaults to a thread pool)
        scheduler: ``scheduler(delay, callback, *args)`` runs a callback later
        page_delay: Seconds to wait before invoking a continuation, never
            less than API_REQUEST_DELAY
        fields: Detail fields requested for every place
    """

    def __init__(
        self,
        provider: Optional[PlacesProvider],
        executor: Optional[Executor] = None,
        scheduler: Callable = start_timer,
        page_delay: float = API_REQUEST_DELAY,
        fields: Optional[list] = None
    ):
        self.provider = provider
        self.executor = executor or ThreadPoolExecutor(
            max_workers=DETAIL_WORKERS,
            thread_name_prefix="place-details"
        )
        self.scheduler = scheduler
        self.page_delay = max(page_delay, API_REQUEST_DELAY)
        self.fields = list(fields or DETAIL_FIELDS)

        self._state = QuerySessionState()
        self._pending = 0
        self._lock = threading.Lock()
        self._settled = threading.Condition(self._lock)

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------

    def snapshot(self) -> QuerySessionState:
        """Return a copy of the current state that is safe to render."""
        with self._lock:
            state = copy.copy(self._state)
            state.results = list(self._state.results)
            return state

    @property
    def pending(self) -> int:
        """Number of detail lookups still in flight for the current search."""
        with self._lock:
            return self._pending

    @property
    def busy(self) -> bool:
        with self._lock:
            return self._busy()

    def _busy(self) -> bool:
        return self._state.loading or self._pending > 0

    def wait_until_idle(self, timeout: Optional[float] = None) -> bool:
        """
        Block until no page fetch or detail lookup is outstanding.

        Returns:
            False if the timeout elapsed first
        """
        with self._settled:
            return self._settled.wait_for(lambda: not self._busy(), timeout)

    # ------------------------------------------------------------------
    # User intents
    # ------------------------------------------------------------------

    def submit_search(self, query: str) -> bool:
        """
        Start a new search, discarding the previous results.

        A blank query is ignored.

        Returns:
            True if a search was started
        """
        query = (query or "").strip()
        if not query:
            return False

        with self._lock:
            generation = self._state.generation + 1
            self._state = QuerySessionState(
                query=query,
                loading=True,
                view=self._state.view,
                generation=generation
            )
            self._pending = 0

        if self.provider is None:
            self._fail(generation, MISSING_CLIENT_ERROR)
            return True

        logger.info(f"Searching places for '{query}'")
        try:
            outcome = self.provider.search(query)
        except Exception as e:
            logger.exception(f"Search for '{query}' failed")
            self._fail(generation, str(e) or "An error occurred")
            return True

        self._handle_page(outcome, generation)
        return True

    def load_more(self) -> bool:
        """
        Fetch the next page after the pagination delay.

        Does nothing when the last page has been reached.

        Returns:
            True if a page fetch was scheduled
        """
        with self._lock:
            continuation = self._state.continuation
            if continuation is None or self._state.loading:
                return False
            self._state.loading = True
            generation = self._state.generation

        logger.info(f"Loading next page in {self.page_delay}s")
        self.scheduler(self.page_delay, self._continue, continuation, generation)
        return True

    def back_to_search(self) -> None:
        """Return to the search form, keeping the current results."""
        with self._lock:
            self._state.view = VIEW_SEARCH

    def close(self) -> None:
        self.executor.shutdown(wait=False)

    # ------------------------------------------------------------------
    # Provider callbacks
    # ------------------------------------------------------------------

    def _continue(self, continuation: Callable, generation: int) -> None:
        if not self._is_current(generation):
            logger.debug(f"Dropping next page for superseded search {generation}")
            return
        try:
            outcome = continuation()
        except Exception as e:
            logger.exception("Next page request failed")
            self._fail(generation, str(e) or "An error occurred")
            return
        self._handle_page(outcome, generation)

    def _handle_page(self, outcome: Any, generation: int) -> None:
        if isinstance(outcome, Failure):
            logger.warning(f"Places search failed with status {outcome.status}")
            self._fail(generation, format_failure(outcome.status))
            return

        page = outcome.value
        with self._lock:
            if generation != self._state.generation:
                return
            self._pending += len(page.places)

        logger.info(f"Received {len(page.places)} places, fetching details")
        for place in page.places:
            self.executor.submit(self._fetch_details, place, generation)

        with self._settled:
            if generation != self._state.generation:
                return
            self._state.continuation = page.continuation
            self._state.view = VIEW_RESULTS
            self._state.loading = False
            self._settled.notify_all()

    def _fetch_details(self, place: dict, generation: int) -> None:
        record = place
        try:
            place_id = place.get('place_id')
            if place_id and self._is_current(generation):
                outcome = self.provider.get_details(place_id, self.fields)
                if isinstance(outcome, Failure):
                    logger.warning(
                        f"Details for {place_id} failed ({outcome.status}), "
                        f"keeping search summary"
                    )
                else:
                    record = dict(outcome.value)
                    record.setdefault('place_id', place_id)
        except Exception:
            logger.exception("Detail lookup crashed, keeping search summary")
        finally:
            self._append(record, generation)

    def _append(self, record: dict, generation: int) -> None:
        with self._settled:
            if generation != self._state.generation:
                logger.debug(f"Dropping result for superseded search {generation}")
                return
            self._state.results.append(record)
            self._pending -= 1
            self._settled.notify_all()

    def _fail(self, generation: int, message: str) -> None:
        with self._settled:
            if generation != self._state.generation:
                return
            self._state.error = message
            self._state.continuation = None
            self._state.loading = False
            self._settled.notify_all()

    def _is_current(self, generation: int) -> bool:
        with self._lock:
            return generation == self._state.generation
