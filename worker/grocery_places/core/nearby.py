"""Paginated nearby grocery search against Google Places.

The Places API hands out at most three pages of twenty results and requires
a pause of about two seconds before a ``next_page_token`` becomes valid.
A single lookup therefore blocks its caller for several seconds; run it on a
worker thread, never on a UI or other latency-sensitive thread.
"""

import enum
import logging
import threading
from typing import Callable, List, Optional

from shapely.geometry import Point

from grocery_places.core.config import Settings, get_settings, require_api_key
from grocery_places.core.errors import ProtocolViolationError
from grocery_places.core.geo import is_valid_point, to_service
from grocery_places.etl.transform import to_store
from grocery_places.models import SearchRequest, SearchResponse, Store
from grocery_places.vendors.google_places import GooglePlacesClient

logger = logging.getLogger(__name__)

PAGE_DELAY_SECONDS = 2.0
MAX_PAGES = 3
PAGE_SIZE = 20


class SearchState(enum.Enum):
    INITIAL = "initial"
    AWAITING_RESPONSE = "awaiting_response"
    PAUSING = "pausing"
    DONE = "done"
    FAILED = "failed"


class NearbySearch:
    """Drives one or more Nearby Search round trips and folds the pages into a list of stores.

    ``sleep`` replaces the inter-page pause (tests pass a recorder). Without it
    the pause waits on ``cancel_event`` and raises ``InterruptedError`` when the
    event is set. An instance runs one lookup at a time; create one per caller.
    An interrupt only aborts the lookup in progress unless ``cancel_event`` was
    passed in, in which case clearing that event is up to its owner.
    """

    def __init__(
        self,
        client: GooglePlacesClient,
        *,
        page_delay: float = PAGE_DELAY_SECONDS,
        max_pages: int = MAX_PAGES,
        sleep: Optional[Callable[[float], None]] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> None:
        if max_pages < 1:
            raise ValueError("max_pages must be at least 1")
        self._client = client
        self._page_delay = page_delay
        self._max_pages = max_pages
        self._sleep = sleep
        self._owns_event = cancel_event is None
        self._cancel_event = threading.Event() if cancel_event is None else cancel_event
        self.state = SearchState.INITIAL

    def interrupt(self) -> None:
        """Abort a pending or running pause; the lookup fails with ``InterruptedError``."""
        self._cancel_event.set()

    def run(self, origin: Point, radius_meters: int) -> List[Store]:
        _validate(origin, radius_meters)
        if self._owns_event:
            self._cancel_event.clear()
        self._set_state(SearchState.INITIAL)
        request = SearchRequest(origin=to_service(origin), radius_meters=radius_meters)
        results: List[Store] = []
        page = 1

        try:
            self._set_state(SearchState.AWAITING_RESPONSE)
            response = self._client.search(request)
            while True:
                self._collect(response, results, page)
                token = response.next_page_token
                if not token:
                    break
                if page >= self._max_pages:
                    raise ProtocolViolationError(
                        f"Places API still returned a next_page_token after {page} pages"
                    )
                self._set_state(SearchState.PAUSING)
                self._pause()
                page += 1
                self._set_state(SearchState.AWAITING_RESPONSE)
                response = self._client.search_next_page(token)
        except Exception as exc:
            self._set_state(SearchState.FAILED)
            logger.error("Nearby search failed on page %d: %s", page, exc)
            raise

        self._set_state(SearchState.DONE)
        logger.info("Nearby search completed: stores=%d pages=%d", len(results), page)
        return results

    def _collect(self, response: SearchResponse, results: List[Store], page: int) -> None:
        logger.info("Fetched %d results on page %d", len(response.items), page)
        if len(response.items) > PAGE_SIZE:
            logger.warning("Page %d holds %d results, more than the documented %d", page, len(response.items), PAGE_SIZE)
        for raw in response.items:
            results.append(to_store(raw))

    def _pause(self) -> None:
        if self._sleep is not None:
            self._sleep(self._page_delay)
            interrupted = self._cancel_event.is_set()
        else:
            interrupted = self._cancel_event.wait(self._page_delay)
        if interrupted:
            raise InterruptedError("Nearby search interrupted while waiting for the next page")

    def _set_state(self, state: SearchState) -> None:
        logger.debug("Nearby search state %s -> %s", self.state.value, state.value)
        self.state = state


def _validate(origin: Point, radius_meters: int) -> None:
    if isinstance(radius_meters, bool) or not isinstance(radius_meters, int) or radius_meters <= 0:
        raise ValueError(f"radius_meters must be a positive integer, got {radius_meters!r}")
    if not is_valid_point(origin):
        raise ValueError(f"origin must be a point with lng in [-180, 180] and lat in [-90, 90], got {origin!r}")


def nearby_query(
    origin: Point,
    radius_meters: int,
    *,
    client: Optional[GooglePlacesClient] = None,
    settings: Optional[Settings] = None,
    sleep: Optional[Callable[[float], None]] = None,
    cancel_event: Optional[threading.Event] = None,
) -> List[Store]:
    """Return the grocery stores within ``radius_meters`` of ``origin``, in Places API order.

    Blocks for up to several seconds. All-or-nothing: any failure raises and
    no partial results are returned.
    """
    settings = settings or get_settings()
    if client is None:
        client = GooglePlacesClient(require_api_key(settings), timeout=settings.request_timeout)
    search = NearbySearch(
        client,
        page_delay=settings.page_delay_seconds,
        max_pages=settings.max_pages,
        sleep=sleep,
        cancel_event=cancel_event,
    )
    return search.run(origin, radius_meters)
