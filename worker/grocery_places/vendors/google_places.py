"""Client utilities for the Google Places API."""

import logging
from typing import Any, Dict, Optional

import requests

from grocery_places.core.errors import ProtocolViolationError, RemoteServiceError, TransportError
from grocery_places.etl.transform import to_search_response
from grocery_places.models import SearchRequest, SearchResponse

logger = logging.getLogger(__name__)
_SESSION = requests.Session()
_BASE_URL = "https://maps.googleapis.com/maps/api/place"
_OK_STATUSES = {"OK", "ZERO_RESULTS"}


class GooglePlacesClient:
    """Blocking Nearby Search client. Safe to share across threads for read-only use."""

    def __init__(self, api_key: str, *, timeout: float = 10, session: Optional[requests.Session] = None) -> None:
        if not api_key:
            raise ValueError("A Google Places API key is required")
        self._api_key = api_key
        self._timeout = timeout
        self._session = session

    def search(self, request: SearchRequest) -> SearchResponse:
        params = {
            "location": request.origin.to_param(),
            "radius": request.radius_meters,
            "type": request.place_type,
        }
        return to_search_response(self._nearby_search(params))

    def search_next_page(self, token: str) -> SearchResponse:
        return to_search_response(self._nearby_search({"pagetoken": token}))

    def _nearby_search(self, params: Dict[str, Any]) -> Dict[str, Any]:
        session = self._session if self._session is not None else _SESSION
        try:
            response = session.get(
                f"{_BASE_URL}/nearbysearch/json",
                params={**params, "key": self._api_key},
                timeout=self._timeout,
            )
            response.raise_for_status()
            payload = response.json()
        except requests.RequestException as exc:
            logger.error("nearby_search transport failure: %s", exc.__class__.__name__)
            raise TransportError(f"Places API request failed ({exc.__class__.__name__})") from exc
        except ValueError as exc:
            logger.error("nearby_search returned a non-JSON body")
            raise TransportError("Places API returned an undecodable body") from exc

        if not isinstance(payload, dict):
            logger.error("nearby_search returned a %s instead of an object", type(payload).__name__)
            raise ProtocolViolationError("Places API returned a JSON body that is not an object")

        status = payload.get("status")
        if status not in _OK_STATUSES:
            logger.error("nearby_search failed: status=%s, error_message=%s", status, payload.get("error_message"))
            raise RemoteServiceError(status or "UNKNOWN_ERROR", payload.get("error_message"))
        return payload
