"""Utilities for transforming Google Places responses into stores."""

import logging
from typing import Any, Dict, Mapping

from grocery_places.core.errors import ProtocolViolationError
from grocery_places.core.geo import from_service, latlng_from_payload
from grocery_places.models import RawResult, SearchResponse, Store

logger = logging.getLogger(__name__)


def to_raw_result(result: Mapping[str, Any]) -> RawResult:
    if not isinstance(result, Mapping):
        raise ProtocolViolationError(f"Places result is not an object: {result!r}")
    geometry = result.get("geometry") or {}
    if not isinstance(geometry, Mapping):
        raise ProtocolViolationError(f"Places result geometry is not an object: {geometry!r}")
    name = str(result.get("name") or "").strip()
    if not name:
        logger.debug("Places result without name: place_id=%s", result.get("place_id"))
    return RawResult(
        name=name,
        location=latlng_from_payload(geometry.get("location")),
        place_id=result.get("place_id"),
    )


def to_search_response(payload: Mapping[str, Any]) -> SearchResponse:
    results = payload.get("results") or []
    if not isinstance(results, list):
        raise ProtocolViolationError(f"Places results is not a list: {type(results).__name__}")
    return SearchResponse(
        items=tuple(to_raw_result(result) for result in results),
        next_page_token=payload.get("next_page_token") or None,
    )


def to_store(raw: RawResult) -> Store:
    return Store(name=raw.name, location=from_service(raw.location))


def store_to_row(store: Store) -> Dict[str, Any]:
    return {
        "name": store.name,
        "lat": store.location.y,
        "lng": store.location.x,
    }
