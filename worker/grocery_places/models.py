"""Core data models shared by the nearby grocery search."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

from shapely.geometry import Point

from grocery_places.core.geo import LatLng

GROCERY_OR_SUPERMARKET = "grocery_or_supermarket"


@dataclass(frozen=True)
class SearchRequest:
    origin: LatLng
    radius_meters: int
    place_type: str = GROCERY_OR_SUPERMARKET


@dataclass(frozen=True)
class RawResult:
    """One place as returned by a single Places API page."""

    name: str
    location: LatLng
    place_id: Optional[str] = None


@dataclass(frozen=True)
class SearchResponse:
    items: Tuple[RawResult, ...] = ()
    next_page_token: Optional[str] = None


@dataclass(slots=True)
class Store:
    """Normalized grocery store. IDs are assigned later, when the store is persisted."""

    name: str
    location: Point
