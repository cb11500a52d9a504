"""CLI job to list grocery stores near a point."""

import argparse
import json
import logging
import sys
from dataclasses import replace
from typing import Any, Dict, List, Optional, Sequence

from shapely.geometry import Point

from grocery_places.core.config import ConfigError, get_settings
from grocery_places.core.errors import NearbySearchError
from grocery_places.core.nearby import nearby_query
from grocery_places.etl.transform import store_to_row

logger = logging.getLogger(__name__)


def run_nearby_job(*, lat: float, lng: float, radius: int, max_pages: int) -> List[Dict[str, Any]]:
    settings = replace(get_settings(), max_pages=max_pages)
    logger.info("Running nearby grocery search at lat=%s lng=%s radius=%d", lat, lng, radius)

    stores = nearby_query(Point(lng, lat), radius, settings=settings)
    return [store_to_row(store) for store in stores]


def build_parser() -> argparse.ArgumentParser:
    settings = get_settings()
    parser = argparse.ArgumentParser(description="Find grocery stores near a point with Google Places")
    parser.add_argument("--lat", dest="lat", type=float, required=True, help="Latitude of the search origin")
    parser.add_argument("--lng", dest="lng", type=float, required=True, help="Longitude of the search origin")
    parser.add_argument(
        "--radius",
        dest="radius",
        type=int,
        default=settings.default_radius_meters,
        help="Search radius in meters",
    )
    parser.add_argument(
        "--max-pages",
        dest="max_pages",
        type=int,
        default=settings.max_pages,
        help="Maximum number of result pages to follow",
    )
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s - %(message)s")
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        rows = run_nearby_job(lat=args.lat, lng=args.lng, radius=args.radius, max_pages=args.max_pages)
    except ConfigError as exc:
        logger.error("Configuration error: %s", exc)
        return 2
    except ValueError as exc:
        parser.error(str(exc))
    except InterruptedError:
        logger.error("Nearby search interrupted")
        return 130
    except NearbySearchError as exc:
        logger.error("Nearby search failed: %s", exc)
        return 1

    json.dump(rows, sys.stdout, ensure_ascii=False, indent=2)
    sys.stdout.write("\n")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
