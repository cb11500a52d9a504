"""HTTP entrypoint for nearby grocery lookups (Cloud Run friendly)."""

from __future__ import annotations

import logging
import os
from concurrent.futures import ThreadPoolExecutor
from typing import Any

from flask import Flask, jsonify, request
from shapely.geometry import Point

from grocery_places.core.config import ConfigError, get_settings
from grocery_places.core.errors import NearbySearchError, RemoteServiceError
from grocery_places.core.nearby import nearby_query
from grocery_places.etl.transform import store_to_row

# ---------- Logging ----------
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s - %(message)s",
)
logger = logging.getLogger(__name__)

# ---------- App & executor ----------
app = Flask(__name__)
# Caps how many multi-second lookups run at once; the request thread waits on the result.
_executor = ThreadPoolExecutor(max_workers=get_settings().worker_threads)

# ---------- Routes ----------


@app.get("/")
def root() -> Any:
    """Simple root to avoid 404 on GET /"""
    return "ok", 200


@app.get("/healthz")
def healthcheck() -> Any:
    """Lightweight health endpoint; reads settings only, never calls Places."""
    settings = get_settings()
    return (
        jsonify(
            {
                "status": "ok",
                "api_key_configured": bool(settings.google_api_key),
                "max_pages": settings.max_pages,
                "revision": os.getenv("K_REVISION", "unknown"),
            }
        ),
        200,
    )


@app.get("/nearby")
def nearby() -> Any:
    """
    Find grocery stores near a point.
    Required query params: lat, lng
    Optional: radius (int meters, defaults to DEFAULT_RADIUS_METERS)
    """
    args = request.args
    missing = [f for f in ("lat", "lng") if not args.get(f)]
    if missing:
        return jsonify({"error": f"missing fields: {', '.join(missing)}"}), 400

    try:
        lat = float(args["lat"])
        lng = float(args["lng"])
    except (TypeError, ValueError):
        return jsonify({"error": "lat and lng must be numeric"}), 400

    radius_raw = args.get("radius")
    radius = get_settings().default_radius_meters
    if radius_raw is not None:
        try:
            radius = int(radius_raw)
        except (TypeError, ValueError):
            return jsonify({"error": "radius must be an integer"}), 400
        if radius <= 0:
            return jsonify({"error": "radius must be positive"}), 400

    logger.info("Queueing nearby lookup: lat=%s lng=%s radius=%d", lat, lng, radius)
    future = _executor.submit(nearby_query, Point(lng, lat), radius)

    try:
        stores = future.result()
    except ValueError as exc:
        return jsonify({"error": str(exc)}), 400
    except ConfigError as exc:
        logger.error("Configuration error: %s", exc)
        return jsonify({"error": "service not configured"}), 503
    except InterruptedError:
        return jsonify({"error": "lookup interrupted"}), 503
    except RemoteServiceError as exc:
        return jsonify({"error": "places api rejected the request", "status": exc.status}), 502
    except NearbySearchError as exc:
        logger.error("Nearby lookup failed: %s", exc)
        return jsonify({"error": "places api unavailable"}), 502

    return jsonify({"data": [store_to_row(store) for store in stores]}), 200


def main() -> None:
    """Cloud Run injects PORT; fall back to WORKER_PORT for local runs."""
    env_port = os.getenv("PORT")
    logger.info("[BOOT] ENV PORT=%s", env_port)

    port = int(env_port or get_settings().worker_port)
    logger.info("[BOOT] Binding on 0.0.0.0:%d", port)

    app.run(host="0.0.0.0", port=port)


if __name__ == "__main__":
    main()
