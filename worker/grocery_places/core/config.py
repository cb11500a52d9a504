"""Application configuration helpers."""

import logging
import os
from dataclasses import dataclass
from functools import lru_cache

from dotenv import load_dotenv

logger = logging.getLogger(__name__)


class ConfigError(RuntimeError):
    """Raised when mandatory configuration is missing."""


@dataclass(frozen=True)
class Settings:
    google_api_key: str
    page_delay_seconds: float = 2.0
    max_pages: int = 3
    request_timeout: float = 10.0
    default_radius_meters: int = 1500
    worker_port: int = 9000
    worker_threads: int = 4


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Load settings from environment variables with sensible defaults."""
    load_dotenv()

    google_api_key = os.getenv("GOOGLE_API_KEY", "")
    page_delay_seconds = float(os.getenv("PLACES_PAGE_DELAY_SECONDS", "2.0"))
    max_pages = int(os.getenv("PLACES_MAX_PAGES", "3"))
    request_timeout = float(os.getenv("PLACES_REQUEST_TIMEOUT", "10"))
    default_radius_meters = int(os.getenv("DEFAULT_RADIUS_METERS", "1500"))
    worker_port = int(os.getenv("WORKER_PORT", "9000"))
    worker_threads = int(os.getenv("WORKER_THREADS", "4"))

    if not google_api_key:
        logger.warning("GOOGLE_API_KEY is not configured; Google Places requests will fail.")
    if max_pages < 1:
        logger.warning("PLACES_MAX_PAGES=%d is below 1; using 1.", max_pages)
        max_pages = 1

    return Settings(
        google_api_key=google_api_key,
        page_delay_seconds=page_delay_seconds,
        max_pages=max_pages,
        request_timeout=request_timeout,
        default_radius_meters=default_radius_meters,
        worker_port=worker_port,
        worker_threads=worker_threads,
    )


def require_api_key(settings: Settings) -> str:
    if not settings.google_api_key:
        raise ConfigError("GOOGLE_API_KEY must be set in the environment to query Google Places.")
    return settings.google_api_key
