"""Error taxonomy for nearby store lookups."""

from typing import Optional


class NearbySearchError(RuntimeError):
    """Base class for failures while collecting nearby stores."""


class RemoteServiceError(NearbySearchError):
    """Raised when the Places API rejects a request (bad key, quota, malformed request)."""

    def __init__(self, status: str, message: Optional[str] = None) -> None:
        self.status = status
        self.message = message
        super().__init__(f"{status}: {message}" if message else status)


class TransportError(NearbySearchError):
    """Raised when the Places API cannot be reached or answers with undecodable data."""


class ProtocolViolationError(NearbySearchError):
    """Raised when a response breaks the documented Places API contract."""
