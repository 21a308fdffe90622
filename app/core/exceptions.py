"""Domain exceptions translated to API error responses by the handlers in app.main."""

from typing import Any, Optional


class VisitLogError(Exception):
    """Base class for errors surfaced to API callers."""

    status_code: int = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(VisitLogError):
    """A record referenced by a mutation does not exist."""

    status_code = 404


class ReferencedRecordError(VisitLogError):
    """Delete blocked by dependent rows (foreign key constraint)."""

    status_code = 409

    def __init__(self, entity: str, record_id: int):
        super().__init__(
            f"Failed to delete {entity} {record_id}: it may have related records."
        )
        self.entity = entity
        self.record_id = record_id


class UploadError(VisitLogError):
    """Raised when an uploaded file cannot be decoded or written."""

    def __init__(self, message: str, status_code: int = 500):
        super().__init__(message)
        self.status_code = status_code


class GeocodingError(VisitLogError):
    """Raised when a reverse geocoding request fails."""

    status_code = 502

    def __init__(self, message: str, upstream_status: Optional[int] = None, body: Any = None):
        super().__init__(message)
        self.upstream_status = upstream_status
        self.body = body
