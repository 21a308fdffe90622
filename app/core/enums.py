"""
Centralized enums for repeated string values used across the backend.

Use .value when a string is required (e.g. for query parameters or API payloads).
"""

from enum import Enum


# -----------------------------------------------------------------------------
# List views (visit history, file list)
# -----------------------------------------------------------------------------


class SortOrder(str, Enum):
    """Order of list items by record identifier."""

    ASC = "asc"
    DESC = "desc"


# -----------------------------------------------------------------------------
# Map widget lifecycle and marker appearance
# -----------------------------------------------------------------------------


class MapPhase(str, Enum):
    """
    Lifecycle phase of one map controller.

    UNINITIALIZED -> WAITING_FOR_CONTAINER -> WAITING_FOR_LIBRARY -> READY -> DISPOSED.
    ERRORED ends an initialization cycle (reachable from either waiting phase);
    retry() starts a new one.
    """

    UNINITIALIZED = "uninitialized"
    WAITING_FOR_CONTAINER = "waiting_for_container"
    WAITING_FOR_LIBRARY = "waiting_for_library"
    READY = "ready"
    ERRORED = "errored"
    DISPOSED = "disposed"


class MarkerVisualState(str, Enum):
    """Appearance of a location marker."""

    SELECTED = "selected"
    UNSELECTED = "unselected"


# -----------------------------------------------------------------------------
# API response message
# -----------------------------------------------------------------------------


class ApiResponseMessage(str, Enum):
    """Default message for successful API responses."""

    SUCCESS = "success"
