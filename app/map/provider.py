"""
Interfaces of the third-party map widget and of the provider that hands out
its library once loaded.

The library becomes available asynchronously (a script loaded elsewhere), so
the controller polls a MapLibraryProvider instead of reading a global.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional, Protocol, Tuple, Union

from app.map.appearance import MarkerAppearance


class MarkerElement(Protocol):
    """Rendered element of one marker (pin SVG)."""

    def paint(self, appearance: MarkerAppearance) -> None:
        """Apply scale and per-path colors."""

    def add_click_listener(self, listener: Callable[[], None]) -> None: ...


class MapMarker(Protocol):
    def get_element(self) -> Optional[MarkerElement]:
        """Rendered element, or None when the widget has not created it."""

    def remove(self) -> None: ...


class MapWidget(Protocol):
    def add_marker(self, lng: float, lat: float) -> MapMarker: ...

    def on(self, event: str, handler: Callable[[Any], None]) -> None: ...

    def remove(self) -> None: ...


class MapLibrary(Protocol):
    def create_map(self, container: Any, center: Tuple[float, float], zoom: int) -> MapWidget: ...


class AcquireStatus(str, Enum):
    PENDING = "pending"


PENDING = AcquireStatus.PENDING


@dataclass(frozen=True)
class LibraryUnavailable:
    """The library will never load (e.g. the script failed). Ends polling immediately."""

    reason: str


AcquireResult = Union[MapLibrary, AcquireStatus, LibraryUnavailable]


class MapLibraryProvider(Protocol):
    def try_acquire(self) -> AcquireResult:
        """Return the library, PENDING while it is still loading, or LibraryUnavailable."""


class CallableLibraryProvider:
    """
    Provider backed by a lookup function that returns None until the library exists.

    An exception from the lookup is reported as LibraryUnavailable.
    """

    def __init__(self, lookup: Callable[[], Optional[MapLibrary]]):
        self._lookup = lookup

    def try_acquire(self) -> AcquireResult:
        try:
            library = self._lookup()
        except Exception as e:  # noqa: BLE001 - any lookup failure means the library is unusable
            return LibraryUnavailable(f"{type(e).__name__}: {e}")
        return PENDING if library is None else library
