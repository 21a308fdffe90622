"""
Owning controller of one embedded map widget and its location markers.

The controller waits for the rendering container, then for the map library,
builds the widget and keeps one marker per location. Markers are recreated
only when the locations fingerprint changes; selection changes repaint the
existing markers in place.

Everything runs on the event loop: waits are asyncio.sleep calls inside a
single initialization task, which dispose() cancels.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple

from app.core.config import Settings, get_settings
from app.core.enums import MapPhase
from app.map.appearance import MapLocation, locations_fingerprint, marker_appearance
from app.map.provider import (
    PENDING,
    LibraryUnavailable,
    MapLibrary,
    MapLibraryProvider,
    MapMarker,
    MapWidget,
)

logger = logging.getLogger(__name__)


class MapInitializationError(Exception):
    """The container or the map library did not become available."""


@dataclass(frozen=True)
class MapOptions:
    center: Tuple[float, float]  # (lng, lat)
    zoom: int
    container_poll_interval: float
    container_max_attempts: int
    library_retry_delay: float
    library_max_retries: int
    settle_delay: float

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "MapOptions":
        settings = settings or get_settings()
        return cls(
            center=(settings.MAP_CENTER_LNG, settings.MAP_CENTER_LAT),
            zoom=settings.MAP_ZOOM,
            container_poll_interval=settings.MAP_CONTAINER_POLL_INTERVAL,
            container_max_attempts=settings.MAP_CONTAINER_MAX_ATTEMPTS,
            library_retry_delay=settings.MAP_LIBRARY_RETRY_DELAY,
            library_max_retries=settings.MAP_LIBRARY_MAX_RETRIES,
            settle_delay=settings.MAP_SETTLE_DELAY,
        )


@dataclass
class _MarkerHandle:
    location_id: str
    marker: MapMarker
    generation: int
    click_attached: bool = False


class MapController:
    """
    Lifecycle of one map instance.

    **Input (request):**
        - provider: Hands out the map library once it has loaded.
        - container_lookup: Returns the rendering container, or None while it does not exist yet.
        - on_marker_click: Called with the location id of a clicked marker. The caller
          decides the new selection and passes it back through select().
        - on_error: Called with a message when initialization fails or the widget reports an error.

    **Output (response):**
        - phase, markers and selected_location_id reflect the current state.
    """

    def __init__(
        self,
        provider: MapLibraryProvider,
        container_lookup: Callable[[], Optional[Any]],
        options: Optional[MapOptions] = None,
        on_marker_click: Optional[Callable[[str], None]] = None,
        on_error: Optional[Callable[[str], None]] = None,
    ):
        self._provider = provider
        self._container_lookup = container_lookup
        self._options = options or MapOptions.from_settings()
        self._on_marker_click = on_marker_click
        self._on_error = on_error

        self._phase = MapPhase.UNINITIALIZED
        self._task: Optional[asyncio.Task] = None
        self._map: Optional[MapWidget] = None
        self._markers: Dict[str, _MarkerHandle] = {}
        self._locations: List[MapLocation] = []
        self._built_fingerprint: Optional[str] = None
        self._generation = 0

        self.selected_location_id: Optional[str] = None
        self.error: Optional[str] = None

    # -------------------------------------------------------------------------
    # State
    # -------------------------------------------------------------------------

    @property
    def phase(self) -> MapPhase:
        return self._phase

    @property
    def generation(self) -> int:
        """Number of marker sets built so far."""
        return self._generation

    @property
    def map(self) -> Optional[MapWidget]:
        return self._map

    @property
    def markers(self) -> Dict[str, MapMarker]:
        return {location_id: handle.marker for location_id, handle in self._markers.items()}

    def _set_phase(self, phase: MapPhase) -> None:
        logger.debug("Map phase %s -> %s", self._phase.value, phase.value)
        self._phase = phase

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def mount(self) -> asyncio.Task:
        """Start initialization on the running loop. Returns the initialization task."""
        if self._phase is not MapPhase.UNINITIALIZED:
            raise RuntimeError(f"Cannot mount a map in phase {self._phase.value}")
        self._set_phase(MapPhase.WAITING_FOR_CONTAINER)
        self._task = asyncio.get_running_loop().create_task(self._initialize())
        return self._task

    def retry(self) -> asyncio.Task:
        """Start a new initialization cycle after a failure."""
        if self._phase is not MapPhase.ERRORED:
            raise RuntimeError(f"Cannot retry a map in phase {self._phase.value}")
        self._release()
        self.error = None
        self._phase = MapPhase.UNINITIALIZED
        return self.mount()

    def dispose(self) -> None:
        """Cancel pending waits and release every marker and the widget."""
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None
        self._release()
        self._set_phase(MapPhase.DISPOSED)

    def _release(self) -> None:
        self._remove_markers()
        if self._map is not None:
            self._map.remove()
            self._map = None
        self._built_fingerprint = None

    async def _initialize(self) -> None:
        try:
            container = await self._wait_for_container()
            library = await self._wait_for_library()
        except MapInitializationError as e:
            self._fail(str(e))
            return

        try:
            self._map = library.create_map(container, self._options.center, self._options.zoom)
            self._map.on("error", self._handle_widget_error)
        except Exception as e:
            logger.exception("Map construction failed")
            self._fail(f"Map construction failed: {e}")
            return

        # Tile and style loading inside the widget is not observable
        await asyncio.sleep(self._options.settle_delay)

        self._set_phase(MapPhase.READY)
        logger.info("Map ready with %s locations", len(self._locations))
        self._rebuild_markers()

    async def _wait_for_container(self) -> Any:
        for attempt in range(1, self._options.container_max_attempts + 1):
            container = self._container_lookup()
            if container is not None:
                return container
            if attempt < self._options.container_max_attempts:
                await asyncio.sleep(self._options.container_poll_interval)
        raise MapInitializationError(
            f"Map container not found after {self._options.container_max_attempts} attempts"
        )

    async def _wait_for_library(self) -> MapLibrary:
        self._set_phase(MapPhase.WAITING_FOR_LIBRARY)
        max_retries = self._options.library_max_retries
        for attempt in range(max_retries + 1):
            result = self._provider.try_acquire()
            if isinstance(result, LibraryUnavailable):
                raise MapInitializationError(f"Map library unavailable: {result.reason}")
            if result is not PENDING:
                return result
            if attempt < max_retries:
                delay = self._options.library_retry_delay * (attempt + 1)
                logger.debug("Map library not loaded yet (retry %s/%s)", attempt + 1, max_retries)
                await asyncio.sleep(delay)
        raise MapInitializationError(f"Map library failed to load after {max_retries} retries")

    def _fail(self, message: str) -> None:
        logger.error("Map initialization failed: %s", message)
        self.error = message
        self._set_phase(MapPhase.ERRORED)
        if self._on_error is not None:
            self._on_error(message)

    def _handle_widget_error(self, event: Any) -> None:
        message = str(getattr(event, "error", event))
        logger.warning("Map widget error: %s", message)
        self.error = message
        if self._on_error is not None:
            self._on_error(message)

    # -------------------------------------------------------------------------
    # Markers
    # -------------------------------------------------------------------------

    def set_locations(self, locations: Iterable[MapLocation]) -> bool:
        """
        Replace the locations shown on the map.

        Returns True when markers were recreated. A collection with the same
        fingerprint as the one already drawn leaves the markers untouched.
        Before READY the locations are only stored.
        """
        self._locations = list(locations)
        if self._phase is not MapPhase.READY:
            return False
        if locations_fingerprint(self._locations) == self._built_fingerprint:
            return False
        self._rebuild_markers()
        return True

    def select(self, location_id: Optional[str]) -> None:
        """Change the selected location and repaint markers in place."""
        self.selected_location_id = location_id
        if self._phase is not MapPhase.READY:
            return
        for handle in self._markers.values():
            self._paint(handle)

    def _rebuild_markers(self) -> None:
        self._remove_markers()
        self._generation += 1
        for location in self._locations:
            if location.id in self._markers:
                logger.warning("Duplicate location id %s; keeping the first marker", location.id)
                continue
            marker = self._map.add_marker(location.lng, location.lat)
            handle = _MarkerHandle(location.id, marker, self._generation)
            self._markers[location.id] = handle
            self._paint(handle)
        self._built_fingerprint = locations_fingerprint(self._locations)
        logger.debug("Built marker generation %s (%s markers)", self._generation, len(self._markers))

    def _remove_markers(self) -> None:
        for handle in self._markers.values():
            handle.marker.remove()
        self._markers = {}

    def _paint(self, handle: _MarkerHandle) -> None:
        element = handle.marker.get_element()
        if element is None:
            logger.warning("Marker element for location %s not found; skipping", handle.location_id)
            return
        element.paint(marker_appearance(handle.location_id, self.selected_location_id))
        if not handle.click_attached:
            element.add_click_listener(lambda: self._handle_marker_click(handle.location_id))
            handle.click_attached = True

    def _handle_marker_click(self, location_id: str) -> None:
        if self._phase is not MapPhase.READY:
            return
        logger.debug("Marker clicked: %s", location_id)
        if self._on_marker_click is not None:
            self._on_marker_click(location_id)
