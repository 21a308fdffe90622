"""Marker appearance and location fingerprints for the map widget."""

from __future__ import annotations

import hashlib
from dataclasses import dataclass
from typing import Iterable, Optional, Tuple

from app.core.constants import (
    SELECTED_MARKER_COLORS,
    SELECTED_MARKER_SCALE,
    UNSELECTED_MARKER_COLORS,
    UNSELECTED_MARKER_SCALE,
)
from app.core.enums import MarkerVisualState


@dataclass(frozen=True)
class MapLocation:
    """A location as the map sees it. id is a string so it can be used as a DOM/marker key."""

    id: str
    name: str
    lat: float
    lng: float


@dataclass(frozen=True)
class MarkerAppearance:
    state: MarkerVisualState
    scale: float
    colors: Tuple[str, str, str]


SELECTED_APPEARANCE = MarkerAppearance(
    MarkerVisualState.SELECTED, SELECTED_MARKER_SCALE, SELECTED_MARKER_COLORS
)
UNSELECTED_APPEARANCE = MarkerAppearance(
    MarkerVisualState.UNSELECTED, UNSELECTED_MARKER_SCALE, UNSELECTED_MARKER_COLORS
)


def marker_appearance(location_id: str, selected_location_id: Optional[str]) -> MarkerAppearance:
    """Selected markers are enlarged and red; every other marker is default size and blue."""
    if selected_location_id is not None and location_id == selected_location_id:
        return SELECTED_APPEARANCE
    return UNSELECTED_APPEARANCE


def locations_fingerprint(locations: Iterable[MapLocation]) -> str:
    """
    Hash over id, lat, lng and name of every location, in order.

    Two collections with equal fingerprints produce identical markers, so a
    new list object with the same content does not require recreating them.
    """
    digest = hashlib.sha1()
    for loc in locations:
        digest.update(f"{loc.id}\x1f{loc.lat!r}\x1f{loc.lng!r}\x1f{loc.name}\x1e".encode("utf-8"))
    return digest.hexdigest()
