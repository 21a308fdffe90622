"""locations.markers: marker specs for every location under a given selection."""

from __future__ import annotations

from typing import List, Optional, Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from app.map.appearance import MapLocation, locations_fingerprint, marker_appearance
from app.schemas.locations import LocationListItem
from app.schemas.map import MarkerListData, MarkerSpec
from app.services.locations import get_all_locations


def to_map_locations(locations: Sequence[LocationListItem]) -> List[MapLocation]:
    return [
        MapLocation(id=str(loc.id), name=loc.name, lat=loc.latitude, lng=loc.longitude)
        for loc in locations
    ]


def build_marker_list(
    locations: Sequence[MapLocation],
    selected_location_id: Optional[str] = None,
) -> MarkerListData:
    markers = []
    for loc in locations:
        appearance = marker_appearance(loc.id, selected_location_id)
        markers.append(
            MarkerSpec(
                location_id=loc.id,
                name=loc.name,
                latitude=loc.lat,
                longitude=loc.lng,
                visual_state=appearance.state.value,
                scale=appearance.scale,
                colors=list(appearance.colors),
            )
        )
    return MarkerListData(
        fingerprint=locations_fingerprint(locations),
        selected_location_id=selected_location_id,
        markers=markers,
    )


async def get_location_markers(
    session: AsyncSession,
    selected_location_id: Optional[str] = None,
) -> MarkerListData:
    """
    One marker spec per location, in locations.getAll order.

    **Input (request):**
        - selected_location_id: Location id (as a string) drawn as selected, or None.

    **Output (response):**
        - MarkerListData with the collection fingerprint and a spec per location.
    """
    locations = to_map_locations(await get_all_locations(session))
    return build_marker_list(locations, selected_location_id)
