"""Pydantic schemas for map marker specs and reverse geocoding."""

from typing import List, Optional

from pydantic import BaseModel


class MarkerSpec(BaseModel):
    """How one location's marker is drawn for a given selection."""

    location_id: str
    name: str
    latitude: float
    longitude: float
    visual_state: str
    scale: float
    colors: List[str]


class MarkerListData(BaseModel):
    """
    Response data for locations.markers.

    fingerprint changes only when a location's id, coordinates or name change,
    so clients can skip recreating markers when it is unchanged.
    """

    fingerprint: str
    selected_location_id: Optional[str] = None
    markers: List[MarkerSpec]


class ReverseGeocodeData(BaseModel):
    """Address of a clicked map point (empty strings when the geocoder has no match)."""

    prefecture: str = ""
    city: str = ""
    town: str = ""
    postal: str = ""
    address: str = ""
