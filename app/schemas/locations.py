"""Pydantic schemas for locations procedures and the /api/locations mirror."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, field_validator

from app.schemas.validators import (
    LOCATION_NAME_REQUIRED,
    check_latitude,
    check_longitude,
    require_non_empty,
)
from app.schemas.visits import VisitWithPhotos


class LocationBase(BaseModel):
    """Fields shared by create and update. Coordinates must be on the globe."""

    name: str
    latitude: float
    longitude: float
    address: str = ""
    description: str = ""

    @field_validator("name")
    @classmethod
    def _name_required(cls, v: str) -> str:
        return require_non_empty(v, "location_name_required", LOCATION_NAME_REQUIRED)

    @field_validator("latitude")
    @classmethod
    def _latitude_range(cls, v: float) -> float:
        return check_latitude(v)

    @field_validator("longitude")
    @classmethod
    def _longitude_range(cls, v: float) -> float:
        return check_longitude(v)


class LocationCreate(LocationBase):
    """Input for locations.create."""

    created_by: int


class LocationUpdate(LocationBase):
    """Input for locations.update (full replacement of the editable fields)."""

    id: int
    updated_by: int


class LocationMirrorCreate(LocationBase):
    """Body for POST /api/locations. created_by falls back to user 1."""

    created_by: int = 1


class LocationItem(BaseModel):
    """Location columns."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    latitude: float
    longitude: float
    address: str = ""
    description: str = ""
    created_by: int
    updated_by: int
    created_at: datetime
    updated_at: Optional[datetime] = None


class LocationListItem(LocationItem):
    """Row of locations.getAll: creator name and visit count for the map list."""

    creator_username: Optional[str] = None
    visit_count: int = 0


class LocationDetail(LocationItem):
    """locations.getById: creator/updater names and full visit history (newest first)."""

    creator_username: Optional[str] = None
    updater_username: Optional[str] = None
    visits: List[VisitWithPhotos] = []


class LocationSummary(BaseModel):
    """Row of GET /api/locations (name order, no audit columns)."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    latitude: float
    longitude: float
    address: str = ""
    description: str = ""
