"""locations procedures: /api/rpc/locations.<procedure>."""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.constants import DEFAULT_NEARBY_RADIUS_KM
from app.core.database import get_async_session
from app.schemas.common import IdInput
from app.schemas.locations import (
    LocationCreate,
    LocationDetail,
    LocationItem,
    LocationListItem,
    LocationUpdate,
)
from app.schemas.map import MarkerListData, ReverseGeocodeData
from app.schemas.response import ApiResponse, success_response
from app.services import locations as location_service
from app.services.geocoding_client import reverse_geocode
from app.services.map_markers import get_location_markers

router = APIRouter(prefix="/rpc", tags=["locations"])


@router.get(
    "/locations.getAll",
    response_model=ApiResponse[List[LocationListItem]],
    summary="List locations",
    description="Every location with creator username and visit count, newest first.",
)
async def get_all(
    session: AsyncSession = Depends(get_async_session),
) -> ApiResponse[List[LocationListItem]]:
    return success_response(data=await location_service.get_all_locations(session))


@router.get(
    "/locations.getById",
    response_model=ApiResponse[Optional[LocationDetail]],
    summary="Location with visit history",
    description="data is null when the location does not exist.",
)
async def get_by_id(
    id: int = Query(..., description="Location id."),
    session: AsyncSession = Depends(get_async_session),
) -> ApiResponse[Optional[LocationDetail]]:
    return success_response(data=await location_service.get_location(session, id))


@router.get(
    "/locations.getNearby",
    response_model=ApiResponse[List[LocationListItem]],
    summary="Locations near a point",
)
async def get_nearby(
    latitude: float = Query(..., ge=-90, le=90),
    longitude: float = Query(..., ge=-180, le=180),
    radius_km: float = Query(DEFAULT_NEARBY_RADIUS_KM, alias="radiusKm", gt=0),
    session: AsyncSession = Depends(get_async_session),
) -> ApiResponse[List[LocationListItem]]:
    """Bounding-box search of radius_km around (latitude, longitude)."""
    data = await location_service.get_nearby_locations(session, latitude, longitude, radius_km)
    return success_response(data=data)


@router.get(
    "/locations.search",
    response_model=ApiResponse[List[LocationListItem]],
    summary="Search locations",
)
async def search(
    query: str = Query(..., min_length=1, description="Matched against name, address and description."),
    session: AsyncSession = Depends(get_async_session),
) -> ApiResponse[List[LocationListItem]]:
    return success_response(data=await location_service.search_locations(session, query))


@router.get(
    "/locations.markers",
    response_model=ApiResponse[MarkerListData],
    summary="Map markers",
    description="One marker spec per location (selected: enlarged red, otherwise blue) plus the locations fingerprint.",
)
async def markers(
    selected_location_id: Optional[str] = Query(None, alias="selectedLocationId"),
    session: AsyncSession = Depends(get_async_session),
) -> ApiResponse[MarkerListData]:
    return success_response(data=await get_location_markers(session, selected_location_id))


@router.get(
    "/locations.reverseGeocode",
    response_model=ApiResponse[Optional[ReverseGeocodeData]],
    summary="Address of a map point",
    description="data is null when the geocoder has no address for the point. Upstream failures return 502.",
)
async def reverse_geocode_point(
    latitude: float = Query(..., ge=-90, le=90),
    longitude: float = Query(..., ge=-180, le=180),
) -> ApiResponse[Optional[ReverseGeocodeData]]:
    return success_response(data=await reverse_geocode(latitude, longitude))


@router.post("/locations.create", response_model=ApiResponse[LocationItem], summary="Create location")
async def create(
    body: LocationCreate,
    session: AsyncSession = Depends(get_async_session),
) -> ApiResponse[LocationItem]:
    return success_response(data=await location_service.create_location(session, body))


@router.post("/locations.update", response_model=ApiResponse[LocationItem], summary="Update location")
async def update(
    body: LocationUpdate,
    session: AsyncSession = Depends(get_async_session),
) -> ApiResponse[LocationItem]:
    return success_response(data=await location_service.update_location(session, body))


@router.post(
    "/locations.delete",
    response_model=ApiResponse[LocationItem],
    summary="Delete location",
    description="Fails with 409 while visits reference the location.",
)
async def delete(
    body: IdInput,
    session: AsyncSession = Depends(get_async_session),
) -> ApiResponse[LocationItem]:
    return success_response(data=await location_service.delete_location(session, body.id))
