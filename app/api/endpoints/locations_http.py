"""REST mirror of the locations procedures: GET/POST /api/locations."""

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_async_session
from app.schemas.locations import LocationCreate, LocationItem, LocationMirrorCreate, LocationSummary
from app.schemas.response import ApiResponse, success_response
from app.services import locations as location_service

router = APIRouter(prefix="/locations", tags=["locations"])


@router.get(
    "",
    response_model=ApiResponse[List[LocationSummary]],
    summary="List locations",
    description="Id, name, coordinates, address and description of every location, ordered by name.",
)
async def list_locations(
    session: AsyncSession = Depends(get_async_session),
) -> ApiResponse[List[LocationSummary]]:
    return success_response(data=await location_service.list_location_summaries(session))


@router.post(
    "",
    response_model=ApiResponse[LocationItem],
    status_code=201,
    summary="Create location",
    description="Same validation as locations.create. created_by defaults to user 1.",
)
async def create_location(
    body: LocationMirrorCreate,
    session: AsyncSession = Depends(get_async_session),
) -> ApiResponse[LocationItem]:
    data = await location_service.create_location(session, LocationCreate(**body.model_dump()))
    return success_response(data=data)
