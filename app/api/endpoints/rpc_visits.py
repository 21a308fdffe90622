"""visits procedures: /api/rpc/visits.<procedure>."""

from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.constants import MAX_RATING, MIN_RATING
from app.core.database import get_async_session
from app.schemas.common import IdInput
from app.schemas.response import ApiResponse, success_response
from app.schemas.visits import UserStats, VisitCreate, VisitItem, VisitUpdate, VisitWithPhotos
from app.services import visits as visit_service

router = APIRouter(prefix="/rpc", tags=["visits"])


@router.get(
    "/visits.getAll",
    response_model=ApiResponse[List[VisitWithPhotos]],
    summary="List visits",
    description="Every visit with location name, creator and photos, newest visit first.",
)
async def get_all(
    session: AsyncSession = Depends(get_async_session),
) -> ApiResponse[List[VisitWithPhotos]]:
    return success_response(data=await visit_service.get_all_visits(session))


@router.get(
    "/visits.getById",
    response_model=ApiResponse[Optional[VisitWithPhotos]],
    summary="Visit by id",
    description="data is null when the visit does not exist.",
)
async def get_by_id(
    id: int = Query(..., description="Visit id."),
    session: AsyncSession = Depends(get_async_session),
) -> ApiResponse[Optional[VisitWithPhotos]]:
    return success_response(data=await visit_service.get_visit(session, id))


@router.get("/visits.getByLocationId", response_model=ApiResponse[List[VisitWithPhotos]])
async def get_by_location_id(
    location_id: int = Query(..., alias="locationId"),
    session: AsyncSession = Depends(get_async_session),
) -> ApiResponse[List[VisitWithPhotos]]:
    return success_response(data=await visit_service.get_visits_by_location(session, location_id))


@router.get("/visits.getByUserId", response_model=ApiResponse[List[VisitWithPhotos]])
async def get_by_user_id(
    user_id: int = Query(..., alias="userId"),
    session: AsyncSession = Depends(get_async_session),
) -> ApiResponse[List[VisitWithPhotos]]:
    return success_response(data=await visit_service.get_visits_by_user(session, user_id))


@router.get(
    "/visits.getByDateRange",
    response_model=ApiResponse[List[VisitWithPhotos]],
    summary="Visits in a date range",
    description="Both ends are inclusive. Optional userId narrows to one user's visits.",
)
async def get_by_date_range(
    start_date: datetime = Query(..., alias="startDate"),
    end_date: datetime = Query(..., alias="endDate"),
    user_id: Optional[int] = Query(None, alias="userId"),
    session: AsyncSession = Depends(get_async_session),
) -> ApiResponse[List[VisitWithPhotos]]:
    data = await visit_service.get_visits_by_date_range(session, start_date, end_date, user_id=user_id)
    return success_response(data=data)


@router.get("/visits.getByRating", response_model=ApiResponse[List[VisitWithPhotos]])
async def get_by_rating(
    rating: int = Query(..., ge=MIN_RATING, le=MAX_RATING),
    session: AsyncSession = Depends(get_async_session),
) -> ApiResponse[List[VisitWithPhotos]]:
    return success_response(data=await visit_service.get_visits_by_rating(session, rating))


@router.get(
    "/visits.getRelated",
    response_model=ApiResponse[List[VisitWithPhotos]],
    summary="Other visits to the same location",
)
async def get_related(
    visit_id: int = Query(..., alias="visitId"),
    session: AsyncSession = Depends(get_async_session),
) -> ApiResponse[List[VisitWithPhotos]]:
    return success_response(data=await visit_service.get_related_visits(session, visit_id))


@router.get("/visits.getUserStats", response_model=ApiResponse[UserStats], summary="Visit statistics of a user")
async def get_user_stats(
    user_id: int = Query(..., alias="userId"),
    session: AsyncSession = Depends(get_async_session),
) -> ApiResponse[UserStats]:
    return success_response(data=await visit_service.get_user_stats(session, user_id))


@router.post("/visits.create", response_model=ApiResponse[VisitWithPhotos], summary="Create visit")
async def create(
    body: VisitCreate,
    session: AsyncSession = Depends(get_async_session),
) -> ApiResponse[VisitWithPhotos]:
    return success_response(data=await visit_service.create_visit(session, body))


@router.post(
    "/visits.update",
    response_model=ApiResponse[VisitWithPhotos],
    summary="Update visit",
    description="Partial update: omitted fields keep their value.",
)
async def update(
    body: VisitUpdate,
    session: AsyncSession = Depends(get_async_session),
) -> ApiResponse[VisitWithPhotos]:
    return success_response(data=await visit_service.update_visit(session, body))


@router.post(
    "/visits.delete",
    response_model=ApiResponse[VisitItem],
    summary="Delete visit",
    description="The visit's photos are deleted with it.",
)
async def delete(
    body: IdInput,
    session: AsyncSession = Depends(get_async_session),
) -> ApiResponse[VisitItem]:
    return success_response(data=await visit_service.delete_visit(session, body.id))
