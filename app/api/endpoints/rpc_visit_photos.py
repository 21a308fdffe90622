"""visitPhotos procedures: /api/rpc/visitPhotos.<procedure>."""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_async_session
from app.schemas.common import IdInput
from app.schemas.response import ApiResponse, success_response
from app.schemas.visit_photos import (
    CreatedCount,
    MultiplePhotosCreate,
    PhotoCreate,
    PhotoDetail,
    PhotoItem,
    PhotoStats,
    PhotoUpdate,
)
from app.services import visit_photos as photo_service

router = APIRouter(prefix="/rpc", tags=["visitPhotos"])


@router.get(
    "/visitPhotos.getAll",
    response_model=ApiResponse[List[PhotoDetail]],
    summary="List photos",
    description="Every photo with its visit date and location, newest first.",
)
async def get_all(session: AsyncSession = Depends(get_async_session)) -> ApiResponse[List[PhotoDetail]]:
    return success_response(data=await photo_service.get_all_photos(session))


@router.get(
    "/visitPhotos.getById",
    response_model=ApiResponse[Optional[PhotoDetail]],
    description="data is null when the photo does not exist.",
)
async def get_by_id(
    id: int = Query(...),
    session: AsyncSession = Depends(get_async_session),
) -> ApiResponse[Optional[PhotoDetail]]:
    return success_response(data=await photo_service.get_photo(session, id))


@router.get("/visitPhotos.getByVisitId", response_model=ApiResponse[List[PhotoDetail]])
async def get_by_visit_id(
    visit_id: int = Query(..., alias="visitId"),
    session: AsyncSession = Depends(get_async_session),
) -> ApiResponse[List[PhotoDetail]]:
    return success_response(data=await photo_service.get_photos_by_visit(session, visit_id))


@router.get("/visitPhotos.getByUserId", response_model=ApiResponse[List[PhotoDetail]])
async def get_by_user_id(
    user_id: int = Query(..., alias="userId"),
    session: AsyncSession = Depends(get_async_session),
) -> ApiResponse[List[PhotoDetail]]:
    return success_response(data=await photo_service.get_photos_by_user(session, user_id))


@router.get("/visitPhotos.getByLocationId", response_model=ApiResponse[List[PhotoDetail]])
async def get_by_location_id(
    location_id: int = Query(..., alias="locationId"),
    session: AsyncSession = Depends(get_async_session),
) -> ApiResponse[List[PhotoDetail]]:
    return success_response(data=await photo_service.get_photos_by_location(session, location_id))


@router.get(
    "/visitPhotos.getPhotoStats",
    response_model=ApiResponse[PhotoStats],
    summary="Photo statistics",
    description="Total photos, the 10 visits with the most photos and the 5 most recent photos.",
)
async def get_photo_stats(session: AsyncSession = Depends(get_async_session)) -> ApiResponse[PhotoStats]:
    return success_response(data=await photo_service.get_photo_stats(session))


@router.post("/visitPhotos.create", response_model=ApiResponse[PhotoDetail], summary="Attach a photo to a visit")
async def create(
    body: PhotoCreate,
    session: AsyncSession = Depends(get_async_session),
) -> ApiResponse[PhotoDetail]:
    return success_response(data=await photo_service.create_photo(session, body))


@router.post(
    "/visitPhotos.createMultiple",
    response_model=ApiResponse[CreatedCount],
    summary="Attach several photos to a visit",
)
async def create_multiple(
    body: MultiplePhotosCreate,
    session: AsyncSession = Depends(get_async_session),
) -> ApiResponse[CreatedCount]:
    return success_response(data=await photo_service.create_multiple_photos(session, body))


@router.post("/visitPhotos.update", response_model=ApiResponse[PhotoDetail], summary="Update photo")
async def update(
    body: PhotoUpdate,
    session: AsyncSession = Depends(get_async_session),
) -> ApiResponse[PhotoDetail]:
    return success_response(data=await photo_service.update_photo(session, body))


@router.post("/visitPhotos.delete", response_model=ApiResponse[PhotoItem], summary="Delete photo")
async def delete(
    body: IdInput,
    session: AsyncSession = Depends(get_async_session),
) -> ApiResponse[PhotoItem]:
    return success_response(data=await photo_service.delete_photo(session, body.id))
