"""users procedures: /api/rpc/users.<procedure>."""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_async_session
from app.schemas.common import IdInput
from app.schemas.locations import LocationItem
from app.schemas.response import ApiResponse, success_response
from app.schemas.users import UserCreate, UserItem, UserUpdate
from app.schemas.visits import VisitWithPhotos
from app.services import users as user_service

router = APIRouter(prefix="/rpc", tags=["users"])


@router.get("/users.getAll", response_model=ApiResponse[List[UserItem]], summary="List users")
async def get_all(session: AsyncSession = Depends(get_async_session)) -> ApiResponse[List[UserItem]]:
    return success_response(data=await user_service.get_all_users(session))


@router.get(
    "/users.getById",
    response_model=ApiResponse[Optional[UserItem]],
    summary="User by id",
    description="data is null when the user does not exist.",
)
async def get_by_id(
    id: int = Query(..., description="User id."),
    session: AsyncSession = Depends(get_async_session),
) -> ApiResponse[Optional[UserItem]]:
    return success_response(data=await user_service.get_user(session, id))


@router.get(
    "/users.getLocations",
    response_model=ApiResponse[List[LocationItem]],
    summary="Locations created by a user",
)
async def get_locations(
    user_id: int = Query(..., alias="userId"),
    session: AsyncSession = Depends(get_async_session),
) -> ApiResponse[List[LocationItem]]:
    return success_response(data=await user_service.get_user_locations(session, user_id))


@router.get(
    "/users.getVisits",
    response_model=ApiResponse[List[VisitWithPhotos]],
    summary="Visits created by a user",
)
async def get_visits(
    user_id: int = Query(..., alias="userId"),
    session: AsyncSession = Depends(get_async_session),
) -> ApiResponse[List[VisitWithPhotos]]:
    return success_response(data=await user_service.get_user_visits(session, user_id))


@router.post("/users.create", response_model=ApiResponse[UserItem], summary="Create user")
async def create(
    body: UserCreate,
    session: AsyncSession = Depends(get_async_session),
) -> ApiResponse[UserItem]:
    return success_response(data=await user_service.create_user(session, body))


@router.post("/users.update", response_model=ApiResponse[UserItem], summary="Rename user")
async def update(
    body: UserUpdate,
    session: AsyncSession = Depends(get_async_session),
) -> ApiResponse[UserItem]:
    return success_response(data=await user_service.update_user(session, body))


@router.post(
    "/users.delete",
    response_model=ApiResponse[UserItem],
    summary="Delete user",
    description="Fails with 409 while locations, visits or photos reference the user.",
)
async def delete(
    body: IdInput,
    session: AsyncSession = Depends(get_async_session),
) -> ApiResponse[UserItem]:
    return success_response(data=await user_service.delete_user(session, body.id))
