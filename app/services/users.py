"""
users procedures: CRUD plus the locations and visits a user created.

Callers pass the session; nothing here commits.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import NotFoundError, ReferencedRecordError
from app.models.location import Location
from app.models.user import User
from app.models.visit import Visit
from app.schemas.locations import LocationItem
from app.schemas.users import UserCreate, UserItem, UserUpdate
from app.schemas.visits import VisitWithPhotos
from app.services.visits import VISIT_LOADERS, to_visit_with_photos

logger = logging.getLogger(__name__)


async def get_all_users(session: AsyncSession) -> List[UserItem]:
    """All users, newest id first."""
    result = await session.execute(select(User).order_by(User.id.desc()))
    return [UserItem.model_validate(u) for u in result.scalars()]


async def get_user(session: AsyncSession, user_id: int) -> Optional[UserItem]:
    user = await session.get(User, user_id)
    return UserItem.model_validate(user) if user else None


async def create_user(session: AsyncSession, data: UserCreate) -> UserItem:
    user = User(username=data.username)
    session.add(user)
    await session.flush()
    logger.info("Created user %s (%s)", user.id, user.username)
    return UserItem.model_validate(user)


async def update_user(session: AsyncSession, data: UserUpdate) -> UserItem:
    user = await session.get(User, data.id)
    if user is None:
        raise NotFoundError(f"User {data.id} not found")
    user.username = data.username
    await session.flush()
    return UserItem.model_validate(user)


async def delete_user(session: AsyncSession, user_id: int) -> UserItem:
    """Delete a user. Fails with ReferencedRecordError while any record names them as creator/updater."""
    user = await session.get(User, user_id)
    if user is None:
        raise NotFoundError(f"User {user_id} not found")
    deleted = UserItem.model_validate(user)
    await session.delete(user)
    try:
        await session.flush()
    except IntegrityError as e:
        logger.warning("Delete of user %s blocked by foreign key: %s", user_id, e.orig)
        await session.rollback()
        raise ReferencedRecordError("user", user_id) from e
    return deleted


async def get_user_locations(session: AsyncSession, user_id: int) -> List[LocationItem]:
    """Locations created by the user, newest first."""
    result = await session.execute(
        select(Location)
        .where(Location.created_by == user_id)
        .order_by(Location.created_at.desc(), Location.id.desc())
    )
    return [LocationItem.model_validate(loc) for loc in result.scalars()]


async def get_user_visits(session: AsyncSession, user_id: int) -> List[VisitWithPhotos]:
    """Visits created by the user with location and photos, newest visit first."""
    result = await session.execute(
        select(Visit)
        .where(Visit.created_by == user_id)
        .options(*VISIT_LOADERS)
        .order_by(Visit.visit_date.desc(), Visit.id.desc())
    )
    return [to_visit_with_photos(v) for v in result.scalars()]
