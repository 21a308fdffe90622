"""
visits procedures: lookups by id / location / user / date range / rating,
CRUD, per-user statistics and related visits for a detail view.

Callers pass the session; nothing here commits.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import List, Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.core.exceptions import NotFoundError
from app.models.location import Location
from app.models.visit import Visit
from app.schemas.visit_photos import PhotoItem
from app.schemas.visits import (
    RatingCount,
    UserStats,
    VisitCreate,
    VisitItem,
    VisitUpdate,
    VisitWithPhotos,
)
from app.services.list_view import RecordAccessor
from app.services.references import require_user

logger = logging.getLogger(__name__)

# Relations serialized by VisitWithPhotos (async sessions cannot lazy-load)
VISIT_LOADERS = (
    selectinload(Visit.location),
    selectinload(Visit.creator),
    selectinload(Visit.updater),
    selectinload(Visit.photos),
)

# How the list engine reads a visit: location name is searched, visit_date is filtered
VISIT_RECORDS: RecordAccessor[VisitWithPhotos] = RecordAccessor(
    identifier=lambda v: v.id,
    search_text=lambda v: v.location_name or "",
    record_date=lambda v: v.visit_date,
    rating=lambda v: v.rating,
)


def to_visit_with_photos(visit: Visit) -> VisitWithPhotos:
    """Build VisitWithPhotos from a Visit loaded with VISIT_LOADERS."""
    item = VisitItem.model_validate(visit)
    return VisitWithPhotos(
        **item.model_dump(),
        location_name=visit.location.name if visit.location else None,
        location_address=visit.location.address if visit.location else None,
        creator_username=visit.creator.username if visit.creator else None,
        updater_username=visit.updater.username if visit.updater else None,
        photos=[PhotoItem.model_validate(p) for p in visit.photos],
    )


def _newest_first(stmt):
    return stmt.options(*VISIT_LOADERS).order_by(Visit.visit_date.desc(), Visit.id.desc())


async def _load_visit(session: AsyncSession, visit_id: int) -> Optional[Visit]:
    result = await session.execute(
        select(Visit)
        .where(Visit.id == visit_id)
        .options(*VISIT_LOADERS)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def get_all_visits(session: AsyncSession) -> List[VisitWithPhotos]:
    """All visits, newest visit_date first."""
    result = await session.execute(_newest_first(select(Visit)))
    return [to_visit_with_photos(v) for v in result.scalars()]


async def get_visit(session: AsyncSession, visit_id: int) -> Optional[VisitWithPhotos]:
    """Visit with location, creator, updater and photos; None if absent."""
    visit = await _load_visit(session, visit_id)
    return to_visit_with_photos(visit) if visit else None


async def get_visits_by_location(session: AsyncSession, location_id: int) -> List[VisitWithPhotos]:
    result = await session.execute(_newest_first(select(Visit).where(Visit.location_id == location_id)))
    return [to_visit_with_photos(v) for v in result.scalars()]


async def get_visits_by_user(session: AsyncSession, user_id: int) -> List[VisitWithPhotos]:
    result = await session.execute(_newest_first(select(Visit).where(Visit.created_by == user_id)))
    return [to_visit_with_photos(v) for v in result.scalars()]


async def get_visits_by_date_range(
    session: AsyncSession,
    start_date: datetime,
    end_date: datetime,
    user_id: Optional[int] = None,
) -> List[VisitWithPhotos]:
    """
    Visits with start_date <= visit_date <= end_date (both ends inclusive).

    **Input (request):**
        - start_date / end_date: Range bounds.
        - user_id: Optional; only visits created by this user.

    **Output (response):**
        - VisitWithPhotos list, newest first.
    """
    stmt = select(Visit).where(Visit.visit_date >= start_date, Visit.visit_date <= end_date)
    if user_id is not None:
        stmt = stmt.where(Visit.created_by == user_id)
    result = await session.execute(_newest_first(stmt))
    return [to_visit_with_photos(v) for v in result.scalars()]


async def get_visits_by_rating(session: AsyncSession, rating: int) -> List[VisitWithPhotos]:
    result = await session.execute(_newest_first(select(Visit).where(Visit.rating == rating)))
    return [to_visit_with_photos(v) for v in result.scalars()]


async def get_related_visits(session: AsyncSession, visit_id: int) -> List[VisitWithPhotos]:
    """Other visits to the same location as visit_id, newest first. Empty if the visit does not exist."""
    visit = await session.get(Visit, visit_id)
    if visit is None:
        return []
    result = await session.execute(
        _newest_first(
            select(Visit).where(Visit.location_id == visit.location_id, Visit.id != visit_id)
        )
    )
    return [to_visit_with_photos(v) for v in result.scalars()]


async def create_visit(session: AsyncSession, data: VisitCreate) -> VisitWithPhotos:
    """Insert a visit (updated_by = created_by). Raises NotFoundError for an unknown location."""
    visit = await insert_visit(session, data)
    loaded = await _load_visit(session, visit.id)
    return to_visit_with_photos(loaded)


async def insert_visit(session: AsyncSession, data: VisitCreate) -> Visit:
    """Add and flush a Visit row; shared by visits.create and the visit + photos endpoint."""
    if await session.get(Location, data.location_id) is None:
        raise NotFoundError(f"Location {data.location_id} not found")
    await require_user(session, data.created_by)
    visit = Visit(
        location_id=data.location_id,
        visit_date=data.visit_date,
        notes=data.notes,
        rating=data.rating,
        created_by=data.created_by,
        updated_by=data.created_by,
    )
    session.add(visit)
    await session.flush()
    logger.info("Created visit %s at location %s", visit.id, visit.location_id)
    return visit


async def update_visit(session: AsyncSession, data: VisitUpdate) -> VisitWithPhotos:
    """Partial update: only fields present (not None) in data change."""
    visit = await session.get(Visit, data.id)
    if visit is None:
        raise NotFoundError(f"Visit {data.id} not found")
    await require_user(session, data.updated_by)
    changes = data.model_dump(exclude={"id", "updated_by"}, exclude_none=True)
    for key, value in changes.items():
        setattr(visit, key, value)
    visit.updated_by = data.updated_by
    await session.flush()
    loaded = await _load_visit(session, visit.id)
    return to_visit_with_photos(loaded)


async def delete_visit(session: AsyncSession, visit_id: int) -> VisitItem:
    """Delete a visit; its photos are removed by the ON DELETE CASCADE."""
    visit = await session.get(Visit, visit_id)
    if visit is None:
        raise NotFoundError(f"Visit {visit_id} not found")
    deleted = VisitItem.model_validate(visit)
    await session.delete(visit)
    await session.flush()
    logger.info("Deleted visit %s", visit_id)
    return deleted


async def get_user_stats(session: AsyncSession, user_id: int) -> UserStats:
    """Total visits, average rating (0 when none) and per-rating counts for visits created by user_id."""
    totals = await session.execute(
        select(func.count(Visit.id), func.avg(Visit.rating)).where(Visit.created_by == user_id)
    )
    total_visits, average = totals.one()
    by_rating = await session.execute(
        select(Visit.rating, func.count(Visit.id))
        .where(Visit.created_by == user_id)
        .group_by(Visit.rating)
        .order_by(Visit.rating.asc())
    )
    return UserStats(
        total_visits=total_visits or 0,
        average_rating=float(average) if average is not None else 0.0,
        visits_by_rating=[RatingCount(rating=r, count=c) for r, c in by_rating.all()],
    )
