"""
locations procedures: list (with creator name and visit count), detail with
visit history, CRUD, bounding-box nearby search and text search.

Callers pass the session; nothing here commits.
"""

from __future__ import annotations

import logging
import math
from typing import List, Optional

from sqlalchemy import func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.core.constants import DEFAULT_NEARBY_RADIUS_KM, KM_PER_DEGREE_LATITUDE
from app.core.exceptions import NotFoundError, ReferencedRecordError
from app.models.location import Location
from app.models.visit import Visit
from app.schemas.locations import (
    LocationCreate,
    LocationDetail,
    LocationItem,
    LocationListItem,
    LocationSummary,
    LocationUpdate,
)
from app.services.references import require_user
from app.services.visits import to_visit_with_photos

logger = logging.getLogger(__name__)


def _list_stmt():
    """Locations with creator loaded and their visit count, newest first."""
    visit_counts = (
        select(Visit.location_id, func.count(Visit.id).label("visit_count"))
        .group_by(Visit.location_id)
        .subquery()
    )
    return (
        select(Location, func.coalesce(visit_counts.c.visit_count, 0))
        .outerjoin(visit_counts, visit_counts.c.location_id == Location.id)
        .options(selectinload(Location.creator))
        .order_by(Location.created_at.desc(), Location.id.desc())
    )


def _to_list_item(location: Location, visit_count: int) -> LocationListItem:
    item = LocationItem.model_validate(location)
    return LocationListItem(
        **item.model_dump(),
        creator_username=location.creator.username if location.creator else None,
        visit_count=visit_count,
    )


async def get_all_locations(session: AsyncSession) -> List[LocationListItem]:
    """All locations with creator username and visit count, newest first."""
    result = await session.execute(_list_stmt())
    return [_to_list_item(loc, count) for loc, count in result.all()]


async def get_location(session: AsyncSession, location_id: int) -> Optional[LocationDetail]:
    """
    Location with creator/updater names and full visit history; None if absent.

    **Output (response):**
        - LocationDetail whose visits are ordered newest first, each with creator and photos.
    """
    result = await session.execute(
        select(Location)
        .where(Location.id == location_id)
        .options(
            selectinload(Location.creator),
            selectinload(Location.updater),
            selectinload(Location.visits).selectinload(Visit.location),
            selectinload(Location.visits).selectinload(Visit.creator),
            selectinload(Location.visits).selectinload(Visit.updater),
            selectinload(Location.visits).selectinload(Visit.photos),
        )
        .execution_options(populate_existing=True)
    )
    location = result.scalar_one_or_none()
    if location is None:
        return None
    item = LocationItem.model_validate(location)
    return LocationDetail(
        **item.model_dump(),
        creator_username=location.creator.username if location.creator else None,
        updater_username=location.updater.username if location.updater else None,
        visits=[to_visit_with_photos(v) for v in location.visits],
    )


async def list_location_summaries(session: AsyncSession) -> List[LocationSummary]:
    """Id, name, coordinates, address, description of every location, by name."""
    result = await session.execute(select(Location).order_by(Location.name.asc(), Location.id.asc()))
    return [LocationSummary.model_validate(loc) for loc in result.scalars()]


async def create_location(session: AsyncSession, data: LocationCreate) -> LocationItem:
    """Insert a location (updated_by = created_by). Input is already range-checked by the schema."""
    await require_user(session, data.created_by)
    location = Location(
        name=data.name,
        latitude=data.latitude,
        longitude=data.longitude,
        address=data.address,
        description=data.description,
        created_by=data.created_by,
        updated_by=data.created_by,
    )
    session.add(location)
    await session.flush()
    logger.info("Created location %s (%s)", location.id, location.name)
    return LocationItem.model_validate(location)


async def update_location(session: AsyncSession, data: LocationUpdate) -> LocationItem:
    location = await session.get(Location, data.id)
    if location is None:
        raise NotFoundError(f"Location {data.id} not found")
    await require_user(session, data.updated_by)
    location.name = data.name
    location.latitude = data.latitude
    location.longitude = data.longitude
    location.address = data.address
    location.description = data.description
    location.updated_by = data.updated_by
    await session.flush()
    return LocationItem.model_validate(location)


async def delete_location(session: AsyncSession, location_id: int) -> LocationItem:
    """Delete a location. Fails with ReferencedRecordError while visits reference it."""
    location = await session.get(Location, location_id)
    if location is None:
        raise NotFoundError(f"Location {location_id} not found")
    deleted = LocationItem.model_validate(location)
    await session.delete(location)
    try:
        await session.flush()
    except IntegrityError as e:
        logger.warning("Delete of location %s blocked by foreign key: %s", location_id, e.orig)
        await session.rollback()
        raise ReferencedRecordError("location", location_id) from e
    logger.info("Deleted location %s", location_id)
    return deleted


async def get_nearby_locations(
    session: AsyncSession,
    latitude: float,
    longitude: float,
    radius_km: float = DEFAULT_NEARBY_RADIUS_KM,
) -> List[LocationListItem]:
    """
    Locations inside a bounding box of radius_km around a point.

    1 km is taken as 1/111 degree of latitude and 1/(111 * cos(latitude)) degree of longitude.
    """
    lat_delta = radius_km / KM_PER_DEGREE_LATITUDE
    cos_lat = math.cos(math.radians(latitude))
    # At the poles every longitude is within range
    lng_delta = radius_km / (KM_PER_DEGREE_LATITUDE * cos_lat) if cos_lat > 1e-9 else 180.0
    stmt = _list_stmt().where(
        Location.latitude >= latitude - lat_delta,
        Location.latitude <= latitude + lat_delta,
        Location.longitude >= longitude - lng_delta,
        Location.longitude <= longitude + lng_delta,
    )
    result = await session.execute(stmt)
    return [_to_list_item(loc, count) for loc, count in result.all()]


async def search_locations(session: AsyncSession, query: str) -> List[LocationListItem]:
    """Case-insensitive substring match on name, address or description."""
    pattern = f"%{query.lower()}%"
    stmt = _list_stmt().where(
        or_(
            func.lower(Location.name).like(pattern),
            func.lower(Location.address).like(pattern),
            func.lower(Location.description).like(pattern),
        )
    )
    result = await session.execute(stmt)
    return [_to_list_item(loc, count) for loc, count in result.all()]
