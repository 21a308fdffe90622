"""
visitPhotos procedures: lookups by visit / user / location, CRUD, bulk insert,
statistics, and the paginated file list view.

Callers pass the session; nothing here commits.
"""

from __future__ import annotations

import logging
from dataclasses import asdict
from pathlib import PurePosixPath
from typing import List, Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.core.enums import SortOrder
from app.core.exceptions import NotFoundError
from app.models.visit import Visit
from app.models.visit_photo import VisitPhoto
from app.schemas.list_view import FileListData, PaginationData
from app.schemas.visit_photos import (
    CreatedCount,
    MultiplePhotosCreate,
    PhotoCreate,
    PhotoDetail,
    PhotoItem,
    PhotoStats,
    PhotoUpdate,
    VisitPhotoCount,
)
from app.services.list_view import ListFilters, RecordAccessor, derive_view
from app.services.references import require_user

logger = logging.getLogger(__name__)

PHOTO_LOADERS = (
    selectinload(VisitPhoto.visit).selectinload(Visit.location),
    selectinload(VisitPhoto.creator),
)

# File list search covers the visited location's name and the stored file name
PHOTO_RECORDS: RecordAccessor[PhotoDetail] = RecordAccessor(
    identifier=lambda p: p.id,
    search_text=lambda p: f"{p.location_name or ''} {PurePosixPath(p.file_path).name}",
    record_date=lambda p: p.visit_date,
)


def to_photo_detail(photo: VisitPhoto) -> PhotoDetail:
    """Build PhotoDetail from a VisitPhoto loaded with PHOTO_LOADERS."""
    item = PhotoItem.model_validate(photo)
    visit = photo.visit
    location = visit.location if visit else None
    return PhotoDetail(
        **item.model_dump(),
        visit_date=visit.visit_date if visit else None,
        location_id=location.id if location else None,
        location_name=location.name if location else None,
        location_address=location.address if location else None,
        creator_username=photo.creator.username if photo.creator else None,
    )


def _newest_first(stmt):
    return stmt.options(*PHOTO_LOADERS).order_by(VisitPhoto.created_at.desc(), VisitPhoto.id.desc())


async def _load_photo(session: AsyncSession, photo_id: int) -> Optional[VisitPhoto]:
    result = await session.execute(
        select(VisitPhoto)
        .where(VisitPhoto.id == photo_id)
        .options(*PHOTO_LOADERS)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def get_all_photos(session: AsyncSession) -> List[PhotoDetail]:
    """All photos with visit date and location, newest first."""
    result = await session.execute(_newest_first(select(VisitPhoto)))
    return [to_photo_detail(p) for p in result.scalars()]


async def get_photo(session: AsyncSession, photo_id: int) -> Optional[PhotoDetail]:
    photo = await _load_photo(session, photo_id)
    return to_photo_detail(photo) if photo else None


async def get_photos_by_visit(session: AsyncSession, visit_id: int) -> List[PhotoDetail]:
    result = await session.execute(_newest_first(select(VisitPhoto).where(VisitPhoto.visit_id == visit_id)))
    return [to_photo_detail(p) for p in result.scalars()]


async def get_photos_by_user(session: AsyncSession, user_id: int) -> List[PhotoDetail]:
    result = await session.execute(_newest_first(select(VisitPhoto).where(VisitPhoto.created_by == user_id)))
    return [to_photo_detail(p) for p in result.scalars()]


async def get_photos_by_location(session: AsyncSession, location_id: int) -> List[PhotoDetail]:
    """Photos of every visit to location_id."""
    stmt = (
        select(VisitPhoto)
        .join(Visit, VisitPhoto.visit_id == Visit.id)
        .where(Visit.location_id == location_id)
    )
    result = await session.execute(_newest_first(stmt))
    return [to_photo_detail(p) for p in result.scalars()]


def build_photo(visit_id: int, file_path: str, description: str, created_by: int) -> VisitPhoto:
    """New VisitPhoto row (updated_by = created_by)."""
    return VisitPhoto(
        visit_id=visit_id,
        file_path=file_path,
        description=description,
        created_by=created_by,
        updated_by=created_by,
    )


async def _require_visit(session: AsyncSession, visit_id: int) -> None:
    if await session.get(Visit, visit_id) is None:
        raise NotFoundError(f"Visit {visit_id} not found")


async def create_photo(session: AsyncSession, data: PhotoCreate) -> PhotoDetail:
    await _require_visit(session, data.visit_id)
    await require_user(session, data.created_by)
    photo = build_photo(data.visit_id, data.file_path, data.description, data.created_by)
    session.add(photo)
    await session.flush()
    loaded = await _load_photo(session, photo.id)
    return to_photo_detail(loaded)


async def create_multiple_photos(session: AsyncSession, data: MultiplePhotosCreate) -> CreatedCount:
    """Bulk insert photos for one visit. Returns how many rows were added."""
    await _require_visit(session, data.visit_id)
    await require_user(session, data.created_by)
    photos = [
        build_photo(data.visit_id, p.file_path, p.description, data.created_by)
        for p in data.photos
    ]
    session.add_all(photos)
    await session.flush()
    logger.info("Added %s photos to visit %s", len(photos), data.visit_id)
    return CreatedCount(count=len(photos))


async def update_photo(session: AsyncSession, data: PhotoUpdate) -> PhotoDetail:
    photo = await session.get(VisitPhoto, data.id)
    if photo is None:
        raise NotFoundError(f"Photo {data.id} not found")
    await require_user(session, data.updated_by)
    if data.file_path is not None:
        photo.file_path = data.file_path
    if data.description is not None:
        photo.description = data.description
    photo.updated_by = data.updated_by
    await session.flush()
    loaded = await _load_photo(session, photo.id)
    return to_photo_detail(loaded)


async def delete_photo(session: AsyncSession, photo_id: int) -> PhotoItem:
    photo = await session.get(VisitPhoto, photo_id)
    if photo is None:
        raise NotFoundError(f"Photo {photo_id} not found")
    deleted = PhotoItem.model_validate(photo)
    await session.delete(photo)
    await session.flush()
    return deleted


async def get_photo_stats(session: AsyncSession) -> PhotoStats:
    """Total photos, the 10 visits with most photos, and the 5 most recent photos."""
    total = await session.scalar(select(func.count(VisitPhoto.id)))
    photo_count = func.count(VisitPhoto.id).label("photo_count")
    by_visit = await session.execute(
        select(VisitPhoto.visit_id, photo_count)
        .group_by(VisitPhoto.visit_id)
        .order_by(photo_count.desc(), VisitPhoto.visit_id.asc())
        .limit(10)
    )
    recent = await session.execute(_newest_first(select(VisitPhoto)).limit(5))
    return PhotoStats(
        total_photos=total or 0,
        photos_by_visit=[VisitPhotoCount(visit_id=v, photo_count=c) for v, c in by_visit.all()],
        recent_photos=[to_photo_detail(p) for p in recent.scalars()],
    )


async def list_files(
    session: AsyncSession,
    filters: ListFilters,
    page: int = 1,
    items_per_page: int = 10,
    sort_order: SortOrder = SortOrder.DESC,
) -> FileListData:
    """
    File list view: fetch every photo once, then filter / sort / page in memory.

    **Input (request):**
        - filters: search_term matches location name or file name; date range applies to the visit date.
        - page, items_per_page, sort_order: Pager state; ordering is by photo id.

    **Output (response):**
        - FileListData with the page items and pagination metadata.
    """
    photos = await get_all_photos(session)
    view = derive_view(photos, filters, page, items_per_page, sort_order, PHOTO_RECORDS)
    return FileListData(
        items=view.page_items,
        pagination=PaginationData(**asdict(view.pagination)),
    )
