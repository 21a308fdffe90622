"""
Visit history: create a visit together with its photos in one transaction,
and the paginated / filtered visit history view.
"""

from __future__ import annotations

import logging
from dataclasses import asdict

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.enums import SortOrder
from app.core.exceptions import VisitLogError
from app.models.visit import Visit
from app.schemas.list_view import PaginationData, VisitListData
from app.schemas.uploads import VisitHistoryCreate, VisitHistoryCreated
from app.services import visit_photos as photo_service
from app.services.list_view import ListFilters, derive_view
from app.services.visits import VISIT_RECORDS, get_all_visits, get_visit, insert_visit

logger = logging.getLogger(__name__)


async def create_visit_with_photos(
    session: AsyncSession,
    data: VisitHistoryCreate,
) -> VisitHistoryCreated:
    """
    Insert a visit and every accompanying photo as one unit of work.

    If any insert fails the session is rolled back, so neither the visit nor
    any photo persists. The caller commits on success.

    **Input (request):**
        - data: Visit fields plus files (file paths returned by the upload endpoint).

    **Output (response):**
        - VisitHistoryCreated with the stored visit (location name, photos) and photos_count.
    """
    try:
        visit: Visit = await insert_visit(session, data)
        for file_ref in data.files:
            session.add(
                photo_service.build_photo(
                    visit.id, file_ref.file_path, file_ref.description, data.created_by
                )
            )
            await session.flush()
    except VisitLogError:
        await session.rollback()
        raise
    except Exception:
        logger.exception("Visit history insert failed; rolling back visit and photos")
        await session.rollback()
        raise

    stored = await get_visit(session, visit.id)
    logger.info("Stored visit %s with %s photos", visit.id, len(data.files))
    return VisitHistoryCreated(visit=stored, photos_count=len(data.files))


async def list_visit_history(
    session: AsyncSession,
    filters: ListFilters,
    page: int = 1,
    items_per_page: int = 10,
    sort_order: SortOrder = SortOrder.DESC,
) -> VisitListData:
    """
    Visit history view: fetch every visit once, then filter / sort / page in memory.

    search_term matches the location name; min_rating applies the 0-5 rating
    (legacy 10-point ratings are halved, rounding up).
    """
    visits = await get_all_visits(session)
    view = derive_view(visits, filters, page, items_per_page, sort_order, VISIT_RECORDS)
    return VisitListData(
        items=view.page_items,
        pagination=PaginationData(**asdict(view.pagination)),
    )
