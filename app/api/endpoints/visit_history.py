"""Visit history: POST stores a visit with its photos atomically; GET is the paginated history view."""

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import get_settings
from app.core.constants import MAX_RATING, MIN_RATING
from app.core.database import get_async_session
from app.core.enums import SortOrder
from app.schemas.list_view import VisitListData
from app.schemas.response import ApiResponse, success_response
from app.schemas.uploads import VisitHistoryCreate, VisitHistoryCreated
from app.services.list_view import ListFilters
from app.services.visit_history import create_visit_with_photos, list_visit_history


router = APIRouter(prefix="/visit-history", tags=["visit-history"])


@router.post(
    "",
    response_model=ApiResponse[VisitHistoryCreated],
    status_code=201,
    summary="Record a visit with photos",
    description="Creates the visit and one photo per entry of files in a single transaction. Nothing is stored if any insert fails.",
)
async def create_visit_history(
    body: VisitHistoryCreate,
    session: AsyncSession = Depends(get_async_session),
) -> ApiResponse[VisitHistoryCreated]:
    """
    **Input (request):**
        - location_id, visit_date, notes, rating (0-5), created_by.
        - files: [{filePath, description}] from POST /api/files/upload.

    **Output (response):**
        - data.visit: stored visit with location name and photos.
        - data.photos_count: number of photos stored.
    """
    data = await create_visit_with_photos(session, body)
    return success_response(data=data)


@router.get(
    "",
    response_model=ApiResponse[VisitListData],
    summary="Visit history view",
    description="Visits filtered by location name, inclusive date range and minimum rating, ordered by id and paginated.",
)
async def get_visit_history(
    search_term: Optional[str] = Query(None, description="Case-insensitive match on location name."),
    date_from: Optional[date] = Query(None, description="YYYY-MM-DD, inclusive."),
    date_to: Optional[date] = Query(None, description="YYYY-MM-DD, inclusive (whole day)."),
    min_rating: Optional[int] = Query(None, ge=MIN_RATING, le=MAX_RATING, description="0 disables the filter."),
    page: int = Query(1, ge=1),
    items_per_page: Optional[int] = Query(None, ge=1, le=100),
    sort_order: SortOrder = Query(SortOrder.DESC),
    session: AsyncSession = Depends(get_async_session),
) -> ApiResponse[VisitListData]:
    filters = ListFilters.from_dates(search_term, date_from, date_to, min_rating)
    data = await list_visit_history(
        session,
        filters,
        page=page,
        items_per_page=items_per_page or get_settings().ITEMS_PER_PAGE,
        sort_order=sort_order,
    )
    return success_response(data=data)
