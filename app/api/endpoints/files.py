"""Photo files: base64 upload and the paginated file list."""

import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import get_settings
from app.core.database import get_async_session
from app.core.enums import SortOrder
from app.schemas.list_view import FileListData
from app.schemas.response import ApiResponse, success_response
from app.schemas.uploads import UploadRequest, UploadResultData
from app.services.list_view import ListFilters
from app.services.uploads import save_uploaded_files
from app.services.visit_photos import list_files

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/files", tags=["files"])


@router.post(
    "/upload",
    response_model=ApiResponse[UploadResultData],
    summary="Upload photo files",
    description="Decodes each base64 file and stores it as {unix_ms}_{random_base36}_{name} under the upload directory.",
)
async def upload_files(body: UploadRequest) -> ApiResponse[UploadResultData]:
    """
    **Input (request):**
        - files: [{name, base64Data, size, type, description?}]

    **Output (response):**
        - data.files: [{fileName, filePath, originalName, size, mimeType, description}]
          filePath is what POST /api/visit-history expects.
    """
    stored = await save_uploaded_files(body.files)
    logger.info("Uploaded %s files", len(stored))
    return success_response(data=UploadResultData(files=stored))


@router.get(
    "",
    response_model=ApiResponse[FileListData],
    summary="File list view",
    description="Photos filtered by location or file name and visit date range, ordered by id and paginated.",
)
async def get_files(
    search_term: Optional[str] = Query(None, description="Case-insensitive match on location name or file name."),
    date_from: Optional[date] = Query(None, description="YYYY-MM-DD, inclusive (visit date)."),
    date_to: Optional[date] = Query(None, description="YYYY-MM-DD, inclusive (visit date)."),
    page: int = Query(1, ge=1),
    items_per_page: Optional[int] = Query(None, ge=1, le=100),
    sort_order: SortOrder = Query(SortOrder.DESC),
    session: AsyncSession = Depends(get_async_session),
) -> ApiResponse[FileListData]:
    filters = ListFilters.from_dates(search_term, date_from, date_to)
    data = await list_files(
        session,
        filters,
        page=page,
        items_per_page=items_per_page or get_settings().ITEMS_PER_PAGE,
        sort_order=sort_order,
    )
    return success_response(data=data)
