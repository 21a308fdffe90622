"""Pydantic schemas for the paginated visit history and file list views."""

from typing import List

from pydantic import BaseModel

from app.schemas.visit_photos import PhotoDetail
from app.schemas.visits import VisitWithPhotos


class PaginationData(BaseModel):
    """Pager metadata. total_pages is 0 when nothing matches."""

    current_page: int
    total_pages: int
    total_items: int
    items_per_page: int


class VisitListData(BaseModel):
    """Response data for GET /api/visit-history."""

    items: List[VisitWithPhotos]
    pagination: PaginationData


class FileListData(BaseModel):
    """Response data for GET /api/files."""

    items: List[PhotoDetail]
    pagination: PaginationData
