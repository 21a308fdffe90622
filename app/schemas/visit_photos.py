"""Pydantic schemas for visitPhotos procedures."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, field_validator

from app.schemas.validators import FILE_PATH_REQUIRED, require_non_empty


def _file_path_required(v: str) -> str:
    return require_non_empty(v, "file_path_required", FILE_PATH_REQUIRED)


class PhotoCreate(BaseModel):
    """Input for visitPhotos.create."""

    visit_id: int
    file_path: str
    description: str = ""
    created_by: int

    check_file_path = field_validator("file_path")(_file_path_required)


class PhotoUpdate(BaseModel):
    """Input for visitPhotos.update (partial)."""

    id: int
    file_path: Optional[str] = None
    description: Optional[str] = None
    updated_by: int

    @field_validator("file_path")
    @classmethod
    def _file_path(cls, v: Optional[str]) -> Optional[str]:
        return None if v is None else _file_path_required(v)


class PhotoInput(BaseModel):
    """One photo of visitPhotos.createMultiple."""

    file_path: str
    description: str = ""

    check_file_path = field_validator("file_path")(_file_path_required)


class MultiplePhotosCreate(BaseModel):
    """Input for visitPhotos.createMultiple (bulk insert for one visit)."""

    visit_id: int
    photos: List[PhotoInput]
    created_by: int


class PhotoItem(BaseModel):
    """Photo columns."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    visit_id: int
    file_path: str
    description: str = ""
    created_by: int
    updated_by: int
    created_at: datetime
    updated_at: Optional[datetime] = None


class PhotoDetail(PhotoItem):
    """Photo with its visit's date and location, as listed by the file list."""

    visit_date: Optional[datetime] = None
    location_id: Optional[int] = None
    location_name: Optional[str] = None
    location_address: Optional[str] = None
    creator_username: Optional[str] = None


class CreatedCount(BaseModel):
    """Result of a bulk insert."""

    count: int


class VisitPhotoCount(BaseModel):
    visit_id: int
    photo_count: int


class PhotoStats(BaseModel):
    """visitPhotos.getPhotoStats."""

    total_photos: int
    photos_by_visit: List[VisitPhotoCount]
    recent_photos: List[PhotoDetail]
