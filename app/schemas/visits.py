"""Pydantic schemas for visits procedures."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from app.core.constants import MAX_RATING, MIN_RATING
from app.schemas.visit_photos import PhotoItem


class VisitCreate(BaseModel):
    """Input for visits.create."""

    location_id: int
    visit_date: datetime
    notes: str = ""
    rating: int = Field(0, ge=MIN_RATING, le=MAX_RATING)
    created_by: int


class VisitUpdate(BaseModel):
    """Input for visits.update. Omitted fields are left unchanged."""

    id: int
    visit_date: Optional[datetime] = None
    notes: Optional[str] = None
    rating: Optional[int] = Field(None, ge=MIN_RATING, le=MAX_RATING)
    updated_by: int


class VisitItem(BaseModel):
    """Visit columns."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    location_id: int
    visit_date: datetime
    notes: str = ""
    rating: int = 0
    created_by: int
    updated_by: int
    created_at: datetime
    updated_at: Optional[datetime] = None


class VisitWithPhotos(VisitItem):
    """Visit with its location name, creator name and photos."""

    location_name: Optional[str] = None
    location_address: Optional[str] = None
    creator_username: Optional[str] = None
    updater_username: Optional[str] = None
    photos: List[PhotoItem] = []


class RatingCount(BaseModel):
    rating: int
    count: int


class UserStats(BaseModel):
    """visits.getUserStats."""

    total_visits: int
    average_rating: float
    visits_by_rating: List[RatingCount]
