"""Pydantic schemas for users procedures."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator

from app.schemas.validators import USERNAME_REQUIRED, require_non_empty


class UserCreate(BaseModel):
    """Input for users.create."""

    username: str

    @field_validator("username")
    @classmethod
    def _username_required(cls, v: str) -> str:
        return require_non_empty(v, "username_required", USERNAME_REQUIRED)


class UserUpdate(UserCreate):
    """Input for users.update."""

    id: int


class UserItem(BaseModel):
    """Single user row for API response."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    created_at: datetime
    updated_at: Optional[datetime] = None
