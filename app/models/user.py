"""User model (creator/updater of locations, visits and photos)."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from app.core.database import Base
from app.models.base import int_pk, ts_created, ts_updated


class User(Base):
    """Application user. Referenced by created_by / updated_by on other tables."""

    __tablename__ = "users"
    __table_args__ = {"comment": "Users who record locations, visits and photos."}

    id: Mapped[int] = int_pk()
    username: Mapped[str] = mapped_column(String(255), nullable=False)
    created_at: Mapped[datetime] = ts_created()
    updated_at: Mapped[Optional[datetime]] = ts_updated()
