"""Visit model (a dated record of visiting a location)."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.database import Base
from app.models.base import int_pk, ts_created, ts_updated, user_fk

if TYPE_CHECKING:
    from app.models.location import Location
    from app.models.user import User
    from app.models.visit_photo import VisitPhoto


class Visit(Base):
    """Visit to one location with optional notes and a 0-5 rating."""

    __tablename__ = "visits"
    __table_args__ = (
        CheckConstraint("rating >= 0 AND rating <= 5", name="ck_visits_rating"),
        {"comment": "Dated visits to a location. Photos are deleted with their visit."},
    )

    id: Mapped[int] = int_pk()
    location_id: Mapped[int] = mapped_column(
        ForeignKey("locations.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    visit_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, index=True)
    notes: Mapped[str] = mapped_column(Text, nullable=False, default="", server_default="")
    rating: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default="0")
    created_by: Mapped[int] = user_fk()
    updated_by: Mapped[int] = user_fk()
    created_at: Mapped[datetime] = ts_created()
    updated_at: Mapped[Optional[datetime]] = ts_updated()

    location: Mapped["Location"] = relationship(back_populates="visits")
    creator: Mapped["User"] = relationship(foreign_keys=[created_by])
    updater: Mapped["User"] = relationship(foreign_keys=[updated_by])
    photos: Mapped[List["VisitPhoto"]] = relationship(
        back_populates="visit",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="VisitPhoto.id",
    )
