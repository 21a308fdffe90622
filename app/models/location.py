"""Location model (a physical place that can be visited)."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import CheckConstraint, Float, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.database import Base
from app.models.base import int_pk, ts_created, ts_updated, user_fk

if TYPE_CHECKING:
    from app.models.user import User
    from app.models.visit import Visit


class Location(Base):
    """Physical place with coordinates. Visits reference it; deleting a visited location fails."""

    __tablename__ = "locations"
    __table_args__ = (
        CheckConstraint("latitude >= -90 AND latitude <= 90", name="ck_locations_latitude"),
        CheckConstraint("longitude >= -180 AND longitude <= 180", name="ck_locations_longitude"),
        {"comment": "Places a user can visit (map markers)."},
    )

    id: Mapped[int] = int_pk()
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    latitude: Mapped[float] = mapped_column(Float, nullable=False)
    longitude: Mapped[float] = mapped_column(Float, nullable=False)
    address: Mapped[str] = mapped_column(Text, nullable=False, default="", server_default="")
    description: Mapped[str] = mapped_column(Text, nullable=False, default="", server_default="")
    created_by: Mapped[int] = user_fk()
    updated_by: Mapped[int] = user_fk()
    created_at: Mapped[datetime] = ts_created()
    updated_at: Mapped[Optional[datetime]] = ts_updated()

    creator: Mapped["User"] = relationship(foreign_keys=[created_by])
    updater: Mapped["User"] = relationship(foreign_keys=[updated_by])
    # passive_deletes="all": the database decides whether a visited location can be deleted
    visits: Mapped[List["Visit"]] = relationship(
        back_populates="location",
        passive_deletes="all",
        order_by="Visit.visit_date.desc()",
    )
