"""Visit photo model (file attachment owned by exactly one visit)."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.database import Base
from app.models.base import int_pk, ts_created, ts_updated, user_fk

if TYPE_CHECKING:
    from app.models.user import User
    from app.models.visit import Visit


class VisitPhoto(Base):
    """Uploaded photo attached to a visit. file_path is the public URL path (/uploads/...)."""

    __tablename__ = "visit_photos"
    __table_args__ = {"comment": "Photos attached to visits."}

    id: Mapped[int] = int_pk()
    visit_id: Mapped[int] = mapped_column(
        ForeignKey("visits.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    file_path: Mapped[str] = mapped_column(String(500), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="", server_default="")
    created_by: Mapped[int] = user_fk()
    updated_by: Mapped[int] = user_fk()
    created_at: Mapped[datetime] = ts_created()
    updated_at: Mapped[Optional[datetime]] = ts_updated()

    visit: Mapped["Visit"] = relationship(back_populates="photos")
    creator: Mapped["User"] = relationship(foreign_keys=[created_by])
    updater: Mapped["User"] = relationship(foreign_keys=[updated_by])
