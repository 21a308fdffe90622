"""Base model and shared column types for SQLAlchemy models."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import DateTime, ForeignKey, Integer
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def int_pk() -> Mapped[int]:
    """Autoincrement integer primary key."""
    return mapped_column(Integer, primary_key=True, autoincrement=True)


def ts_created() -> Mapped[datetime]:
    """
    Timestamp for created_at (timezone-aware).

    Set in Python so the value is known after flush without a refresh round-trip.
    """
    return mapped_column(
        DateTime(timezone=True),
        default=_utcnow,
        server_default=func.now(),
        nullable=False,
    )


def ts_updated() -> Mapped[Optional[datetime]]:
    """Timestamp for updated_at (timezone-aware)."""
    return mapped_column(
        DateTime(timezone=True),
        default=_utcnow,
        onupdate=_utcnow,
        server_default=func.now(),
        nullable=True,
    )


def user_fk() -> Mapped[int]:
    """created_by / updated_by reference to users.id. Deleting a referenced user fails."""
    return mapped_column(ForeignKey("users.id"), nullable=False)
