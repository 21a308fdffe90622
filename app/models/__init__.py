"""Database models. All entities for the visit log."""

from app.core.database import Base
from app.models.location import Location
from app.models.user import User
from app.models.visit import Visit
from app.models.visit_photo import VisitPhoto

__all__ = [
    "Base",
    "User",
    "Location",
    "Visit",
    "VisitPhoto",
]
