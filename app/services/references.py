"""Existence checks for rows a mutation points at, run before the flush."""

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import NotFoundError
from app.models.user import User


async def require_user(session: AsyncSession, user_id: int) -> None:
    """Raise NotFoundError unless a user with this id exists (created_by / updated_by)."""
    if await session.get(User, user_id) is None:
        raise NotFoundError(f"User {user_id} not found")
