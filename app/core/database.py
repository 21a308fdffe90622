"""Async database engine, session factory, and declarative base for SQLAlchemy 2.0."""

from collections.abc import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from app.core.config import get_settings


def get_async_engine():
    """Create async engine from settings. Use for app lifespan or Alembic."""
    settings = get_settings()
    return create_async_engine(
        settings.DATABASE_URL,
        echo=False,
        pool_pre_ping=True,
        pool_size=5,
        max_overflow=10,
    )


engine = get_async_engine()

AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autocommit=False,
    autoflush=False,
)


class Base(DeclarativeBase):
    """Declarative base for all models. Use for metadata and migrations."""

    pass


async def get_async_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Yield an async session for dependency injection.

    One request is one transaction: commit when the endpoint returns normally,
    roll back when it raises (visit + photo writes persist together or not at all).
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()
