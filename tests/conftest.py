"""Shared fixtures: in-memory SQLite database, ASGI client and seed records."""

from datetime import datetime

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.core.database import Base, get_async_session
from app.main import app as fastapi_app
from app.models import Location, User, Visit


@pytest.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    @event.listens_for(engine.sync_engine, "connect")
    def _enable_foreign_keys(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


@pytest.fixture
async def session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
async def client(session_factory):
    """ASGI client whose requests each get a session with commit-or-rollback semantics."""

    async def override_get_async_session():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    fastapi_app.dependency_overrides[get_async_session] = override_get_async_session
    async with AsyncClient(transport=ASGITransport(app=fastapi_app), base_url="http://test") as ac:
        yield ac
    fastapi_app.dependency_overrides.clear()


@pytest.fixture
async def user(session) -> User:
    user = User(username="taro")
    session.add(user)
    await session.commit()
    return user


@pytest.fixture
async def location(session, user) -> Location:
    location = Location(
        name="Tokyo Tower",
        latitude=35.6586,
        longitude=139.7454,
        address="東京都港区芝公園",
        description="",
        created_by=user.id,
        updated_by=user.id,
    )
    session.add(location)
    await session.commit()
    return location


@pytest.fixture
async def visit(session, user, location) -> Visit:
    visit = Visit(
        location_id=location.id,
        visit_date=datetime(2024, 5, 1, 10, 0),
        notes="first",
        rating=4,
        created_by=user.id,
        updated_by=user.id,
    )
    session.add(visit)
    await session.commit()
    return visit
