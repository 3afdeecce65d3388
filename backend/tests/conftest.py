"""Pytest configuration for tests directory."""
from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from relmap.domain.social.locks import KeyedLockRegistry
from relmap.infra.db.base import Base
from relmap.infra.db.models import InteractionModel, PersonModel  # noqa: F401
from relmap.infra.db.repositories.person_repo import PersonRepositoryImpl

T0 = datetime(2025, 3, 1, 12, 0, tzinfo=timezone.utc)


class FixedClock:
    """Deterministic clock for services; advance it to simulate elapsed time."""

    def __init__(self, now: datetime = T0):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


class RecordingEventSink:
    """Collects emitted events in memory."""

    def __init__(self):
        self.events: list[tuple[str, str, dict]] = []

    async def emit(self, event_type: str, owner_id: str, payload: dict) -> None:
        self.events.append((event_type, owner_id, payload))

    def of_type(self, event_type: str) -> list[dict]:
        return [payload for kind, _, payload in self.events if kind == event_type]


def pytest_configure(config):
    config.addinivalue_line(
        "markers", "integration: marks tests that need a real DB (deselect with '-m \"not integration\"')"
    )


@pytest.fixture
async def db_engine():
    """In-memory SQLite engine with the relationship map schema."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
async def session_factory(db_engine):
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


@pytest.fixture
async def db_session(session_factory):
    """Create a test database session."""
    async with session_factory() as session:
        yield session


@pytest.fixture
def person_repo(db_session: AsyncSession) -> PersonRepositoryImpl:
    return PersonRepositoryImpl(db_session)


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock()


@pytest.fixture
def event_sink() -> RecordingEventSink:
    return RecordingEventSink()


@pytest.fixture
def locks() -> KeyedLockRegistry:
    return KeyedLockRegistry()
