"""Database base configuration."""
import os
import sys
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase


def normalize_async_url(url: str) -> str:
    """Ensure URL uses an async driver; hosting providers often hand out postgresql:// (sync)."""
    u = (url or "").strip()
    if u.startswith("postgres://"):
        return u.replace("postgres://", "postgresql+asyncpg://", 1)
    if u.startswith("postgresql://"):
        return u.replace("postgresql://", "postgresql+asyncpg://", 1)
    if u.startswith("sqlite://") and not u.startswith("sqlite+aiosqlite://"):
        return u.replace("sqlite://", "sqlite+aiosqlite://", 1)
    return u


class Base(DeclarativeBase):
    """Base class for all models."""
    pass


def build_engine(database_url: str, echo: bool = False) -> AsyncEngine:
    return create_async_engine(
        normalize_async_url(database_url),
        echo=echo,
        pool_pre_ping=True,
    )


def build_sessionmaker(bind: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        bind,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


# Tests build their own in-memory engine and override get_db
_is_pytest = "pytest" in sys.modules or "PYTEST_CURRENT_TEST" in os.environ

engine: Optional[AsyncEngine] = None
AsyncSessionLocal: Optional[async_sessionmaker[AsyncSession]] = None

if not _is_pytest:
    from relmap.settings import settings

    engine = build_engine(settings.database_url, echo=settings.database_echo)
    AsyncSessionLocal = build_sessionmaker(engine)
