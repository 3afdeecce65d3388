"""Request-scoped database sessions."""
from typing import AsyncIterator

from sqlalchemy.ext.asyncio import AsyncSession

from relmap.infra.db import base


async def get_db() -> AsyncIterator[AsyncSession]:
    """Yield a session; uncommitted work is rolled back on close."""
    if base.AsyncSessionLocal is None:
        raise RuntimeError("Database engine is not configured")
    async with base.AsyncSessionLocal() as session:
        yield session
