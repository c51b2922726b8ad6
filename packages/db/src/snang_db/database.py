# This project was developed with assistance from AI tools.
"""Async database gateway for the hosted PostgreSQL store.

The service-role connection string is passed in explicitly by the
application at startup (see ``snang_api.main.create_app``); nothing in this
module reads the environment. The running ``DatabaseService`` is kept on
``app.state.db_service`` and handed to routes through ``get_db``.
"""

import logging
from collections.abc import AsyncIterator

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base
from starlette.requests import Request

logger = logging.getLogger(__name__)

Base = declarative_base()


class DatabaseService:
    """Owns the async engine and session factory for one application."""

    def __init__(self, url: str, *, echo: bool = False, pool_size: int = 5):
        self.engine: AsyncEngine = create_async_engine(
            url,
            echo=echo,
            pool_size=pool_size,
            pool_pre_ping=True,
        )
        self.session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    async def session(self) -> AsyncIterator[AsyncSession]:
        """Yield a session that is closed when the caller is done."""
        async with self.session_factory() as session:
            yield session

    async def dispose(self) -> None:
        """Close all pooled connections."""
        await self.engine.dispose()
        logger.info("Database engine disposed")


def get_db_service(request: Request) -> DatabaseService:
    """Return the DatabaseService created during application startup."""
    service = getattr(request.app.state, "db_service", None)
    if service is None:
        raise RuntimeError("DatabaseService not initialised -- was the app lifespan run?")
    return service


async def get_db(request: Request) -> AsyncIterator[AsyncSession]:
    """FastAPI dependency yielding one AsyncSession per request."""
    service = get_db_service(request)
    async for session in service.session():
        yield session
