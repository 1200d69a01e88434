"""
Database session management with SQLAlchemy async
"""

from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import NullPool
from core.config import Settings


def create_engine(settings: Settings) -> AsyncEngine:
    """Create async engine for the checkpoint database"""
    return create_async_engine(
        settings.DATABASE_URL,
        echo=settings.ENVIRONMENT == "development",
        poolclass=NullPool,
        future=True
    )


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker:
    """Create session factory bound to the given engine"""
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autocommit=False,
        autoflush=False
    )
