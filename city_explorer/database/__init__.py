"""
SQLAlchemy async database configuration.
"""
import os

from dotenv import load_dotenv
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from city_explorer.database.models import Base

load_dotenv()

# Database configuration
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite+aiosqlite:///./city_explorer.db")


def _async_url(database_url: str) -> str:
    """Point plain PostgreSQL/SQLite URLs at their async drivers."""
    if database_url.startswith("postgres://"):
        database_url = database_url.replace("postgres://", "postgresql://", 1)
    if database_url.startswith("postgresql://"):
        return database_url.replace("postgresql://", "postgresql+asyncpg://", 1)
    if database_url.startswith("sqlite://"):
        return database_url.replace("sqlite://", "sqlite+aiosqlite://", 1)
    return database_url


def create_engine(database_url: str = DATABASE_URL, echo: bool = False) -> AsyncEngine:
    """
    Create the async engine shared by all requests of one application.

    Args:
        database_url: Database URL; ``postgresql://`` and ``sqlite://`` URLs
            are rewritten to the asyncpg and aiosqlite drivers
        echo: Log emitted SQL

    Returns:
        AsyncEngine
    """
    return create_async_engine(_async_url(database_url), echo=echo)


async def init_db(engine: AsyncEngine) -> None:
    """Create the locations, weathers and meetups tables if they do not exist."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
