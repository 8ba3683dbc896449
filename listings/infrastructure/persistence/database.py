from functools import lru_cache

from sqlalchemy.ext.asyncio import (AsyncEngine, AsyncSession, async_sessionmaker,
                                    create_async_engine)
from sqlalchemy.orm import DeclarativeBase

from listings.infrastructure.config.settings import get_settings


# Modern SQLAlchemy 2.0 pattern
class Base(DeclarativeBase):
    """Base class for all database models"""

    pass


def build_engine(database_url: str, echo: bool = False) -> AsyncEngine:
    """Create an async engine; pool sizing only applies to server databases"""
    if database_url.startswith("sqlite"):
        return create_async_engine(database_url, echo=echo)

    return create_async_engine(
        database_url,
        echo=echo,
        pool_pre_ping=True,
        pool_size=20,
        max_overflow=30,
        pool_recycle=3600,
        connect_args=(
            {
                "server_settings": {"jit": "off"},
                "command_timeout": 60,
            }
            if "postgresql" in database_url
            else {}
        ),
    )


def build_sessionmaker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
        autocommit=False,
    )


@lru_cache
def get_engine() -> AsyncEngine:
    """Process-wide engine, created on first use"""
    settings = get_settings()
    return build_engine(settings.database_url, settings.database_echo)


@lru_cache
def get_sessionmaker() -> async_sessionmaker[AsyncSession]:
    return build_sessionmaker(get_engine())


async def get_db():
    """
    Database session dependency for read operations.
    Does not commit - read-only operations don't need commits.
    Write operations should use get_db_transactional().
    """
    async with get_sessionmaker()() as session:
        try:
            yield session
        finally:
            await session.close()


async def get_db_transactional():
    """
    Database session dependency for write operations with automatic transaction management.
    - Begins transaction automatically
    - Commits on success
    - Rolls back on exception
    - Closes session automatically

    Use this for POST, PUT, PATCH, DELETE endpoints. Gateways commit their
    own unit of work before auditing, so the closing commit here only covers
    writes made outside a gateway. Activity records are written through
    their own sessions, so a rollback here never removes a FAILED entry.
    """
    async with get_sessionmaker()() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
