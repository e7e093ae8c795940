"""
Base configuration for SQLAlchemy models
"""
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker, AsyncEngine
from sqlalchemy.orm import declarative_base

from ..config.settings import settings


def _async_url(database_url: str) -> str:
    """Map a plain postgres URL onto the asyncpg driver"""
    if database_url.startswith("postgresql://"):
        return database_url.replace("postgresql://", "postgresql+asyncpg://", 1)
    return database_url


def build_engine(database_url: str) -> AsyncEngine:
    """Create the async engine; pool tuning only applies to postgres"""
    url = _async_url(database_url)
    if url.startswith("postgresql+asyncpg://"):
        return create_async_engine(
            url,
            pool_size=15,
            max_overflow=25,
            pool_pre_ping=True,
            pool_recycle=1800,
            pool_timeout=20,
            pool_reset_on_return='rollback',
            echo=False,
        )
    return create_async_engine(url, echo=False)


# Create async engine
async_engine = build_engine(settings.DATABASE_URL)

# Create async session factory
AsyncSessionLocal = async_sessionmaker(
    async_engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False
)

Base = declarative_base()


async def get_db() -> AsyncSession:
    """Dependency to get async database session"""
    async with AsyncSessionLocal() as session:
        try:
            yield session
        finally:
            await session.close()


async def init_db(engine: AsyncEngine = async_engine):
    """Create tables that do not exist yet"""
    # Import models so they register on Base.metadata
    from . import user, conversation, feedback  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
