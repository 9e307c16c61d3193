"""
Database configuration and session management
"""
from fastapi import Request
from sqlalchemy import text
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.orm import declarative_base

from backend.config import Settings

# Base class for models
Base = declarative_base()


def _get_async_url(url: str) -> str:
    """Convert database URL to async variant"""
    if url.startswith("postgresql://"):
        return url.replace("postgresql://", "postgresql+asyncpg://")
    if url.startswith("sqlite:///"):
        return url.replace("sqlite:///", "sqlite+aiosqlite:///")
    if url.startswith("mssql+pyodbc://"):
        return url.replace("mssql+pyodbc://", "mssql+aioodbc://")
    return url


class Database:
    """Owns the engine (and its connection pool) for the lifetime of the app.

    Built once at startup, shared by reference, disposed on shutdown.
    """

    def __init__(self, url: str, *, echo: bool = False, pool_size: int = 10,
                 max_overflow: int = 0, pool_timeout: int = 30, pool_recycle: int = 1800):
        self.url = _get_async_url(url)
        self.is_sqlite = self.url.startswith("sqlite")

        engine_kwargs = {"echo": echo}

        # SQLite doesn't support pool_size
        if not self.is_sqlite:
            engine_kwargs["pool_size"] = pool_size
            engine_kwargs["max_overflow"] = max_overflow
            engine_kwargs["pool_timeout"] = pool_timeout
            engine_kwargs["pool_recycle"] = pool_recycle
            engine_kwargs["pool_pre_ping"] = True

        self.engine = create_async_engine(self.url, **engine_kwargs)
        self.session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        return cls(
            settings.DATABASE_URL,
            echo=settings.DEBUG,
            pool_size=settings.DB_POOL_SIZE,
            max_overflow=settings.DB_MAX_OVERFLOW,
            pool_timeout=settings.DB_POOL_TIMEOUT,
            pool_recycle=settings.DB_POOL_RECYCLE,
        )

    async def create_all(self) -> None:
        # Import models so they register on Base.metadata
        import backend.models  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def ping(self) -> None:
        async with self.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))

    async def dispose(self) -> None:
        await self.engine.dispose()


async def get_db(request: Request) -> AsyncSession:
    """Dependency for getting database session"""
    database: Database = request.app.state.database
    async with database.session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()
