"""Database engine, session factory and schema helpers."""

import asyncio
from collections.abc import AsyncGenerator
from pathlib import Path

from sqlalchemy import JSON
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base

from alembic.command import upgrade
from alembic.config import Config
from app.config import settings

engine = create_async_engine(
    settings.database_url,
    echo=False,
    pool_pre_ping=True,
)

AsyncSessionLocal = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)

Base = declarative_base()

# Embedded documents (skills, social links, experience, education) live inline
# in the profile row: JSONB on PostgreSQL, plain JSON elsewhere (tests).
JSONDocument = JSON().with_variant(JSONB(), "postgresql")


def _alembic_config(db_url: str) -> Config:
    root = Path(__file__).resolve().parents[1]
    config = Config(str(root / "alembic.ini"))
    config.set_main_option("script_location", str(root / "alembic"))
    config.set_main_option("sqlalchemy.url", db_url)
    config.attributes["configure_logger"] = False
    return config


def run_migrations(db_url: str, revision: str = "head") -> None:
    """Upgrade the database at ``db_url`` to ``revision``."""
    upgrade(_alembic_config(db_url), revision)


async def init_db(db_url: str | None = None) -> None:
    """Bring the schema up to date without blocking the event loop."""
    await asyncio.to_thread(run_migrations, db_url or settings.database_url)


async def create_schema(bind: AsyncEngine) -> None:
    """Create every mapped table directly from metadata (no migrations)."""
    async with bind.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def drop_schema(bind: AsyncEngine) -> None:
    async with bind.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Dependency that provides a database session."""
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
