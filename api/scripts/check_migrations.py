"""Fail if the migrated database schema drifts from the SQLAlchemy models.

Run after ``alembic upgrade head`` in CI:

    python scripts/check_migrations.py
"""

from __future__ import annotations

import asyncio
import sys

from alembic.autogenerate import compare_metadata
from alembic.migration import MigrationContext
from sqlalchemy.ext.asyncio import create_async_engine

from app.config import settings
from app.database import Base
from app import models  # noqa: F401  # Ensure models are registered


def _compare(connection) -> list[object]:
    context = MigrationContext.configure(connection, opts={"compare_type": True})
    return compare_metadata(context, Base.metadata)


async def find_schema_drift(database_url: str) -> list[object]:
    engine = create_async_engine(database_url)
    try:
        async with engine.connect() as conn:
            return await conn.run_sync(_compare)
    finally:
        await engine.dispose()


def main() -> int:
    diffs = asyncio.run(find_schema_drift(settings.database_url))
    if not diffs:
        print("Profiles schema matches the models.")
        return 0

    print("Schema drift between migrations and models:", file=sys.stderr)
    for diff in diffs:
        print(f"  {diff}", file=sys.stderr)
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
