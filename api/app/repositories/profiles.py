"""Profile repository: one profile row per owner."""

from datetime import datetime, timezone
from typing import Any
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.errors import DuplicateProfileError
from app.models.profile import Profile


class ProfileRepository:
    """Lookup, create, save and delete profiles.

    Commits are issued here so each write is durable when the call returns.
    SQLAlchemy errors propagate to the caller, except the owner-uniqueness
    violation which is translated to ``DuplicateProfileError``.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_by_owner(self, owner_id: UUID) -> Profile | None:
        result = await self.db.execute(select(Profile).where(Profile.user_id == owner_id))
        return result.scalar_one_or_none()

    async def list_all(self) -> list[Profile]:
        result = await self.db.execute(
            select(Profile).order_by(Profile.created_at, Profile.id)
        )
        return list(result.scalars().all())

    async def create(self, owner_id: UUID, fields: dict[str, Any]) -> Profile:
        """
        Insert a new profile; relies on the unique constraint on ``user_id``.

        An integrity failure is reported as ``DuplicateProfileError`` only when
        a profile for the owner exists after the rollback. Anything else, such
        as a missing ``users`` row, propagates as the original error.
        """
        now = datetime.now(timezone.utc)
        values: dict[str, Any] = {
            "skills": [],
            "social": {},
            "experience": [],
            "education": [],
            **fields,
            "user_id": owner_id,
            "created_at": now,
            "updated_at": now,
        }
        profile = Profile(**values)
        self.db.add(profile)
        try:
            await self.db.commit()
        except IntegrityError as exc:
            await self.db.rollback()
            existing = await self.db.scalar(
                select(Profile.id).where(Profile.user_id == owner_id)
            )
            if existing is None:
                raise
            raise DuplicateProfileError(owner_id) from exc
        return profile

    async def save(self, profile: Profile) -> Profile:
        profile.updated_at = datetime.now(timezone.utc)
        await self.db.commit()
        return profile

    async def delete_by_owner(self, owner_id: UUID) -> int:
        """Delete the owner's profile. Returns the number of rows removed."""
        result = await self.db.execute(delete(Profile).where(Profile.user_id == owner_id))
        await self.db.commit()
        return result.rowcount or 0
