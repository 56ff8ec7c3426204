"""Identity store access: owner field projection and account removal."""

from collections.abc import Iterable
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.user import User
from app.schemas.profile import OwnerSummary


class IdentityStore:
    """Read the public owner fields that are joined into profile reads."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def project_owner_fields(self, owner_ids: Iterable[UUID]) -> dict[UUID, OwnerSummary]:
        """
        Fetch ``{id, name, avatar}`` for each owner in a single query.

        Owners without an identity record are left out of the mapping.
        """
        ids = set(owner_ids)
        if not ids:
            return {}

        result = await self.db.execute(
            select(User.id, User.name, User.avatar).where(User.id.in_(ids))
        )
        return {
            row.id: OwnerSummary(id=str(row.id), name=row.name, avatar=row.avatar)
            for row in result.all()
        }

    async def delete_identity(self, owner_id: UUID) -> None:
        """Remove the user record. Removing an absent user is not an error."""
        await self.db.execute(delete(User).where(User.id == owner_id))
        await self.db.commit()
