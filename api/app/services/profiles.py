"""Profile aggregate management.

``ProfileManager`` owns the business rules for a user's profile: create on
first write and merge-patch afterwards, prepend-only experience/education
lists with server-assigned entry ids, and removal of entries by id.

Writes follow load-then-mutate-then-save without locking; concurrent writers
for the same owner resolve as last-write-wins, and the unique constraint on
``profiles.user_id`` turns a racing double create into ``DuplicateProfileError``.
"""

import uuid
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any, Literal
from uuid import UUID

from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.errors import (
    EntryNotFoundError,
    IdentityDeleteFailedError,
    InvalidReferenceError,
    ProfileNotFoundError,
    ProfileServiceError,
    StoreError,
)
from app.logging_config import get_logger
from app.models.profile import Profile
from app.repositories.profiles import ProfileRepository
from app.schemas.profile import (
    AddEducationRequest,
    AddExperienceRequest,
    DeleteProfileResponse,
    ProfileResponse,
    UpsertProfileRequest,
)
from app.services.identity import IdentityStore

logger = get_logger(__name__)

EntryKind = Literal["experience", "education"]

PROFILE_FIELDS = ("company", "website", "location", "bio", "status", "github_username")
SOCIAL_FIELDS = ("youtube", "facebook", "twitter", "instagram", "linkedin")


def parse_skills(raw: str) -> list[str]:
    """Split a comma-separated skills string, trimming each piece."""
    return [skill.strip() for skill in raw.split(",")]


def build_profile_patch(data: UpsertProfileRequest) -> dict[str, Any]:
    """Collect only the scalar fields the caller actually supplied."""
    patch = {name: value for name in PROFILE_FIELDS if (value := getattr(data, name))}
    if data.skills:
        patch["skills"] = parse_skills(data.skills)
    return patch


def build_social_patch(data: UpsertProfileRequest) -> dict[str, str]:
    return {name: value for name in SOCIAL_FIELDS if (value := getattr(data, name))}


def new_entry(data: BaseModel) -> dict[str, Any]:
    """Serialize an entry request into its stored form with a fresh id."""
    return {"id": uuid.uuid4().hex, **data.model_dump(mode="json", by_alias=True)}


class ProfileManager:
    """Create, read, patch and delete profile aggregates for an owner."""

    def __init__(
        self,
        db: AsyncSession,
        repository: ProfileRepository | None = None,
        identity: IdentityStore | None = None,
    ):
        self.db = db
        self.repository = repository or ProfileRepository(db)
        self.identity = identity or IdentityStore(db)

    @asynccontextmanager
    async def _store_guard(self, operation: str, owner_id: object) -> AsyncIterator[None]:
        """Turn storage failures into an opaque ``StoreError``."""
        try:
            yield
        except ProfileServiceError:
            raise
        except SQLAlchemyError as exc:
            await self.db.rollback()
            logger.error(
                "profile_store_error",
                operation=operation,
                owner_id=str(owner_id),
                error=str(exc),
                exc_info=True,
            )
            raise StoreError(operation) from exc

    async def _require_profile(self, owner_id: UUID) -> Profile:
        profile = await self.repository.get_by_owner(owner_id)
        if profile is None:
            logger.info("profile_not_found", owner_id=str(owner_id))
            raise ProfileNotFoundError(owner_id)
        return profile

    async def _with_owner(self, profile: Profile) -> ProfileResponse:
        owners = await self.identity.project_owner_fields([profile.user_id])
        return ProfileResponse.from_model(profile, owners.get(profile.user_id))

    # --- Reads ---

    async def get_own(self, owner_id: UUID) -> ProfileResponse:
        async with self._store_guard("get_own", owner_id):
            profile = await self._require_profile(owner_id)
            return await self._with_owner(profile)

    async def list_all(self) -> list[ProfileResponse]:
        async with self._store_guard("list_all", None):
            profiles = await self.repository.list_all()
            owners = await self.identity.project_owner_fields(p.user_id for p in profiles)
        return [ProfileResponse.from_model(p, owners.get(p.user_id)) for p in profiles]

    async def get_by_owner(self, owner_ref: str | UUID) -> ProfileResponse:
        """
        Look up a profile by a caller-supplied owner id.

        A malformed id raises ``InvalidReferenceError``; a well-formed id with
        no profile raises ``ProfileNotFoundError``. Both read as not-found to
        the caller but are logged under different events.
        """
        if isinstance(owner_ref, UUID):
            owner_id = owner_ref
        else:
            try:
                owner_id = UUID(owner_ref)
            except ValueError:
                logger.info("invalid_owner_reference", owner_ref=owner_ref)
                raise InvalidReferenceError(owner_ref) from None

        async with self._store_guard("get_by_owner", owner_id):
            profile = await self.repository.get_by_owner(owner_id)
            if profile is None:
                logger.info("profile_not_found", owner_id=str(owner_id))
                raise ProfileNotFoundError(owner_id, "Profile not found")
            return await self._with_owner(profile)

    # --- Writes ---

    async def upsert(self, owner_id: UUID, data: UpsertProfileRequest) -> ProfileResponse:
        """Create the owner's profile, or merge the supplied fields into it."""
        patch = build_profile_patch(data)
        social = build_social_patch(data)

        async with self._store_guard("upsert", owner_id):
            profile = await self.repository.get_by_owner(owner_id)
            if profile is not None:
                for name, value in patch.items():
                    setattr(profile, name, value)
                profile.social = {**(profile.social or {}), **social}
                await self.repository.save(profile)
                logger.info("profile_updated", owner_id=str(owner_id), fields=sorted(patch))
            else:
                profile = await self.repository.create(owner_id, {**patch, "social": social})
                logger.info("profile_created", owner_id=str(owner_id), profile_id=str(profile.id))

        return ProfileResponse.from_model(profile)

    async def delete(self, owner_id: UUID) -> DeleteProfileResponse:
        """
        Remove the profile, then the owner's identity record.

        The two steps are not transactional. If the second fails the profile
        stays deleted and ``IdentityDeleteFailedError`` is raised.
        """
        async with self._store_guard("delete", owner_id):
            removed = await self.repository.delete_by_owner(owner_id)
        logger.info("profile_deleted", owner_id=str(owner_id), removed=removed)

        try:
            await self.identity.delete_identity(owner_id)
        except SQLAlchemyError as exc:
            await self.db.rollback()
            logger.error(
                "identity_delete_failed",
                owner_id=str(owner_id),
                error=str(exc),
                exc_info=True,
            )
            raise IdentityDeleteFailedError(owner_id) from exc

        logger.info("identity_deleted", owner_id=str(owner_id))
        return DeleteProfileResponse(msg="User deleted", user_id=str(owner_id))

    async def add_experience(self, owner_id: UUID, data: AddExperienceRequest) -> ProfileResponse:
        return await self._add_entry(owner_id, "experience", data)

    async def add_education(self, owner_id: UUID, data: AddEducationRequest) -> ProfileResponse:
        return await self._add_entry(owner_id, "education", data)

    async def remove_experience(self, owner_id: UUID, entry_id: str) -> ProfileResponse:
        return await self._remove_entry(owner_id, "experience", entry_id)

    async def remove_education(self, owner_id: UUID, entry_id: str) -> ProfileResponse:
        return await self._remove_entry(owner_id, "education", entry_id)

    async def _add_entry(self, owner_id: UUID, kind: EntryKind, data: BaseModel) -> ProfileResponse:
        entry = new_entry(data)

        async with self._store_guard(f"add_{kind}", owner_id):
            profile = await self._require_profile(owner_id)
            # Newest first
            setattr(profile, kind, [entry, *(getattr(profile, kind) or [])])
            await self.repository.save(profile)

        logger.info("profile_entry_added", owner_id=str(owner_id), kind=kind, entry_id=entry["id"])
        return ProfileResponse.from_model(profile)

    async def _remove_entry(self, owner_id: UUID, kind: EntryKind, entry_id: str) -> ProfileResponse:
        async with self._store_guard(f"remove_{kind}", owner_id):
            profile = await self._require_profile(owner_id)
            entries = list(getattr(profile, kind) or [])

            index = next((i for i, e in enumerate(entries) if e.get("id") == entry_id), None)
            if index is None:
                logger.info(
                    "profile_entry_not_found",
                    owner_id=str(owner_id),
                    kind=kind,
                    entry_id=entry_id,
                )
                raise EntryNotFoundError(kind, entry_id)

            del entries[index]
            setattr(profile, kind, entries)
            await self.repository.save(profile)

        logger.info("profile_entry_removed", owner_id=str(owner_id), kind=kind, entry_id=entry_id)
        return ProfileResponse.from_model(profile)
