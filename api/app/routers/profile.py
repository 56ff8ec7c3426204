"""Profile router: profile CRUD, experience/education entries and GitHub repos."""

from uuid import UUID

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.dependencies import get_current_user_id
from app.config import settings
from app.database import get_db
from app.middleware.rate_limit import limiter
from app.schemas.github import RepoSummary
from app.schemas.profile import (
    AddEducationRequest,
    AddExperienceRequest,
    DeleteProfileResponse,
    ProfileResponse,
    UpsertProfileRequest,
)
from app.services.github import GitHubClient, get_github_client
from app.services.profiles import ProfileManager

router = APIRouter(prefix="/api/profile", tags=["Profile"])


def get_profile_manager(db: AsyncSession = Depends(get_db)) -> ProfileManager:
    """Dependency that provides a profile manager bound to the request session."""
    return ProfileManager(db)


# --- Profile ---


@router.get(
    "/me",
    response_model=ProfileResponse,
    status_code=status.HTTP_200_OK,
)
async def get_my_profile(
    owner_id: UUID = Depends(get_current_user_id),
    manager: ProfileManager = Depends(get_profile_manager),
) -> ProfileResponse:
    """Get the authenticated user's profile, including their name and avatar."""
    return await manager.get_own(owner_id)


@router.post(
    "",
    response_model=ProfileResponse,
    status_code=status.HTTP_200_OK,
)
async def upsert_profile(
    data: UpsertProfileRequest,
    owner_id: UUID = Depends(get_current_user_id),
    manager: ProfileManager = Depends(get_profile_manager),
) -> ProfileResponse:
    """
    Create or update the authenticated user's profile.

    Fields left out of the request keep their stored values.
    """
    return await manager.upsert(owner_id, data)


@router.get(
    "",
    response_model=list[ProfileResponse],
    status_code=status.HTTP_200_OK,
)
async def list_profiles(
    manager: ProfileManager = Depends(get_profile_manager),
) -> list[ProfileResponse]:
    """List every profile. Public."""
    return await manager.list_all()


@router.get(
    "/user/{user_id}",
    response_model=ProfileResponse,
    status_code=status.HTTP_200_OK,
)
async def get_profile_by_user(
    user_id: str,
    manager: ProfileManager = Depends(get_profile_manager),
) -> ProfileResponse:
    """Get a profile by its owner's user id. Public."""
    return await manager.get_by_owner(user_id)


@router.delete(
    "",
    response_model=DeleteProfileResponse,
    status_code=status.HTTP_200_OK,
)
async def delete_profile(
    owner_id: UUID = Depends(get_current_user_id),
    manager: ProfileManager = Depends(get_profile_manager),
) -> DeleteProfileResponse:
    """Delete the authenticated user's profile and then their account."""
    return await manager.delete(owner_id)


# --- Experience ---


@router.put(
    "/experience",
    response_model=ProfileResponse,
    status_code=status.HTTP_200_OK,
)
async def add_experience(
    data: AddExperienceRequest,
    owner_id: UUID = Depends(get_current_user_id),
    manager: ProfileManager = Depends(get_profile_manager),
) -> ProfileResponse:
    """Add a work experience entry to the top of the list."""
    return await manager.add_experience(owner_id, data)


@router.delete(
    "/experience/{exp_id}",
    response_model=ProfileResponse,
    status_code=status.HTTP_200_OK,
)
async def remove_experience(
    exp_id: str,
    owner_id: UUID = Depends(get_current_user_id),
    manager: ProfileManager = Depends(get_profile_manager),
) -> ProfileResponse:
    return await manager.remove_experience(owner_id, exp_id)


# --- Education ---


@router.put(
    "/education",
    response_model=ProfileResponse,
    status_code=status.HTTP_200_OK,
)
async def add_education(
    data: AddEducationRequest,
    owner_id: UUID = Depends(get_current_user_id),
    manager: ProfileManager = Depends(get_profile_manager),
) -> ProfileResponse:
    """Add an education entry to the top of the list."""
    return await manager.add_education(owner_id, data)


@router.delete(
    "/education/{edu_id}",
    response_model=ProfileResponse,
    status_code=status.HTTP_200_OK,
)
async def remove_education(
    edu_id: str,
    owner_id: UUID = Depends(get_current_user_id),
    manager: ProfileManager = Depends(get_profile_manager),
) -> ProfileResponse:
    return await manager.remove_education(owner_id, edu_id)


# --- GitHub ---


@router.get(
    "/github/{username}",
    response_model=list[RepoSummary],
    status_code=status.HTTP_200_OK,
)
@limiter.limit(settings.github_rate_limit)
async def get_github_repos(
    request: Request,
    username: str,
    github: GitHubClient = Depends(get_github_client),
) -> list[RepoSummary]:
    """Get the user's five most recently created GitHub repositories. Public."""
    return await github.fetch_repos(username)
