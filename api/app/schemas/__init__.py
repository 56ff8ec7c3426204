"""Pydantic schemas for request/response validation."""

from app.schemas.github import RepoSummary
from app.schemas.profile import (
    AddEducationRequest,
    AddExperienceRequest,
    DeleteProfileResponse,
    EducationEntry,
    ExperienceEntry,
    OwnerSummary,
    ProfileResponse,
    SocialLinks,
    UpsertProfileRequest,
)

__all__ = [
    "UpsertProfileRequest",
    "AddExperienceRequest",
    "AddEducationRequest",
    "ExperienceEntry",
    "EducationEntry",
    "SocialLinks",
    "OwnerSummary",
    "ProfileResponse",
    "DeleteProfileResponse",
    "RepoSummary",
]
