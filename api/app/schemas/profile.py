"""Profile-related Pydantic schemas."""

from datetime import date

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from app.models.profile import Profile


class SocialLinks(BaseModel):
    """Optional social network links."""

    youtube: str | None = None
    facebook: str | None = None
    twitter: str | None = None
    instagram: str | None = None
    linkedin: str | None = None


class OwnerSummary(BaseModel):
    """Public identity fields joined into profile reads."""

    id: str
    name: str
    avatar: str | None


class UpsertProfileRequest(BaseModel):
    """
    Request to create or update the caller's profile.

    Only non-empty fields are applied; everything else keeps its stored value.
    """

    status: str = Field(min_length=1)
    skills: str = Field(min_length=1, description="Comma-separated list of skills")
    company: str | None = None
    website: str | None = None
    location: str | None = None
    bio: str | None = None
    github_username: str | None = Field(
        default=None,
        validation_alias=AliasChoices("github_username", "githubusername"),
    )

    # Social links arrive flat and are folded into ``social``
    youtube: str | None = None
    facebook: str | None = None
    twitter: str | None = None
    instagram: str | None = None
    linkedin: str | None = None


class _EntryBase(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    from_: date = Field(alias="from")
    to: date | None = None
    current: bool = False
    description: str | None = None


class AddExperienceRequest(_EntryBase):
    """Request to add a work experience entry."""

    title: str = Field(min_length=1)
    company: str = Field(min_length=1)
    location: str | None = None


class AddEducationRequest(_EntryBase):
    """Request to add an education entry."""

    school: str = Field(min_length=1)
    degree: str = Field(min_length=1)
    fieldofstudy: str = Field(min_length=1)


class ExperienceEntry(AddExperienceRequest):
    id: str


class EducationEntry(AddEducationRequest):
    id: str


class ProfileResponse(BaseModel):
    """Profile aggregate as returned by the API."""

    id: str
    owner: str
    user: OwnerSummary | None = None
    company: str | None
    website: str | None
    location: str | None
    bio: str | None
    status: str
    github_username: str | None
    skills: list[str]
    social: SocialLinks
    experience: list[ExperienceEntry]
    education: list[EducationEntry]
    created_at: str | None
    updated_at: str | None

    @classmethod
    def from_model(cls, profile: Profile, user: OwnerSummary | None = None) -> "ProfileResponse":
        return cls(
            id=str(profile.id),
            owner=str(profile.user_id),
            user=user,
            company=profile.company,
            website=profile.website,
            location=profile.location,
            bio=profile.bio,
            status=profile.status,
            github_username=profile.github_username,
            skills=list(profile.skills or []),
            social=SocialLinks(**(profile.social or {})),
            experience=[ExperienceEntry.model_validate(e) for e in profile.experience or []],
            education=[EducationEntry.model_validate(e) for e in profile.education or []],
            created_at=profile.created_at.isoformat() if profile.created_at else None,
            updated_at=profile.updated_at.isoformat() if profile.updated_at else None,
        )


class DeleteProfileResponse(BaseModel):
    """Confirmation returned after deleting a profile and its account."""

    msg: str
    user_id: str
