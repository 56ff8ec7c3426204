"""GitHub repository listing schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class RepoSummary(BaseModel):
    """Subset of the GitHub repository payload shown on a profile."""

    model_config = ConfigDict(extra="ignore")

    id: int
    name: str
    full_name: str | None = None
    html_url: str
    description: str | None = None
    language: str | None = None
    stargazers_count: int = 0
    watchers_count: int = 0
    forks_count: int = 0
    created_at: datetime | None = None
