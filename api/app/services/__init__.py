"""Services for the DevConnector API."""

from app.services.github import GitHubClient, get_github_client
from app.services.identity import IdentityStore
from app.services.profiles import ProfileManager

__all__ = ["ProfileManager", "IdentityStore", "GitHubClient", "get_github_client"]
