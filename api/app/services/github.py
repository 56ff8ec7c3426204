"""GitHub repository lookup for profile pages."""

from datetime import datetime, timezone

import httpx

from app.config import settings
from app.errors import UpstreamError, UpstreamUnavailableError
from app.logging_config import get_logger
from app.schemas.github import RepoSummary

logger = get_logger(__name__)

REPO_LIMIT = 5

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


class GitHubClient:
    """
    Fetch a user's most recently created public repositories.

    Every request is bounded by ``timeout`` seconds. No caching or retries:
    a failed lookup is reported straight back to the caller.
    """

    def __init__(
        self,
        base_url: str | None = None,
        token: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url or settings.github_api_url
        self.token = token if token is not None else settings.github_token
        self.timeout = timeout or settings.github_timeout_seconds
        self.transport = transport

    def _headers(self) -> dict[str, str]:
        headers = {
            "Accept": "application/vnd.github+json",
            "User-Agent": "devconnector-api",
        }
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    async def fetch_repos(self, username: str) -> list[RepoSummary]:
        """
        Return up to ``REPO_LIMIT`` repositories, newest first.

        Raises:
            UpstreamUnavailableError: GitHub answered with a non-success status
            UpstreamError: the request failed in transport (DNS, timeout, ...)
                or the body is not a list of repositories
        """
        try:
            async with httpx.AsyncClient(
                base_url=self.base_url,
                headers=self._headers(),
                timeout=self.timeout,
                transport=self.transport,
            ) as client:
                response = await client.get(
                    f"/users/{username}/repos",
                    params={"per_page": REPO_LIMIT, "sort": "created", "direction": "desc"},
                )
        except httpx.HTTPError as exc:
            logger.warning("github_transport_error", username=username, error=str(exc))
            raise UpstreamError(username) from exc

        if not response.is_success:
            logger.info(
                "github_lookup_failed",
                username=username,
                upstream_status=response.status_code,
            )
            raise UpstreamUnavailableError(username, response.status_code)

        try:
            payload = response.json()
            if not isinstance(payload, list):
                raise TypeError(f"expected a list of repositories, got {type(payload).__name__}")
            repos = [RepoSummary.model_validate(item) for item in payload]
        except (ValueError, TypeError) as exc:
            logger.warning("github_invalid_payload", username=username, error=str(exc))
            raise UpstreamError(username) from exc

        repos.sort(key=lambda repo: repo.created_at or _EPOCH, reverse=True)
        return repos[:REPO_LIMIT]


def get_github_client() -> GitHubClient:
    """Dependency that provides the GitHub client."""
    return GitHubClient()
