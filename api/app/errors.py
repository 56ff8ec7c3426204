"""Error hierarchy for the profile service.

Every error carries a stable ``code``, a caller-facing ``message`` and the
HTTP status the API maps it to. Messages never include storage details;
those go to the logs only.
"""

from fastapi import status


class ProfileServiceError(Exception):
    """Base exception for profile service failures."""

    code = "INTERNAL_ERROR"
    http_status = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_response(self, request_id: str | None = None) -> dict:
        """Convert to the standard error envelope."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "request_id": request_id,
            }
        }


# --- Not found (reported to the caller as 400) ---


class ProfileNotFoundError(ProfileServiceError):
    """No profile exists for the owner."""

    code = "NOT_FOUND"
    http_status = status.HTTP_400_BAD_REQUEST

    def __init__(self, owner_id: object, message: str = "There is no profile for this user"):
        super().__init__(message)
        self.owner_id = owner_id


class InvalidReferenceError(ProfileNotFoundError):
    """Owner id is not a well-formed identity reference."""

    def __init__(self, raw_owner_id: str):
        super().__init__(raw_owner_id, "Profile not found")


class EntryNotFoundError(ProfileServiceError):
    """No experience/education entry with the given id."""

    code = "NOT_FOUND"
    http_status = status.HTTP_400_BAD_REQUEST

    def __init__(self, kind: str, entry_id: str):
        super().__init__(f"{kind.capitalize()} entry not found")
        self.kind = kind
        self.entry_id = entry_id


# --- Store ---


class DuplicateProfileError(ProfileServiceError):
    """A concurrent create already inserted a profile for this owner."""

    code = "CONFLICT"
    http_status = status.HTTP_409_CONFLICT

    def __init__(self, owner_id: object):
        super().__init__("A profile already exists for this user")
        self.owner_id = owner_id


class StoreError(ProfileServiceError):
    """Persistence failure. Detail is logged, never returned."""

    def __init__(self, operation: str):
        super().__init__("Server error")
        self.operation = operation


class IdentityDeleteFailedError(ProfileServiceError):
    """Profile was removed but the identity record could not be."""

    code = "IDENTITY_DELETE_FAILED"

    def __init__(self, owner_id: object):
        super().__init__("Profile removed but the account could not be deleted")
        self.owner_id = owner_id


# --- GitHub (no distinct upstream status is exposed) ---


class GitHubLookupError(ProfileServiceError):
    """Base for GitHub repository lookup failures."""

    code = "NOT_FOUND"
    http_status = status.HTTP_404_NOT_FOUND

    def __init__(self, username: str):
        super().__init__("No Github profile found")
        self.username = username


class UpstreamUnavailableError(GitHubLookupError):
    """GitHub answered with a non-success status."""

    def __init__(self, username: str, upstream_status: int):
        super().__init__(username)
        self.upstream_status = upstream_status


class UpstreamError(GitHubLookupError):
    """GitHub could not be reached."""
