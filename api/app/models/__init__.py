"""Database models for the DevConnector API."""

from app.models.profile import Profile
from app.models.user import User

__all__ = [
    "User",
    "Profile",
]
