"""Authentication utilities for the DevConnector API."""

from app.auth.dependencies import get_current_user_id
from app.auth.jwt import create_access_token, decode_token

__all__ = [
    "get_current_user_id",
    "create_access_token",
    "decode_token",
]
