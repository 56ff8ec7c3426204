"""Persistence access for the DevConnector API."""

from app.repositories.profiles import ProfileRepository

__all__ = ["ProfileRepository"]
