"""ClickyKids engine errors."""

from __future__ import annotations


class ClickyKidsError(Exception):
    """Base exception for the progress engine."""


class StoreError(ClickyKidsError):
    """Persistent store read or write failed."""

    def __init__(self, key: str, message: str):
        """Initialize error with the store key that failed."""
        super().__init__(f"{key}: {message}")
        self.key = key
        self.message = message


class ProfileNotFoundError(ClickyKidsError, KeyError):
    """Profile id is not known to the registry."""

    def __init__(self, profile_id: str):
        """Initialize error with the missing profile id."""
        super().__init__(profile_id)
        self.profile_id = profile_id

    def __str__(self) -> str:
        return f"Unknown profile: {self.profile_id}"


class InvalidPinError(ClickyKidsError, ValueError):
    """Parent PIN is not exactly four digits."""
