"""Domain errors raised by application services."""

from dataclasses import dataclass


class ProfileNotFoundError(Exception):
    """Raised when a profile id does not resolve to a stored profile."""


class AlreadyOnboardedError(Exception):
    """Raised when onboarding is requested for a profile with a starter cat."""


class CompanionNotUnlockedError(Exception):
    """Raised when activating a companion the profile does not own."""


class AccountExistsError(Exception):
    """Raised when registering an email that is already taken."""


@dataclass
class AuthError(Exception):
    """Raised when credentials or a session token are rejected."""

    message: str
    status_code: int = 401

    def __str__(self) -> str:
        return self.message
