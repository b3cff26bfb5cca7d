"""Account registration and login."""

from dataclasses import dataclass
from datetime import timedelta
from typing import Protocol

from pixel_cat_calories.domain.errors import AccountExistsError, AuthError
from pixel_cat_calories.domain.models import AccountRecord
from pixel_cat_calories.security import (
    create_access_token,
    hash_password,
    verify_password,
)


class AccountRepository(Protocol):
    """Persistence interface for login credentials."""

    def get_by_email(self, email: str) -> AccountRecord | None:
        """Return the account for an email, if present."""

    def create_account(self, email: str, password_hash: str) -> AccountRecord:
        """Create an account with an empty profile and return it."""


@dataclass
class AccountService:
    """Application service for credentials and session tokens."""

    repository: AccountRepository
    jwt_secret: str
    jwt_algorithm: str = "HS256"
    token_ttl: timedelta = timedelta(days=30)

    def register(self, email: str, password: str) -> AccountRecord:
        """Create a new account for an unused email."""
        normalized = email.strip().lower()
        if self.repository.get_by_email(normalized):
            raise AccountExistsError(normalized)
        return self.repository.create_account(normalized, hash_password(password))

    def login(self, email: str, password: str) -> str:
        """Return a session token for valid credentials."""
        account = self.repository.get_by_email(email.strip().lower())
        if account is None or not verify_password(password, account.password_hash):
            raise AuthError("Invalid email or password.")
        return create_access_token(
            account.id,
            account.email,
            secret=self.jwt_secret,
            algorithm=self.jwt_algorithm,
            ttl=self.token_ttl,
        )
