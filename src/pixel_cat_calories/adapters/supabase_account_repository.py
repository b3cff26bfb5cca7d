"""Supabase-backed account repository."""

from dataclasses import dataclass
from uuid import UUID

from supabase import Client

from pixel_cat_calories.domain.models import AccountRecord
from pixel_cat_calories.services.accounts import AccountRepository


@dataclass
class SupabaseAccountRepository(AccountRepository):
    """Supabase implementation for login credentials."""

    client: Client

    def get_by_email(self, email: str) -> AccountRecord | None:
        """Return the account for an email, if present."""
        response = (
            self.client.table("profiles")
            .select("id, email, password_hash")
            .eq("email", email)
            .limit(1)
            .execute()
        )
        if response.data:
            return _parse_row(response.data[0])
        return None

    def create_account(self, email: str, password_hash: str) -> AccountRecord:
        """Create a profile row holding the credentials."""
        response = (
            self.client.table("profiles")
            .insert(
                {
                    "email": email,
                    "password_hash": password_hash,
                    "goals": [],
                    "current_calories_today": 0,
                    "total_lifetime_calories": 0,
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create account in Supabase")
        return _parse_row(response.data[0])


def _parse_row(row: dict[str, object]) -> AccountRecord:
    return AccountRecord(
        id=UUID(str(row["id"])),
        email=str(row["email"]),
        password_hash=str(row["password_hash"]),
    )
