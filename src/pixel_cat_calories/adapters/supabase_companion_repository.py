"""Supabase-backed companion catalog repository."""

from collections.abc import Iterable
from dataclasses import dataclass
from uuid import UUID

from supabase import Client

from pixel_cat_calories.domain.models import BmiCategory, Companion, UnlockCriteria
from pixel_cat_calories.services.unlocks import CompanionRepository

_COLUMNS = (
    "id, name, is_default, unlock_criteria, asset_url, generation_prompt, body_type"
)


@dataclass
class SupabaseCompanionRepository(CompanionRepository):
    """Supabase implementation for the companion catalog."""

    client: Client

    def list_catalog(self) -> list[Companion]:
        """Return all non-default companions."""
        response = (
            self.client.table("companions")
            .select(_COLUMNS)
            .eq("is_default", False)
            .order("name", desc=False)
            .execute()
        )
        return [parse_companion(row) for row in response.data or []]

    def get_companions(self, companion_ids: Iterable[UUID]) -> list[Companion]:
        """Return companions by id."""
        ids = [str(companion_id) for companion_id in companion_ids]
        if not ids:
            return []
        response = (
            self.client.table("companions").select(_COLUMNS).in_("id", ids).execute()
        )
        return [parse_companion(row) for row in response.data or []]

    def create_companion(self, companion: Companion) -> Companion:
        """Insert a companion row and return it."""
        response = (
            self.client.table("companions")
            .insert(
                {
                    "id": str(companion.id),
                    "name": companion.name,
                    "is_default": companion.is_default,
                    "unlock_criteria": companion.unlock_criteria.to_dict(),
                    "asset_url": companion.asset_url,
                    "generation_prompt": companion.generation_prompt,
                    "body_type": companion.body_type.value
                    if companion.body_type
                    else None,
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create companion in Supabase")
        return parse_companion(response.data[0])

    def update_asset(self, companion_id: UUID, asset_url: str) -> None:
        """Persist a generated asset URL."""
        self.client.table("companions").update({"asset_url": asset_url}).eq(
            "id", str(companion_id)
        ).execute()

    def delete_companion(self, companion_id: UUID) -> None:
        """Delete a companion row."""
        self.client.table("companions").delete().eq("id", str(companion_id)).execute()


def parse_companion(row: dict[str, object]) -> Companion:
    """Build a companion from a companions row."""
    criteria = row.get("unlock_criteria")
    body_type = row.get("body_type")
    return Companion(
        id=UUID(str(row["id"])),
        name=str(row.get("name") or ""),
        is_default=bool(row.get("is_default")),
        unlock_criteria=UnlockCriteria.from_dict(
            criteria if isinstance(criteria, dict) else None
        ),
        asset_url=row.get("asset_url") or None,
        generation_prompt=str(row.get("generation_prompt") or ""),
        body_type=BmiCategory(body_type) if body_type else None,
    )
