"""Supabase-backed food log repository."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from supabase import Client

from pixel_cat_calories.domain.models import FoodItem, FoodLogEntry
from pixel_cat_calories.services.food_log import FoodLogRepository

_COLUMNS = "id, profile_id, logged_at, image_url, detected_foods, total_calories"


@dataclass
class SupabaseFoodLogRepository(FoodLogRepository):
    """Supabase implementation for food log entries."""

    client: Client

    def create_entry(  # noqa: PLR0913
        self,
        profile_id: UUID,
        logged_at: datetime,
        image_url: str,
        detected_foods: list[FoodItem],
        total_calories: float,
    ) -> FoodLogEntry:
        """Insert a food log entry and return it."""
        response = (
            self.client.table("food_log_entries")
            .insert(
                {
                    "profile_id": str(profile_id),
                    "logged_at": logged_at.isoformat(),
                    "image_url": image_url,
                    "detected_foods": [
                        {
                            "name": food.name,
                            "calories": food.calories,
                            "protein": food.protein_g,
                            "carbs": food.carbs_g,
                            "fat": food.fat_g,
                        }
                        for food in detected_foods
                    ],
                    "total_calories": total_calories,
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create food log entry")
        return _parse_row(response.data[0])

    def list_entries(self, profile_id: UUID, limit: int) -> list[FoodLogEntry]:
        """Return recent entries, newest first."""
        response = (
            self.client.table("food_log_entries")
            .select(_COLUMNS)
            .eq("profile_id", str(profile_id))
            .order("logged_at", desc=True)
            .limit(limit)
            .execute()
        )
        return [_parse_row(row) for row in response.data or []]


def _parse_row(row: dict[str, object]) -> FoodLogEntry:
    foods_raw = row.get("detected_foods")
    foods = tuple(
        FoodItem(
            name=str(food.get("name", "")),
            calories=float(food.get("calories", 0.0)),
            protein_g=float(food.get("protein", 0.0)),
            carbs_g=float(food.get("carbs", 0.0)),
            fat_g=float(food.get("fat", 0.0)),
        )
        for food in (foods_raw if isinstance(foods_raw, list) else [])
    )
    return FoodLogEntry(
        id=UUID(str(row["id"])),
        profile_id=UUID(str(row["profile_id"])),
        logged_at=datetime.fromisoformat(str(row["logged_at"])),
        image_url=str(row.get("image_url") or ""),
        detected_foods=foods,
        total_calories=float(row.get("total_calories", 0.0)),
    )
