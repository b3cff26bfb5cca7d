"""Supabase-backed profile repository."""

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from supabase import Client

from pixel_cat_calories.domain.models import Gender, Profile
from pixel_cat_calories.services.profiles import ProfileRepository

_COLUMNS = (
    "id, name, age, gender, height_cm, weight_kg, bmi, goals, "
    "daily_calorie_target, current_calories_today, total_lifetime_calories, "
    "active_companion_id, calories_updated_at, profile_companions(companion_id)"
)


@dataclass
class SupabaseProfileRepository(ProfileRepository):
    """Supabase implementation for profile persistence."""

    client: Client

    def get_profile(self, profile_id: UUID) -> Profile | None:
        """Return a profile with its unlocked companion ids."""
        response = (
            self.client.table("profiles")
            .select(_COLUMNS)
            .eq("id", str(profile_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_row(response.data[0])

    def save_profile(
        self, profile: Profile, new_companion_ids: Sequence[UUID] = ()
    ) -> None:
        """Write profile fields and unlocks through a single database function."""
        self.client.rpc(
            "record_profile_progress",
            {
                "p_profile_id": str(profile.id),
                "p_fields": _serialize_fields(profile),
                "p_companion_ids": [str(cid) for cid in new_companion_ids],
            },
        ).execute()

    def reset_daily_calories(self, profile_id: UUID, now: datetime) -> None:
        """Reset today's counter only while it is still on an earlier UTC day."""
        self.client.rpc(
            "reset_daily_calories",
            {"p_profile_id": str(profile_id), "p_now": now.isoformat()},
        ).execute()


def _serialize_fields(profile: Profile) -> dict[str, object]:
    return {
        "name": profile.name,
        "age": profile.age,
        "gender": profile.gender.value if profile.gender else None,
        "height_cm": profile.height_cm,
        "weight_kg": profile.weight_kg,
        "bmi": profile.bmi,
        "goals": sorted(profile.goals),
        "daily_calorie_target": profile.daily_calorie_target,
        "current_calories_today": profile.current_calories_today,
        "total_lifetime_calories": profile.total_lifetime_calories,
        "active_companion_id": str(profile.active_companion_id)
        if profile.active_companion_id
        else None,
        "calories_updated_at": profile.calories_updated_at.isoformat()
        if profile.calories_updated_at
        else None,
    }


def _parse_row(row: dict[str, object]) -> Profile:
    links = row.get("profile_companions")
    unlocked = frozenset(
        UUID(str(link["companion_id"]))
        for link in (links if isinstance(links, list) else [])
    )
    gender = row.get("gender")
    active = row.get("active_companion_id")
    updated_raw = row.get("calories_updated_at")
    goals = row.get("goals")
    return Profile(
        id=UUID(str(row["id"])),
        name=row.get("name"),
        age=int(row["age"]) if row.get("age") is not None else None,
        gender=Gender(gender) if gender else None,
        height_cm=float(row.get("height_cm") or 0.0),
        weight_kg=float(row.get("weight_kg") or 0.0),
        bmi=float(row.get("bmi") or 0.0),
        goals=frozenset(goals) if isinstance(goals, list) else frozenset(),
        daily_calorie_target=int(row.get("daily_calorie_target") or 0),
        current_calories_today=float(row.get("current_calories_today") or 0.0),
        total_lifetime_calories=float(row.get("total_lifetime_calories") or 0.0),
        active_companion_id=UUID(str(active)) if active else None,
        unlocked_companion_ids=unlocked,
        calories_updated_at=datetime.fromisoformat(updated_raw)
        if isinstance(updated_raw, str) and updated_raw
        else None,
    )
