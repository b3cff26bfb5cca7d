"""Domain models for profiles and companions."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from uuid import UUID


class Gender(StrEnum):
    """Biological sex used by the BMR formula."""

    MALE = "male"
    FEMALE = "female"
    OTHER = "other"


class BmiCategory(StrEnum):
    """Body-mass category derived from BMI."""

    SLIM = "slim"
    NORMAL = "normal"
    FAT = "fat"
    OBESE = "obese"


class Goal(StrEnum):
    """Goal tags a profile can select."""

    BE_SLIMMER = "be slimmer"
    BE_FATTER = "be fatter"
    REDUCE_CARBOHYDRATE = "reduce carbohydrate"
    INCREASE_PROTEIN = "increase protein"
    MAINTAIN_WEIGHT = "maintain weight"


GOAL_VOCABULARY: tuple[str, ...] = tuple(goal.value for goal in Goal)


@dataclass(frozen=True)
class AccountRecord:
    """Login credentials for a profile."""

    id: UUID
    email: str
    password_hash: str


@dataclass(frozen=True)
class UnlockCriteria:
    """Clauses gating a companion; absent clauses do not constrain."""

    total_calories: float | None = None
    goal_match: frozenset[str] = frozenset()
    bmi_target: BmiCategory | None = None

    @classmethod
    def from_dict(cls, raw: dict[str, object] | None) -> "UnlockCriteria":
        """Build criteria from the stored JSON shape."""
        if not raw:
            return cls()
        total = raw.get("totalCalories")
        goals = raw.get("goalMatch")
        bmi_target = raw.get("bmiTarget")
        return cls(
            total_calories=float(total) if isinstance(total, int | float) else None,
            goal_match=frozenset(str(goal) for goal in goals)
            if isinstance(goals, list)
            else frozenset(),
            bmi_target=BmiCategory(bmi_target) if bmi_target else None,
        )

    def to_dict(self) -> dict[str, object]:
        """Return the stored JSON shape, omitting absent clauses."""
        payload: dict[str, object] = {}
        if self.total_calories is not None:
            payload["totalCalories"] = self.total_calories
        if self.goal_match:
            payload["goalMatch"] = sorted(self.goal_match)
        if self.bmi_target is not None:
            payload["bmiTarget"] = self.bmi_target.value
        return payload


@dataclass(frozen=True)
class Companion:
    """A collectible pixel cat."""

    id: UUID
    name: str
    is_default: bool
    unlock_criteria: UnlockCriteria = field(default_factory=UnlockCriteria)
    asset_url: str | None = None
    generation_prompt: str = ""
    body_type: BmiCategory | None = None


@dataclass(frozen=True)
class Profile:
    """Tracked state for a single user."""

    id: UUID
    name: str | None = None
    age: int | None = None
    gender: Gender | None = None
    height_cm: float = 0.0
    weight_kg: float = 0.0
    bmi: float = 0.0
    goals: frozenset[str] = frozenset()
    daily_calorie_target: int = 0
    current_calories_today: float = 0.0
    total_lifetime_calories: float = 0.0
    active_companion_id: UUID | None = None
    unlocked_companion_ids: frozenset[UUID] = frozenset()
    calories_updated_at: datetime | None = None

    @property
    def is_onboarded(self) -> bool:
        """Return True once a starter companion is active."""
        return self.active_companion_id is not None


@dataclass(frozen=True)
class FoodItem:
    """A single detected food with macros."""

    name: str
    calories: float
    protein_g: float
    carbs_g: float
    fat_g: float


@dataclass(frozen=True)
class FoodLogEntry:
    """Immutable record of one meal photo upload."""

    id: UUID
    profile_id: UUID
    logged_at: datetime
    image_url: str
    detected_foods: tuple[FoodItem, ...]
    total_calories: float
