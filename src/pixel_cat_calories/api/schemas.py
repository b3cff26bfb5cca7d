"""Pydantic request models for the HTTP API."""

from uuid import UUID

from pydantic import BaseModel, Field

from pixel_cat_calories.domain.models import Gender, Goal


class RegisterRequest(BaseModel):
    """Registration payload."""

    email: str = Field(min_length=3, pattern=r"^[^@\s]+@[^@\s]+$")
    password: str = Field(min_length=8, max_length=72)


class LoginRequest(BaseModel):
    """Login payload."""

    email: str
    password: str


class OnboardRequest(BaseModel):
    """Biometrics and goals collected during onboarding."""

    name: str = Field(min_length=1)
    age: int = Field(gt=0, lt=130)
    gender: Gender
    height_cm: float = Field(gt=0)
    weight_kg: float = Field(gt=0)
    goals: list[Goal]


class UpdateStatsRequest(BaseModel):
    """Weight and goal changes after onboarding."""

    weight_kg: float = Field(gt=0)
    goals: list[Goal]


class ActiveCompanionRequest(BaseModel):
    """Companion to display on the dashboard."""

    active_companion_id: UUID
