"""Models for food recognition results."""

from pydantic import BaseModel, Field


class DetectedFood(BaseModel):
    """Single food recognised in a meal photo."""

    name: str
    calories: float = Field(ge=0.0)
    protein: float = Field(default=0.0, ge=0.0)
    carbs: float = Field(default=0.0, ge=0.0)
    fat: float = Field(default=0.0, ge=0.0)


class FoodRecognition(BaseModel):
    """Structured output for food recognition."""

    detected_foods: list[DetectedFood]

    @property
    def total_calories(self) -> float:
        """Sum of calories across detected foods."""
        return sum(food.calories for food in self.detected_foods)
