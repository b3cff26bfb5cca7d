"""Food recognition service using LLM vision."""

import base64
from dataclasses import dataclass
from typing import Protocol

from pixel_cat_calories.domain.vision import FoodRecognition

FOOD_SCHEMA: dict[str, object] = {
    "type": "object",
    "properties": {
        "detected_foods": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "name": {"type": "string"},
                    "calories": {"type": "number", "minimum": 0.0},
                    "protein": {"type": "number", "minimum": 0.0},
                    "carbs": {"type": "number", "minimum": 0.0},
                    "fat": {"type": "number", "minimum": 0.0},
                },
                "required": ["name", "calories", "protein", "carbs", "fat"],
                "additionalProperties": False,
            },
        }
    },
    "required": ["detected_foods"],
    "additionalProperties": False,
}

FOOD_PROMPT = (
    "Identify each food item in this meal photo. "
    "For every item return a short name and your best estimate of the "
    "portion's calories (kcal) and grams of protein, carbs and fat. "
    "Return an empty list if the photo shows no food."
)


class VisionClient(Protocol):
    """Interface for LLM vision extraction."""

    async def extract(  # noqa: PLR0913
        self,
        *,
        model: str,
        reasoning_effort: str | None,
        store: bool,
        image_data_url: str,
        schema: dict[str, object],
        prompt: str,
    ) -> dict[str, object]:
        """Return structured vision extraction data."""


@dataclass
class FoodRecognitionService:
    """Turns meal photos into detected foods and a calorie total."""

    client: VisionClient
    model: str
    reasoning_effort: str | None
    store: bool

    async def recognize(self, image_bytes: bytes) -> FoodRecognition:
        """Detect foods in an image via the configured client."""
        raw = await self.client.extract(
            model=self.model,
            reasoning_effort=self.reasoning_effort,
            store=self.store,
            image_data_url=_to_data_url(image_bytes),
            schema=FOOD_SCHEMA,
            prompt=FOOD_PROMPT,
        )
        return FoodRecognition.model_validate(raw)


def _to_data_url(image_bytes: bytes) -> str:
    """Convert bytes to a base64 data URL for image input."""
    encoded = base64.b64encode(image_bytes).decode("utf-8")
    return f"data:{detect_mime_type(image_bytes)};base64,{encoded}"


def detect_mime_type(image_bytes: bytes) -> str:
    """Infer a basic image MIME type from file signatures."""
    if image_bytes.startswith(b"\xff\xd8\xff"):
        return "image/jpeg"
    if image_bytes.startswith(b"\x89PNG\r\n\x1a\n"):
        return "image/png"
    if image_bytes[:4] == b"RIFF" and image_bytes[8:12] == b"WEBP":
        return "image/webp"
    return "image/jpeg"
