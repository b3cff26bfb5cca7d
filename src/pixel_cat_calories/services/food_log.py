"""Meal photo logging service."""

import logging
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Protocol
from uuid import UUID

from pixel_cat_calories.domain.models import FoodItem, FoodLogEntry
from pixel_cat_calories.services.profiles import ProfileService, ProfileView
from pixel_cat_calories.services.vision import FoodRecognitionService, detect_mime_type

_logger = logging.getLogger(__name__)

_EXTENSIONS = {"image/jpeg": "jpg", "image/png": "png", "image/webp": "webp"}


class FoodLogRepository(Protocol):
    """Persistence interface for food log entries."""

    def create_entry(  # noqa: PLR0913
        self,
        profile_id: UUID,
        logged_at: datetime,
        image_url: str,
        detected_foods: list[FoodItem],
        total_calories: float,
    ) -> FoodLogEntry:
        """Insert a food log entry and return it."""

    def list_entries(self, profile_id: UUID, limit: int) -> list[FoodLogEntry]:
        """Return the most recent entries for a profile."""


class ImageStorage(Protocol):
    """Interface for storing uploaded meal photos."""

    def upload(self, path: str, content: bytes, content_type: str) -> str:
        """Store bytes at a path and return a public URL."""


@dataclass
class FoodLogResult:
    """Outcome of a meal photo upload."""

    entry: FoodLogEntry
    view: ProfileView


@dataclass
class FoodLogService:
    """Stores meal photos, recognises food and feeds calorie progress."""

    repository: FoodLogRepository
    storage: ImageStorage
    recognition_service: FoodRecognitionService
    profile_service: ProfileService

    async def log_food(
        self, profile_id: UUID, image_bytes: bytes, now: datetime | None = None
    ) -> FoodLogResult:
        """Log one meal photo and return the entry and updated profile."""
        moment = now or datetime.now(tz=UTC)
        content_type = detect_mime_type(image_bytes)
        path = (
            f"food-logs/{profile_id}/food-{int(moment.timestamp() * 1000)}"
            f".{_EXTENSIONS[content_type]}"
        )
        image_url = self.storage.upload(path, image_bytes, content_type)

        recognition = await self.recognition_service.recognize(image_bytes)
        foods = [
            FoodItem(
                name=food.name,
                calories=food.calories,
                protein_g=food.protein,
                carbs_g=food.carbs,
                fat_g=food.fat,
            )
            for food in recognition.detected_foods
        ]
        entry = self.repository.create_entry(
            profile_id=profile_id,
            logged_at=moment,
            image_url=image_url,
            detected_foods=foods,
            total_calories=recognition.total_calories,
        )
        _logger.info(
            "Food logged: profile=%s foods=%s calories=%s",
            profile_id,
            len(foods),
            entry.total_calories,
        )
        view = await self.profile_service.record_calories(
            profile_id, entry.total_calories, moment
        )
        return FoodLogResult(entry=entry, view=view)

    def list_entries(self, profile_id: UUID, limit: int = 20) -> list[FoodLogEntry]:
        """Return recent food log entries."""
        return self.repository.list_entries(profile_id, limit)
