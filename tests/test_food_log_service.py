"""Tests for the meal photo logging service."""

import asyncio
from datetime import UTC, datetime, timedelta
from uuid import uuid4

import pytest

from pixel_cat_calories.domain.errors import ProfileNotFoundError
from pixel_cat_calories.domain.models import Companion
from pixel_cat_calories.services.food_log import FoodLogService
from tests.conftest import (
    InMemoryCompanionRepository,
    InMemoryProfileRepository,
    make_companion,
    make_profile,
)

JPEG_BYTES = b"\xff\xd8\xff\xe0fake-jpeg"
PNG_BYTES = b"\x89PNG\r\n\x1a\nfake-png"


def test_log_food_stores_entry_and_updates_progress(
    food_log_service: FoodLogService,
    profile_repository: InMemoryProfileRepository,
) -> None:
    profile = profile_repository.add(make_profile(total_lifetime_calories=1000.0))
    now = datetime(2024, 6, 1, 12, tzinfo=UTC)

    result = asyncio.run(food_log_service.log_food(profile.id, JPEG_BYTES, now))

    assert result.entry.total_calories == 445
    assert [food.name for food in result.entry.detected_foods] == ["Burger", "Apple"]
    assert result.entry.detected_foods[0].protein_g == 20
    assert result.entry.image_url == (
        f"https://storage.test/food-logs/{profile.id}/food-"
        f"{int(now.timestamp() * 1000)}.jpg"
    )
    assert result.view.profile.current_calories_today == 445
    assert result.view.profile.total_lifetime_calories == 1445
    assert profile_repository.profiles[profile.id].calories_updated_at == now


def test_log_food_uses_detected_content_type(
    food_log_service: FoodLogService,
    profile_repository: InMemoryProfileRepository,
) -> None:
    profile = profile_repository.add(make_profile())

    asyncio.run(food_log_service.log_food(profile.id, PNG_BYTES))

    objects = food_log_service.storage.objects  # type: ignore[attr-defined]
    [(path, (content, content_type))] = objects.items()
    assert path.endswith(".png")
    assert content == PNG_BYTES
    assert content_type == "image/png"


def test_log_food_unlocks_companions(
    food_log_service: FoodLogService,
    profile_repository: InMemoryProfileRepository,
    companion_repository: InMemoryCompanionRepository,
) -> None:
    biscuit = make_companion("Biscuit", total_calories=5000)
    companion_repository.add(biscuit)
    profile = profile_repository.add(make_profile(total_lifetime_calories=4700.0))

    result = asyncio.run(food_log_service.log_food(profile.id, JPEG_BYTES))

    assert [companion.id for companion in result.view.newly_unlocked] == [biscuit.id]
    assert biscuit.id in profile_repository.profiles[profile.id].unlocked_companion_ids


def test_log_food_unknown_profile_raises(food_log_service: FoodLogService) -> None:
    with pytest.raises(ProfileNotFoundError):
        asyncio.run(food_log_service.log_food(uuid4(), JPEG_BYTES))


def test_list_entries_newest_first(
    food_log_service: FoodLogService,
    profile_repository: InMemoryProfileRepository,
) -> None:
    profile = profile_repository.add(make_profile())
    start = datetime(2024, 6, 1, 8, tzinfo=UTC)
    for offset in range(3):
        asyncio.run(
            food_log_service.log_food(
                profile.id, JPEG_BYTES, start + timedelta(hours=offset)
            )
        )

    entries = food_log_service.list_entries(profile.id, limit=2)

    assert [entry.logged_at for entry in entries] == [
        start + timedelta(hours=2),
        start + timedelta(hours=1),
    ]


def test_log_food_keeps_progress_when_unlock_check_fails(
    food_log_service: FoodLogService,
    profile_repository: InMemoryProfileRepository,
    companion_repository: InMemoryCompanionRepository,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    profile = profile_repository.add(make_profile(total_lifetime_calories=1000.0))

    def broken_catalog() -> list[Companion]:
        raise ValueError("'huge' is not a valid BmiCategory")

    monkeypatch.setattr(companion_repository, "list_catalog", broken_catalog)

    result = asyncio.run(food_log_service.log_food(profile.id, JPEG_BYTES))

    stored = profile_repository.profiles[profile.id]
    assert stored.total_lifetime_calories == 1445
    assert stored.current_calories_today == 445
    assert result.view.newly_unlocked == []
    assert result.view.next_goal is None
    assert len(food_log_service.list_entries(profile.id)) == 1


def test_log_food_save_failure_is_raised(
    food_log_service: FoodLogService,
    profile_repository: InMemoryProfileRepository,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    profile = profile_repository.add(make_profile())

    def fail_save(*_args: object) -> None:
        raise RuntimeError("database unavailable")

    monkeypatch.setattr(profile_repository, "save_profile", fail_save)

    with pytest.raises(RuntimeError, match="database unavailable"):
        asyncio.run(food_log_service.log_food(profile.id, JPEG_BYTES))
