"""Tests for food recognition."""

import asyncio

import pytest
from pydantic import ValidationError

from pixel_cat_calories.services.vision import (
    FOOD_PROMPT,
    FoodRecognitionService,
    _to_data_url,
    detect_mime_type,
)
from tests.conftest import FakeVisionClient


def _service(client: FakeVisionClient) -> FoodRecognitionService:
    return FoodRecognitionService(
        client=client,
        model="gpt-5.2",
        reasoning_effort="low",
        store=False,
    )


def test_recognition_returns_foods_and_total() -> None:
    client = FakeVisionClient()

    result = asyncio.run(_service(client).recognize(b"image-bytes"))

    assert [food.name for food in result.detected_foods] == ["Burger", "Apple"]
    assert result.total_calories == 445
    assert client.prompts == [FOOD_PROMPT]


def test_recognition_with_no_food_totals_zero() -> None:
    client = FakeVisionClient(payload={"detected_foods": []})

    result = asyncio.run(_service(client).recognize(b"image-bytes"))

    assert result.total_calories == 0


def test_recognition_rejects_negative_calories() -> None:
    client = FakeVisionClient(
        payload={"detected_foods": [{"name": "Soup", "calories": -5}]}
    )

    with pytest.raises(ValidationError):
        asyncio.run(_service(client).recognize(b"image-bytes"))


def test_to_data_url_uses_png_header() -> None:
    data = b"\x89PNG\r\n\x1a\n" + b"rest"
    url = _to_data_url(data)

    assert url.startswith("data:image/png;base64,")


def test_to_data_url_defaults_to_jpeg() -> None:
    data = b"unknown"
    url = _to_data_url(data)

    assert url.startswith("data:image/jpeg;base64,")


def test_detect_mime_type_webp() -> None:
    assert detect_mime_type(b"RIFF\x00\x00\x00\x00WEBPVP8 ") == "image/webp"
