"""Tests for configuration helpers."""

from pixel_cat_calories.config import Settings, parse_cors_origins


def test_parse_cors_origins_defaults_to_wildcard() -> None:
    assert parse_cors_origins(None) == ["*"]
    assert parse_cors_origins("") == ["*"]
    assert parse_cors_origins(" * ") == ["*"]


def test_parse_cors_origins_splits_list() -> None:
    assert parse_cors_origins("https://a.test, https://b.test,") == [
        "https://a.test",
        "https://b.test",
    ]


def test_settings_defaults(settings: Settings) -> None:
    assert settings.jwt_algorithm == "HS256"
    assert settings.supabase_storage_bucket == "food-logs"
    assert settings.replicate_image_model.startswith("lucataco/pixart-xl-2:")
    assert settings.fallback_companion_asset == "/cats/cat-normal.png"
