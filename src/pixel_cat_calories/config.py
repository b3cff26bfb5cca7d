"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    supabase_storage_bucket: str = "food-logs"
    jwt_secret: str
    jwt_algorithm: str = "HS256"
    jwt_ttl_minutes: int = 60 * 24 * 30
    openai_api_key: str
    openai_model: str = "gpt-5.2"
    openai_reasoning_effort: str = "low"
    openai_store: bool = False
    openai_image_detail: str = "auto"
    replicate_api_token: str
    replicate_base_url: str = "https://api.replicate.com/v1"
    replicate_image_model: str = (
        "lucataco/pixart-xl-2:"
        "816c99673841b9448bc2539834c16d40e0315bbf92fef0317b57a226727409bb"
    )
    replicate_video_model: str = "minimax/video-01-live"
    replicate_poll_interval_seconds: float = 2.0
    replicate_max_polls: int = 90
    companion_animation_enabled: bool = True
    fallback_companion_asset: str = "/cats/cat-normal.png"
    cors_origins: str = ""
    log_level: str = "INFO"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def parse_cors_origins(raw: str | None) -> list[str]:
    """Parse allowed CORS origins from env; empty or '*' allows all."""
    if raw is None:
        return ["*"]
    cleaned = raw.strip()
    if cleaned in {"", "*"}:
        return ["*"]
    origins = [chunk.strip() for chunk in cleaned.split(",") if chunk.strip()]
    return origins or ["*"]
