"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import timedelta

from supabase import create_client

from pixel_cat_calories.adapters.openai_vision_client import OpenAIVisionClient
from pixel_cat_calories.adapters.replicate_client import (
    ReplicateAssetGenerator,
    ReplicateClient,
)
from pixel_cat_calories.adapters.supabase_account_repository import (
    SupabaseAccountRepository,
)
from pixel_cat_calories.adapters.supabase_companion_repository import (
    SupabaseCompanionRepository,
)
from pixel_cat_calories.adapters.supabase_food_log_repository import (
    SupabaseFoodLogRepository,
)
from pixel_cat_calories.adapters.supabase_image_storage import SupabaseImageStorage
from pixel_cat_calories.adapters.supabase_profile_repository import (
    SupabaseProfileRepository,
)
from pixel_cat_calories.config import Settings
from pixel_cat_calories.services.accounts import AccountService
from pixel_cat_calories.services.assets import CompanionArtService
from pixel_cat_calories.services.food_log import FoodLogService
from pixel_cat_calories.services.profiles import ProfileService
from pixel_cat_calories.services.unlocks import UnlockService
from pixel_cat_calories.services.vision import FoodRecognitionService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    account_service: AccountService
    profile_service: ProfileService
    food_log_service: FoodLogService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    companion_repository = SupabaseCompanionRepository(supabase_client)
    replicate_client = ReplicateClient.create(
        api_token=resolved_settings.replicate_api_token,
        base_url=resolved_settings.replicate_base_url,
        poll_interval_seconds=resolved_settings.replicate_poll_interval_seconds,
        max_polls=resolved_settings.replicate_max_polls,
    )
    art_service = CompanionArtService(
        generator=ReplicateAssetGenerator(
            client=replicate_client,
            image_model=resolved_settings.replicate_image_model,
            video_model=resolved_settings.replicate_video_model,
        ),
        animate=resolved_settings.companion_animation_enabled,
    )
    unlock_service = UnlockService(
        repository=companion_repository,
        art_service=art_service,
    )
    profile_service = ProfileService(
        repository=SupabaseProfileRepository(supabase_client),
        companion_repository=companion_repository,
        unlock_service=unlock_service,
        art_service=art_service,
        fallback_asset_url=resolved_settings.fallback_companion_asset,
    )
    recognition_service = FoodRecognitionService(
        client=OpenAIVisionClient.create(
            resolved_settings.openai_api_key,
            image_detail=resolved_settings.openai_image_detail,
        ),
        model=resolved_settings.openai_model,
        reasoning_effort=resolved_settings.openai_reasoning_effort,
        store=resolved_settings.openai_store,
    )
    food_log_service = FoodLogService(
        repository=SupabaseFoodLogRepository(supabase_client),
        storage=SupabaseImageStorage(
            supabase_client, resolved_settings.supabase_storage_bucket
        ),
        recognition_service=recognition_service,
        profile_service=profile_service,
    )
    account_service = AccountService(
        repository=SupabaseAccountRepository(supabase_client),
        jwt_secret=resolved_settings.jwt_secret,
        jwt_algorithm=resolved_settings.jwt_algorithm,
        token_ttl=timedelta(minutes=resolved_settings.jwt_ttl_minutes),
    )

    async def close_resources() -> None:
        await replicate_client.close()

    return AppContainer(
        settings=resolved_settings,
        account_service=account_service,
        profile_service=profile_service,
        food_log_service=food_log_service,
        close_resources=close_resources,
    )
