"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from uuid import UUID

from fastapi import Depends, FastAPI, File, HTTPException, Request, UploadFile, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from pixel_cat_calories.api.auth import require_profile_id
from pixel_cat_calories.api.auth import router as auth_router
from pixel_cat_calories.api.schemas import (
    ActiveCompanionRequest,
    OnboardRequest,
    UpdateStatsRequest,
)
from pixel_cat_calories.app_logging import configure_logging
from pixel_cat_calories.config import parse_cors_origins
from pixel_cat_calories.containers import AppContainer
from pixel_cat_calories.domain.errors import (
    AlreadyOnboardedError,
    CompanionNotUnlockedError,
    ProfileNotFoundError,
)
from pixel_cat_calories.domain.metrics import profile_bmi_category
from pixel_cat_calories.domain.models import Companion, FoodLogEntry, Profile
from pixel_cat_calories.services.profiles import CompanionListing, ProfileView


def create_app(container: AppContainer) -> FastAPI:  # noqa: PLR0915
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        try:
            await app.state.container.close_resources()
        except Exception:
            logger.exception("Failed to close application resources")

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    origins = parse_cors_origins(container.settings.cors_origins)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=origins != ["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.include_router(auth_router)

    @app.exception_handler(ProfileNotFoundError)
    async def profile_not_found(
        request: Request, exc: ProfileNotFoundError
    ) -> JSONResponse:
        return JSONResponse(status_code=404, content={"detail": "User not found."})

    @app.exception_handler(AlreadyOnboardedError)
    async def already_onboarded(
        request: Request, exc: AlreadyOnboardedError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=409, content={"detail": "User already onboarded."}
        )

    @app.exception_handler(CompanionNotUnlockedError)
    async def companion_not_unlocked(
        request: Request, exc: CompanionNotUnlockedError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=403, content={"detail": "Companion is not unlocked yet."}
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post("/api/user/onboard")
    async def onboard(
        payload: OnboardRequest,
        request: Request,
        profile_id: UUID = Depends(require_profile_id),
    ) -> dict[str, object]:
        """Store biometrics and goals and create the starter companion."""
        state_container: AppContainer = request.app.state.container
        view = await state_container.profile_service.onboard(
            profile_id,
            name=payload.name,
            age=payload.age,
            gender=payload.gender,
            height_cm=payload.height_cm,
            weight_kg=payload.weight_kg,
            goals=[goal.value for goal in payload.goals],
        )
        return {"message": "Onboarding complete!", **_serialize_view(view)}

    @app.get("/api/user/profile")
    async def get_profile(
        request: Request, profile_id: UUID = Depends(require_profile_id)
    ) -> dict[str, object]:
        """Return the profile after the daily reset check."""
        state_container: AppContainer = request.app.state.container
        view = state_container.profile_service.get_profile(profile_id)
        return _serialize_view(view)

    @app.put("/api/user/profile")
    async def set_active_companion(
        payload: ActiveCompanionRequest,
        request: Request,
        profile_id: UUID = Depends(require_profile_id),
    ) -> dict[str, object]:
        """Change the companion shown on the dashboard."""
        state_container: AppContainer = request.app.state.container
        view = state_container.profile_service.set_active_companion(
            profile_id, payload.active_companion_id
        )
        return {"message": "User profile updated.", **_serialize_view(view)}

    @app.put("/api/user/profile/stats")
    async def update_stats(
        payload: UpdateStatsRequest,
        request: Request,
        profile_id: UUID = Depends(require_profile_id),
    ) -> dict[str, object]:
        """Update weight and goals."""
        state_container: AppContainer = request.app.state.container
        view = await state_container.profile_service.update_stats(
            profile_id, payload.weight_kg, [goal.value for goal in payload.goals]
        )
        return {"message": "User stats updated successfully.", **_serialize_view(view)}

    @app.get("/api/companions")
    async def list_companions(
        request: Request, profile_id: UUID = Depends(require_profile_id)
    ) -> dict[str, object]:
        """Return the companion collection for the profile."""
        state_container: AppContainer = request.app.state.container
        listings = state_container.profile_service.list_companions(profile_id)
        return {"companions": [_serialize_listing(listing) for listing in listings]}

    @app.post("/api/food/upload")
    async def upload_food(
        request: Request,
        food_image: UploadFile | None = File(default=None, alias="foodImage"),
        profile_id: UUID = Depends(require_profile_id),
    ) -> dict[str, object]:
        """Analyse a meal photo, log it and update calorie progress."""
        state_container: AppContainer = request.app.state.container
        image_bytes = await food_image.read() if food_image else b""
        if not image_bytes:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="No image file uploaded.",
            )
        try:
            result = await state_container.food_log_service.log_food(
                profile_id, image_bytes
            )
        except ProfileNotFoundError:
            raise
        except Exception as exc:
            logger.exception(
                "Food upload failed", extra={"profile_id": str(profile_id)}
            )
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=_format_error(
                    state_container, exc, "Failed to process food image."
                ),
            ) from exc
        return {
            "message": "Food analyzed and logged successfully!",
            "food_log": _serialize_food_log(result.entry),
            **_serialize_view(result.view),
        }

    @app.get("/api/food/logs")
    async def list_food_logs(
        request: Request,
        limit: int = 20,
        profile_id: UUID = Depends(require_profile_id),
    ) -> dict[str, object]:
        """Return recent food log entries."""
        state_container: AppContainer = request.app.state.container
        entries = state_container.food_log_service.list_entries(
            profile_id, max(1, min(limit, 100))
        )
        return {"food_logs": [_serialize_food_log(entry) for entry in entries]}

    return app


def _format_error(state_container: AppContainer, exc: Exception, fallback: str) -> str:
    """Return a user-facing error message with local debug info."""
    if state_container.settings.environment == "local":
        detail = f"{type(exc).__name__}: {exc}".strip()
        if detail:
            return f"{fallback} (debug: {detail})"
    return fallback


def _serialize_view(view: ProfileView) -> dict[str, object]:
    return {
        "user": _serialize_profile(view.profile),
        "active_companion": _serialize_companion(view.active_companion),
        "unlocked_companions": [
            _serialize_companion(companion) for companion in view.unlocked_companions
        ],
        "next_unlock": _serialize_companion(view.next_goal),
        "newly_unlocked": [
            _serialize_companion(companion) for companion in view.newly_unlocked
        ],
    }


def _serialize_profile(profile: Profile) -> dict[str, object]:
    category = profile_bmi_category(profile)
    return {
        "id": str(profile.id),
        "name": profile.name,
        "age": profile.age,
        "gender": profile.gender.value if profile.gender else None,
        "height_cm": profile.height_cm,
        "weight_kg": profile.weight_kg,
        "bmi": profile.bmi,
        "bmi_category": category.value if category else None,
        "goals": sorted(profile.goals),
        "daily_calorie_target": profile.daily_calorie_target,
        "current_calories_today": profile.current_calories_today,
        "total_lifetime_calories": profile.total_lifetime_calories,
        "active_companion_id": str(profile.active_companion_id)
        if profile.active_companion_id
        else None,
        "calories_updated_at": profile.calories_updated_at.isoformat()
        if profile.calories_updated_at
        else None,
    }


def _serialize_companion(companion: Companion | None) -> dict[str, object] | None:
    if companion is None:
        return None
    return {
        "id": str(companion.id),
        "name": companion.name,
        "is_default": companion.is_default,
        "unlock_criteria": companion.unlock_criteria.to_dict(),
        "asset_url": companion.asset_url,
        "body_type": companion.body_type.value if companion.body_type else None,
    }


def _serialize_listing(listing: CompanionListing) -> dict[str, object]:
    return {
        **(_serialize_companion(listing.companion) or {}),
        "unlocked": listing.unlocked,
        "active": listing.active,
    }


def _serialize_food_log(entry: FoodLogEntry) -> dict[str, object]:
    return {
        "id": str(entry.id),
        "logged_at": entry.logged_at.isoformat(),
        "image_url": entry.image_url,
        "detected_foods": [
            {
                "name": food.name,
                "calories": food.calories,
                "protein": food.protein_g,
                "carbs": food.carbs_g,
                "fat": food.fat_g,
            }
            for food in entry.detected_foods
        ],
        "total_calories": entry.total_calories,
    }
