"""Profile lifecycle: onboarding, reads, stat edits and calorie progress."""

import logging
import random
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from typing import Protocol
from uuid import UUID, uuid4

from pixel_cat_calories.domain.errors import (
    AlreadyOnboardedError,
    CompanionNotUnlockedError,
    ProfileNotFoundError,
)
from pixel_cat_calories.domain.metrics import (
    categorize_bmi,
    compute_bmi,
    compute_daily_calorie_target,
)
from pixel_cat_calories.domain.models import Companion, Gender, Profile
from pixel_cat_calories.domain.progression import find_next_goal, reset_if_new_day
from pixel_cat_calories.domain.prompts import (
    build_animation_prompt,
    build_companion_prompt,
    starter_companion_name,
)
from pixel_cat_calories.services.assets import CompanionArtService
from pixel_cat_calories.services.unlocks import CompanionRepository, UnlockService

_logger = logging.getLogger(__name__)

DEFAULT_GENDER = Gender.MALE
DEFAULT_AGE = 25


class ProfileRepository(Protocol):
    """Persistence interface for profiles."""

    def get_profile(self, profile_id: UUID) -> Profile | None:
        """Return a profile with its unlocked companion ids, if present."""

    def save_profile(
        self, profile: Profile, new_companion_ids: Sequence[UUID] = ()
    ) -> None:
        """Persist profile fields and add unlocked companions in one transaction."""

    def reset_daily_calories(self, profile_id: UUID, now: datetime) -> None:
        """Zero today's calories if they were last written on an earlier UTC day."""


@dataclass
class ProfileView:
    """Profile state returned to clients."""

    profile: Profile
    active_companion: Companion | None
    unlocked_companions: list[Companion]
    next_goal: Companion | None
    newly_unlocked: list[Companion] = field(default_factory=list)


@dataclass
class CompanionListing:
    """Catalog entry annotated for a single profile."""

    companion: Companion
    unlocked: bool
    active: bool


@dataclass
class ProfileService:
    """Application service for profile state and companion progression."""

    repository: ProfileRepository
    companion_repository: CompanionRepository
    unlock_service: UnlockService
    art_service: CompanionArtService
    fallback_asset_url: str
    rng: random.Random = field(default_factory=random.Random)

    async def onboard(  # noqa: PLR0913
        self,
        profile_id: UUID,
        *,
        name: str,
        age: int,
        gender: Gender,
        height_cm: float,
        weight_kg: float,
        goals: Iterable[str],
    ) -> ProfileView:
        """Store biometrics and goals and hatch the starter companion."""
        profile = self._load(profile_id)
        if profile.is_onboarded:
            raise AlreadyOnboardedError(str(profile_id))

        goal_set = frozenset(goals)
        bmi = compute_bmi(weight_kg, height_cm)
        category = categorize_bmi(bmi)
        target = compute_daily_calorie_target(
            gender, age, height_cm, weight_kg, goal_set
        )
        prompt = build_companion_prompt(category, goal_set, self.rng)
        starter_name = starter_companion_name(category)
        asset_url = await self._render_starter(
            profile_id, prompt, build_animation_prompt(starter_name, goal_set)
        )
        starter = self.companion_repository.create_companion(
            Companion(
                id=uuid4(),
                name=starter_name,
                is_default=True,
                asset_url=asset_url,
                generation_prompt=prompt,
                body_type=category,
            )
        )
        onboarded = replace(
            profile,
            name=name,
            age=age,
            gender=gender,
            height_cm=height_cm,
            weight_kg=weight_kg,
            bmi=bmi,
            goals=goal_set,
            daily_calorie_target=round(target),
            active_companion_id=starter.id,
            unlocked_companion_ids=profile.unlocked_companion_ids | {starter.id},
        )
        try:
            return await self._unlock_and_save(onboarded, [starter.id])
        except Exception:
            _logger.warning(
                "Onboarding failed, removing starter companion: profile=%s", profile_id
            )
            self.companion_repository.delete_companion(starter.id)
            raise

    def get_profile(self, profile_id: UUID, now: datetime | None = None) -> ProfileView:
        """Return the profile, applying the daily calorie reset first."""
        moment = now or datetime.now(tz=UTC)
        profile = self._load(profile_id)
        refreshed = reset_if_new_day(profile, moment)
        if refreshed is not profile:
            _logger.info("Daily calories reset: profile=%s", profile_id)
            self.repository.reset_daily_calories(profile_id, moment)
            refreshed = self._load(profile_id)
        return self.build_view(refreshed)

    async def update_stats(
        self, profile_id: UUID, weight_kg: float, goals: Iterable[str]
    ) -> ProfileView:
        """Update weight and goals, recompute targets and re-check unlocks."""
        profile = self._load(profile_id)
        goal_set = frozenset(goals)
        target = compute_daily_calorie_target(
            profile.gender or DEFAULT_GENDER,
            profile.age or DEFAULT_AGE,
            profile.height_cm,
            weight_kg,
            goal_set,
        )
        updated = replace(
            profile,
            weight_kg=weight_kg,
            goals=goal_set,
            bmi=compute_bmi(weight_kg, profile.height_cm),
            daily_calorie_target=round(target),
        )
        return await self._unlock_and_save(updated)

    async def record_calories(
        self, profile_id: UUID, calories: float, now: datetime | None = None
    ) -> ProfileView:
        """Add eaten calories to both counters and re-check unlocks."""
        moment = now or datetime.now(tz=UTC)
        profile = reset_if_new_day(self._load(profile_id), moment)
        updated = replace(
            profile,
            current_calories_today=profile.current_calories_today + calories,
            total_lifetime_calories=profile.total_lifetime_calories + calories,
            calories_updated_at=moment,
        )
        return await self._unlock_and_save(updated, tolerate_unlock_failure=True)

    def set_active_companion(self, profile_id: UUID, companion_id: UUID) -> ProfileView:
        """Make an owned companion the displayed one."""
        profile = self._load(profile_id)
        if companion_id not in profile.unlocked_companion_ids:
            raise CompanionNotUnlockedError(str(companion_id))
        updated = replace(profile, active_companion_id=companion_id)
        self.repository.save_profile(updated)
        return self.build_view(updated)

    def list_companions(self, profile_id: UUID) -> list[CompanionListing]:
        """Return owned companions followed by the locked catalog."""
        profile = self._load(profile_id)
        owned = self.companion_repository.get_companions(profile.unlocked_companion_ids)
        owned_ids = {companion.id for companion in owned}
        locked = [
            companion
            for companion in self.unlock_service.load_catalog()
            if companion.id not in owned_ids
        ]
        return [
            CompanionListing(
                companion=companion,
                unlocked=companion.id in owned_ids,
                active=companion.id == profile.active_companion_id,
            )
            for companion in [*owned, *locked]
        ]

    def build_view(
        self,
        profile: Profile,
        newly_unlocked: Sequence[Companion] = (),
        catalog: Sequence[Companion] | None = None,
    ) -> ProfileView:
        """Resolve companions and the next unlock goal for a profile."""
        resolved_catalog = (
            catalog if catalog is not None else self.unlock_service.load_catalog()
        )
        # Fresh assets from this request win over the stored rows.
        fresh = {companion.id: companion for companion in newly_unlocked}
        unlocked = [
            fresh.get(companion.id, companion)
            for companion in self.companion_repository.get_companions(
                profile.unlocked_companion_ids
            )
        ]
        active = next(
            (c for c in unlocked if c.id == profile.active_companion_id), None
        )
        return ProfileView(
            profile=profile,
            active_companion=active,
            unlocked_companions=unlocked,
            next_goal=find_next_goal(profile, resolved_catalog),
            newly_unlocked=list(newly_unlocked),
        )

    async def _unlock_and_save(
        self,
        profile: Profile,
        extra_companion_ids: Sequence[UUID] = (),
        *,
        tolerate_unlock_failure: bool = False,
    ) -> ProfileView:
        try:
            catalog = self.unlock_service.load_catalog()
            newly_unlocked = await self.unlock_service.check_and_unlock(
                profile, catalog
            )
        except Exception:
            if not tolerate_unlock_failure:
                raise
            _logger.exception(
                "Unlock check failed, saving progress without unlocks",
                extra={"profile_id": str(profile.id)},
            )
            catalog, newly_unlocked = [], []
        new_ids = [companion.id for companion in newly_unlocked]
        final = replace(
            profile,
            unlocked_companion_ids=profile.unlocked_companion_ids | set(new_ids),
        )
        self.repository.save_profile(final, [*extra_companion_ids, *new_ids])
        return self.build_view(final, newly_unlocked, catalog)

    async def _render_starter(
        self, profile_id: UUID, prompt: str, motion_prompt: str
    ) -> str:
        try:
            return await self.art_service.render(prompt, motion_prompt)
        except Exception:
            _logger.exception(
                "Starter companion generation failed, using fallback",
                extra={"profile_id": str(profile_id)},
            )
            return self.fallback_asset_url

    def _load(self, profile_id: UUID) -> Profile:
        profile = self.repository.get_profile(profile_id)
        if profile is None:
            raise ProfileNotFoundError(str(profile_id))
        return profile
