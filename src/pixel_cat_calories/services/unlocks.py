"""Companion unlock orchestration."""

import logging
from collections.abc import Iterable
from dataclasses import dataclass, replace
from typing import Protocol
from uuid import UUID

from pixel_cat_calories.domain.models import Companion, Profile
from pixel_cat_calories.domain.progression import locked_candidates, meets_criteria
from pixel_cat_calories.domain.prompts import build_animation_prompt
from pixel_cat_calories.services.assets import CompanionArtService

_logger = logging.getLogger(__name__)


class CompanionRepository(Protocol):
    """Persistence interface for the companion catalog."""

    def list_catalog(self) -> list[Companion]:
        """Return all non-default companions."""

    def get_companions(self, companion_ids: Iterable[UUID]) -> list[Companion]:
        """Return companions by id, skipping unknown ids."""

    def create_companion(self, companion: Companion) -> Companion:
        """Insert a companion and return the stored record."""

    def update_asset(self, companion_id: UUID, asset_url: str) -> None:
        """Persist a generated asset URL on a companion."""

    def delete_companion(self, companion_id: UUID) -> None:
        """Remove a companion that no profile owns."""


@dataclass
class UnlockService:
    """Evaluates the catalog and materialises newly unlocked companions."""

    repository: CompanionRepository
    art_service: CompanionArtService

    def load_catalog(self) -> list[Companion]:
        """Return the unlockable catalog."""
        return self.repository.list_catalog()

    async def check_and_unlock(
        self, profile: Profile, catalog: Iterable[Companion]
    ) -> list[Companion]:
        """Return companions newly unlocked by an already-updated profile.

        Each winner gets fresh art. A failed generation keeps the unlock and
        returns the companion without the new asset. Persisting the unlocks on
        the profile is left to the caller.
        """
        unlocked: list[Companion] = []
        for candidate in locked_candidates(profile, catalog):
            if not meets_criteria(profile, candidate):
                _logger.info(
                    "Companion not unlocked: profile=%s companion=%s",
                    profile.id,
                    candidate.name,
                )
                continue
            _logger.info(
                "Companion unlocked: profile=%s companion=%s",
                profile.id,
                candidate.name,
            )
            unlocked.append(await self._attach_asset(profile, candidate))
        return unlocked

    async def _attach_asset(self, profile: Profile, candidate: Companion) -> Companion:
        motion_prompt = build_animation_prompt(candidate.name, profile.goals)
        try:
            asset_url = await self.art_service.render(
                candidate.generation_prompt, motion_prompt
            )
        except Exception:
            _logger.exception(
                "Companion asset generation failed",
                extra={
                    "profile_id": str(profile.id),
                    "companion_id": str(candidate.id),
                },
            )
            return candidate
        self.repository.update_asset(candidate.id, asset_url)
        return replace(candidate, asset_url=asset_url)
