"""Companion progression rules: daily reset, unlock criteria, next goal."""

import math
from collections.abc import Iterable
from dataclasses import replace
from datetime import UTC, datetime
from uuid import UUID

from pixel_cat_calories.domain.metrics import profile_bmi_category
from pixel_cat_calories.domain.models import Companion, Profile


def reset_if_new_day(profile: Profile, now: datetime) -> Profile:
    """Zero today's calories when the last counter write was on an earlier UTC day."""
    last_update = profile.calories_updated_at
    if last_update is None:
        return profile
    if _utc_date(last_update) < _utc_date(now):
        return replace(profile, current_calories_today=0.0)
    return profile


def meets_criteria(profile: Profile, companion: Companion) -> bool:
    """Return True when every present criteria clause holds for the profile."""
    criteria = companion.unlock_criteria
    if (
        criteria.total_calories is not None
        and profile.total_lifetime_calories < criteria.total_calories
    ):
        return False
    if not criteria.goal_match <= profile.goals:
        return False
    if criteria.bmi_target is not None:
        return profile_bmi_category(profile) == criteria.bmi_target
    return True


def locked_candidates(
    profile: Profile, catalog: Iterable[Companion]
) -> list[Companion]:
    """Return non-default companions the profile has not unlocked yet."""
    seen: set[UUID] = set()
    candidates: list[Companion] = []
    for companion in catalog:
        if companion.is_default or companion.id in profile.unlocked_companion_ids:
            continue
        if companion.id in seen:
            continue
        seen.add(companion.id)
        candidates.append(companion)
    return candidates


def find_next_goal(profile: Profile, catalog: Iterable[Companion]) -> Companion | None:
    """Return the locked companion with the lowest calorie threshold."""
    candidates = locked_candidates(profile, catalog)
    if not candidates:
        return None
    return min(candidates, key=_next_goal_sort_key)


def _next_goal_sort_key(companion: Companion) -> tuple[float, str]:
    threshold = companion.unlock_criteria.total_calories
    return (math.inf if threshold is None else threshold, companion.name)


def _utc_date(moment: datetime) -> tuple[int, int, int]:
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=UTC)
    utc = moment.astimezone(UTC)
    return (utc.year, utc.month, utc.day)
