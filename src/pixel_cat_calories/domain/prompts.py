"""Prompt builders for companion art generation."""

import random
from collections.abc import Iterable

from pixel_cat_calories.domain.models import BmiCategory, Goal

_BODY_DESCRIPTIONS = {
    BmiCategory.SLIM: "a slender, agile",
    BmiCategory.NORMAL: "a healthy, balanced",
    BmiCategory.FAT: "a chubby, cuddly",
    BmiCategory.OBESE: "a very round, plump",
}

_GOAL_DESCRIPTIONS = {
    Goal.BE_SLIMMER: "trying to lose weight, focused, ",
    Goal.BE_FATTER: "trying to gain weight, hungry, ",
    Goal.REDUCE_CARBOHYDRATE: "avoiding carbs, disciplined, ",
    Goal.INCREASE_PROTEIN: "building muscle, strong, ",
    Goal.MAINTAIN_WEIGHT: "balanced, serene, ",
}

_GOAL_MOTIONS = {
    Goal.BE_SLIMMER: "jogging in place with quick light steps",
    Goal.BE_FATTER: "happily munching on a bowl of food",
    Goal.REDUCE_CARBOHYDRATE: "turning its nose up at a slice of bread",
    Goal.INCREASE_PROTEIN: "lifting a tiny dumbbell with determination",
    Goal.MAINTAIN_WEIGHT: "stretching slowly in a calm yoga pose",
}
_DEFAULT_MOTION = "breathing gently, blinking and swishing its tail"

ADJECTIVES = ("happy", "playful", "curious", "sleepy", "energetic")
POSES = ("sitting", "standing", "stretching", "licking paws")
FUR_COLORS = ("brown", "orange", "black", "white", "calico", "grey", "blue")

PIXEL_ART_DIRECTIVES = (
    "8-bit pixel art, retro game style, low resolution, sharp pixels, "
    "isolated on transparent background."
)


def build_companion_prompt(
    bmi_category: BmiCategory,
    goals: Iterable[str],
    rng: random.Random | None = None,
) -> str:
    """Describe a pixel cat shaped by the profile's body type and goals."""
    chooser = rng or random.Random()
    goal_set = set(goals)
    goal_desc = "".join(
        description
        for goal, description in _GOAL_DESCRIPTIONS.items()
        if goal in goal_set
    )
    adjective = chooser.choice(ADJECTIVES)
    pose = chooser.choice(POSES)
    fur = chooser.choice(FUR_COLORS)
    return (
        f"8-bit pixel art, {_BODY_DESCRIPTIONS[bmi_category]} cat, "
        f"{goal_desc}{adjective}, {pose} pose, {fur} fur, simple background."
    )


def build_animation_prompt(name: str, goals: Iterable[str]) -> str:
    """Describe the looping motion for a companion's animation."""
    goal_set = set(goals)
    motion = next(
        (motion for goal, motion in _GOAL_MOTIONS.items() if goal in goal_set),
        _DEFAULT_MOTION,
    )
    return (
        f"{name}, a pixel art cat, {motion}. "
        "Smooth seamless loop, static camera, retro game sprite animation."
    )


def decorate_image_prompt(prompt: str) -> str:
    """Append pixel-art directives for the image model."""
    return f"{prompt}, {PIXEL_ART_DIRECTIVES}"


def starter_companion_name(bmi_category: BmiCategory) -> str:
    """Return the display name for a starter companion."""
    return f"{bmi_category.value.capitalize()} Cat"
