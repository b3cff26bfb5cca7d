"""Companion art generation."""

import logging
from dataclasses import dataclass
from typing import Protocol

from pixel_cat_calories.domain.prompts import decorate_image_prompt

_logger = logging.getLogger(__name__)


class AssetGenerator(Protocol):
    """Interface for the external image and video generation models."""

    async def generate_static(self, prompt: str) -> str:
        """Generate a still image for a prompt and return its URL."""

    async def animate(self, image_url: str, motion_prompt: str) -> str:
        """Animate a still image and return the video URL."""


@dataclass
class CompanionArtService:
    """Renders companion assets in one or two stages."""

    generator: AssetGenerator
    animate: bool = True

    async def render(self, prompt: str, motion_prompt: str | None = None) -> str:
        """Return an asset URL for a companion prompt.

        The image stage always runs. When animation is enabled and a motion
        prompt is given, the still image is animated and the video URL is
        returned instead. Generation errors propagate to the caller.
        """
        image_url = await self.generator.generate_static(decorate_image_prompt(prompt))
        if not self.animate or not motion_prompt:
            return image_url
        _logger.info("Animating companion image: %s", image_url)
        return await self.generator.animate(image_url, motion_prompt)
