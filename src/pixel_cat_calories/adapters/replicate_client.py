"""Replicate predictions API client for companion art."""

import asyncio
import logging
from dataclasses import dataclass

import httpx

from pixel_cat_calories.services.assets import AssetGenerator

_logger = logging.getLogger(__name__)

_TERMINAL_STATUSES = {"succeeded", "failed", "canceled"}


@dataclass
class ReplicateClient:
    """HTTPX-backed client that runs Replicate models to completion."""

    api_token: str
    base_url: str
    http_client: httpx.AsyncClient
    poll_interval_seconds: float = 2.0
    max_polls: int = 90

    @classmethod
    def create(
        cls,
        api_token: str,
        base_url: str = "https://api.replicate.com/v1",
        poll_interval_seconds: float = 2.0,
        max_polls: int = 90,
    ) -> "ReplicateClient":
        """Create a Replicate client with a managed httpx session."""
        return cls(
            api_token=api_token,
            base_url=base_url,
            http_client=httpx.AsyncClient(),
            poll_interval_seconds=poll_interval_seconds,
            max_polls=max_polls,
        )

    async def run(self, model: str, model_input: dict[str, object]) -> object:
        """Create a prediction and return its output once it succeeds.

        ``model`` is either ``owner/name`` or ``owner/name:version``.
        """
        if ":" in model:
            _, version = model.split(":", maxsplit=1)
            url = f"{self.base_url}/predictions"
            body: dict[str, object] = {"version": version, "input": model_input}
        else:
            url = f"{self.base_url}/models/{model}/predictions"
            body = {"input": model_input}
        response = await self.http_client.post(
            url,
            headers={**self._headers(), "Prefer": "wait"},
            json=body,
            timeout=90,
        )
        response.raise_for_status()
        prediction = response.json()

        polls = 0
        while prediction.get("status") not in _TERMINAL_STATUSES:
            if polls >= self.max_polls:
                raise RuntimeError(
                    f"Replicate prediction {prediction.get('id')} did not finish"
                )
            polls += 1
            await asyncio.sleep(self.poll_interval_seconds)
            prediction = await self._get(str(prediction["urls"]["get"]))

        if prediction.get("status") != "succeeded":
            raise RuntimeError(
                f"Replicate prediction {prediction.get('status')}: "
                f"{prediction.get('error')}"
            )
        return prediction.get("output")

    async def _get(self, url: str) -> dict[str, object]:
        response = await self.http_client.get(url, headers=self._headers(), timeout=30)
        response.raise_for_status()
        return response.json()

    def _headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self.api_token}"}

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()


@dataclass
class ReplicateAssetGenerator(AssetGenerator):
    """Generates pixel-art stills and animates them with Replicate models."""

    client: ReplicateClient
    image_model: str
    video_model: str
    image_size: int = 256

    async def generate_static(self, prompt: str) -> str:
        """Generate a pixel-art image and return its URL."""
        _logger.info("Generating companion image: %s", prompt)
        output = await self.client.run(
            self.image_model,
            {"prompt": prompt, "width": self.image_size, "height": self.image_size},
        )
        return _first_url(output)

    async def animate(self, image_url: str, motion_prompt: str) -> str:
        """Animate an image into a short looping video and return its URL."""
        _logger.info("Generating companion video: %s", motion_prompt)
        output = await self.client.run(
            self.video_model,
            {"prompt": motion_prompt, "first_frame_image": image_url},
        )
        return _first_url(output)


def _first_url(output: object) -> str:
    """Extract the first URL from a Replicate output payload."""
    if isinstance(output, str) and output:
        return output
    if isinstance(output, list) and output and isinstance(output[0], str):
        return output[0]
    raise RuntimeError("Replicate did not return an asset URL")
