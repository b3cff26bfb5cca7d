"""OpenAI Responses API client for meal photo recognition."""

import json
import logging
from dataclasses import dataclass

from openai import AsyncOpenAI

from pixel_cat_calories.services.vision import VisionClient

_logger = logging.getLogger(__name__)

_SCHEMA_NAME = "food_recognition"


@dataclass
class OpenAIVisionClient(VisionClient):
    """Vision client that sends one meal photo per Responses API call."""

    client: AsyncOpenAI
    image_detail: str = "auto"

    @classmethod
    def create(
        cls, api_key: str, image_detail: str = "auto"
    ) -> "OpenAIVisionClient":
        """Create an OpenAI vision client."""
        return cls(client=AsyncOpenAI(api_key=api_key), image_detail=image_detail)

    async def extract(  # noqa: PLR0913
        self,
        *,
        model: str,
        reasoning_effort: str | None,
        store: bool,
        image_data_url: str,
        schema: dict[str, object],
        prompt: str,
    ) -> dict[str, object]:
        """Return the detected foods as JSON matching ``schema``.

        Raises ``RuntimeError`` when the model stops early or returns text
        that is not valid JSON.
        """
        request: dict[str, object] = {
            "model": model,
            "input": [
                {
                    "role": "user",
                    "content": [
                        {"type": "input_text", "text": prompt},
                        {
                            "type": "input_image",
                            "image_url": image_data_url,
                            "detail": self.image_detail,
                        },
                    ],
                }
            ],
            "text": {
                "format": {
                    "type": "json_schema",
                    "name": _SCHEMA_NAME,
                    "strict": True,
                    "schema": schema,
                }
            },
            "store": store,
        }
        if reasoning_effort:
            request["reasoning"] = {"effort": reasoning_effort}

        response = await self.client.responses.create(**request)
        if response.status == "incomplete":
            reason = getattr(response.incomplete_details, "reason", None)
            raise RuntimeError(f"Food recognition stopped early: {reason}")
        if not response.output_text:
            raise RuntimeError("OpenAI returned an empty food recognition response")
        _logger.debug("Food recognition output: %s", response.output_text)
        try:
            return json.loads(response.output_text)
        except json.JSONDecodeError as exc:
            raise RuntimeError(
                "OpenAI returned malformed food recognition JSON"
            ) from exc
