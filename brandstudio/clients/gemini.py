"""Gemini client for text, structured output, image and video generation."""

import logging
from typing import Any

from google import genai
from google.genai import types

from .. import config
from ..models.credential import Credential
from ..utils import image_mime_type

logger = logging.getLogger(__name__)

Part = types.Part | str


def image_part(data: bytes) -> types.Part:
    """Inline image part with a sniffed mime type."""
    return types.Part.from_bytes(data=data, mime_type=image_mime_type(data))


def _to_content(parts: list[Part]) -> types.Content:
    """Wrap mixed image/text parts as a single user-role content."""
    return types.Content(
        role="user",
        parts=[types.Part.from_text(text=p) if isinstance(p, str) else p for p in parts],
    )


class GeminiClient:
    """Client for Gemini text/image models and Veo video jobs.

    No retries happen here: a failed call surfaces to the caller, who decides
    whether to issue a fresh one.
    """

    def __init__(
        self,
        api_key: str,
        text_model: str = config.TEXT_MODEL,
        image_model: str = config.IMAGE_MODEL,
        video_model: str = config.VIDEO_MODEL,
    ):
        self.client = genai.Client(api_key=api_key)
        self.text_model = text_model
        self.image_model = image_model
        self.video_model = video_model

    @classmethod
    def from_credential(cls, credential: Credential, **kwargs) -> "GeminiClient":
        return cls(api_key=credential.api_key, **kwargs)

    def generate_text(self, parts: list[Part], search: bool = False) -> str:
        """Generate free text. With search=True the call is grounded in Google Search."""
        cfg = None
        if search:
            cfg = types.GenerateContentConfig(
                tools=[types.Tool(google_search=types.GoogleSearch())],
            )
        response = self.client.models.generate_content(
            model=self.text_model,
            contents=[_to_content(parts)],
            config=cfg,
        )
        return (response.text or "").strip()

    def generate_json(self, parts: list[Part], schema: dict[str, Any]) -> str:
        """Generate schema-constrained JSON. Returns the raw (possibly fenced) text."""
        response = self.client.models.generate_content(
            model=self.text_model,
            contents=[_to_content(parts)],
            config=types.GenerateContentConfig(
                response_mime_type="application/json",
                response_schema=schema,
            ),
        )
        return response.text or ""

    def generate_image(
        self,
        parts: list[Part],
        image_size: str,
        aspect_ratio: str | None = None,
    ) -> bytes | None:
        """
        Generate one image from mixed image/text parts.

        Args:
            parts: Reference images (types.Part) and text instructions, in order
            image_size: "1K", "2K" or "4K"
            aspect_ratio: Output aspect ratio, or None to follow the references

        Returns:
            Generated image bytes, or None if the response carried no image
        """
        response = self.client.models.generate_content(
            model=self.image_model,
            contents=[_to_content(parts)],
            config=types.GenerateContentConfig(
                response_modalities=["IMAGE", "TEXT"],
                image_config=types.ImageConfig(
                    aspect_ratio=aspect_ratio,
                    image_size=image_size,
                ),
            ),
        )

        # Extract generated image from response
        if response.candidates:
            content = response.candidates[0].content
            for part in (content.parts if content else None) or []:
                if part.inline_data and (part.inline_data.mime_type or "").startswith("image/"):
                    return part.inline_data.data
        return None

    def submit_video(
        self,
        prompt: str,
        image: bytes,
        resolution: str = config.VIDEO_RESOLUTION,
        aspect_ratio: str = config.VIDEO_ASPECT_RATIO,
    ) -> types.GenerateVideosOperation:
        """Start a video job seeded by a reference image. Returns the operation handle."""
        return self.client.models.generate_videos(
            model=self.video_model,
            prompt=prompt,
            image=types.Image(image_bytes=image, mime_type=image_mime_type(image)),
            config=types.GenerateVideosConfig(
                number_of_videos=1,
                resolution=resolution,
                aspect_ratio=aspect_ratio,
            ),
        )

    def get_operation(self, operation: types.GenerateVideosOperation) -> types.GenerateVideosOperation:
        """Re-fetch an operation's status."""
        return self.client.operations.get(operation)

    @staticmethod
    def video_uri(operation: types.GenerateVideosOperation) -> str | None:
        """Result URI of a completed video operation, if any."""
        response = getattr(operation, "response", None)
        videos = getattr(response, "generated_videos", None) or []
        if not videos or not videos[0].video:
            return None
        return videos[0].video.uri
