"""Video rendering and real-world previews of finished assets."""

import logging
import threading

from ..clients.gemini import GeminiClient
from ..models.asset import AssetCategory, GeneratedAsset
from ..models.brand import BrandSpecification
from ..models.credential import Credential, require_credential
from .jobs import AsyncJobPoller, sign_uri
from .scenes import build_video_prompt, scene_direction

logger = logging.getLogger(__name__)


class VideoRenderer:
    """Submit an image-seeded video job and poll it to a downloadable URI."""

    def __init__(self, gemini: GeminiClient, poller: AsyncJobPoller | None = None):
        self.gemini = gemini
        self.poller = poller or AsyncJobPoller(
            refresh=gemini.get_operation,
            extract_uri=GeminiClient.video_uri,
        )

    def render(
        self,
        credential: Credential | None,
        prompt: str,
        image: bytes,
        cancel: threading.Event | None = None,
    ) -> str:
        """
        Render a video and return its signed URI.

        Raises:
            ConfigurationError: no usable credential (checked before submitting)
            JobTimeout: still running when the poll budget ran out
            JobFailure: completed without a video
            JobCancelled: cancel was set
        """
        credential = require_credential(credential)
        uri = self.poller.run(lambda: self.gemini.submit_video(prompt, image), cancel)
        logger.info("Video generated successfully")
        return sign_uri(uri, credential.api_key)


class RealWorldPreviewService:
    """Show a finished asset in a real-world scene (worn, posted, on a billboard)."""

    def __init__(self, gemini: GeminiClient, renderer: VideoRenderer | None = None):
        self.renderer = renderer or VideoRenderer(gemini)

    def generate(
        self,
        credential: Credential | None,
        brand: BrandSpecification,
        image: bytes,
        category: AssetCategory,
        subtype: str,
        cancel: threading.Event | None = None,
    ) -> GeneratedAsset:
        direction = scene_direction(subtype, brand)
        prompt = build_video_prompt(direction, brand)
        logger.info(f"Generating real-world preview for {subtype}")

        url = self.renderer.render(credential, prompt, image, cancel)
        return GeneratedAsset(
            category=category,
            subtype=subtype,
            url=url,
            prompt_used=prompt,
            base_image=image,
        )
