"""Storyboard orchestration for video ads: script -> keyframes -> full video."""

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Callable

from .. import config
from ..clients.gemini import GeminiClient, image_part
from ..errors import FailureStage, GenerationFailure, ParseFailure
from ..models.asset import AssetCategory, GeneratedAsset
from ..models.brand import BrandSpecification
from ..models.credential import Credential, require_credential
from ..utils import parse_json_response
from .drafts import LOGO_REFERENCE_NOTE
from .preview import VideoRenderer
from .prompt import compose_keyframe_prompt
from .scenes import build_video_prompt, scene_direction

logger = logging.getLogger(__name__)

StatusCallback = Callable[[str], None]

SCENES_SCHEMA = {
    "type": "ARRAY",
    "items": {
        "type": "OBJECT",
        "properties": {"description": {"type": "STRING"}},
        "required": ["description"],
    },
}


@dataclass(frozen=True)
class ChatMessage:
    """One turn of the ad brainstorming conversation."""

    role: str       # "user" or "assistant"
    content: str


@dataclass(frozen=True)
class Keyframe:
    """A storyboard still and the scene it depicts."""

    image: bytes = field(repr=False)
    description: str


@dataclass
class Storyboard:
    """Script and keyframes awaiting confirmation. The script may be edited."""

    concept: str
    script: str
    keyframes: list[Keyframe]

    def edit_script(self, script: str) -> None:
        self.script = script


def format_transcript(conversation: list[ChatMessage]) -> str:
    return "\n".join(f"{m.role.upper()}: {m.content}" for m in conversation)


def brand_summary(brand: BrandSpecification) -> str:
    return (
        f"Brand: {brand.name}\n"
        f"Description: {brand.description}\n"
        f"Colors: {', '.join(brand.palette)}\n"
        f"Typography: {brand.typography}\n"
        f"Visual essence: {brand.visual_essence}\n"
        f"Keywords: {', '.join(brand.keywords)}"
    )


class StoryboardOrchestrator:
    """Multi-stage ad creation. Each stage consumes the previous stage's output."""

    def __init__(
        self,
        gemini: GeminiClient,
        renderer: VideoRenderer | None = None,
        keyframe_count: int = config.KEYFRAME_COUNT,
        min_keyframes: int = config.MIN_KEYFRAMES,
    ):
        self.gemini = gemini
        self.renderer = renderer or VideoRenderer(gemini)
        self.keyframe_count = keyframe_count
        self.min_keyframes = min_keyframes

    def brainstorm(self, brand: BrandSpecification, conversation: list[ChatMessage]) -> str:
        """Creative-director reply in the ad brainstorming chat."""
        prompt = (
            "You are a creative director brainstorming a short video ad with a client.\n\n"
            f"{brand_summary(brand)}\n\n"
            f"Conversation so far:\n{format_transcript(conversation)}\n\n"
            "Reply to the client's last message with concrete, on-brand ideas for the ad. "
            "Keep it concise and ask at most one follow-up question."
        )
        reply = self.gemini.generate_text([prompt])
        if not reply:
            raise GenerationFailure("No brainstorm reply was generated", FailureStage.TEXT)
        return reply

    def write_script(self, brand: BrandSpecification, conversation: list[ChatMessage]) -> str:
        """A 15-20 second voiceover script for the concept agreed in the conversation."""
        prompt = (
            "Write a voiceover script for a 15-20 second video ad.\n\n"
            f"{brand_summary(brand)}\n\n"
            f"Ad concept conversation:\n{format_transcript(conversation)}\n\n"
            "The script must be 40-55 words, match the brand voice, and end with the brand name. "
            "Respond with ONLY the spoken words, no stage directions or labels."
        )
        script = self.gemini.generate_text([prompt])
        if not script:
            raise GenerationFailure("No voiceover script was generated", FailureStage.SCRIPT)
        return script

    def create_keyframes(
        self,
        credential: Credential | None,
        brand: BrandSpecification,
        conversation: list[ChatMessage],
        script: str,
    ) -> list[Keyframe]:
        """
        Describe the key scenes, then render them as stills in parallel.

        Raises:
            ConfigurationError: no usable credential
            ParseFailure: the scene list is not valid JSON
            GenerationFailure: fewer than min_keyframes stills were produced
            Exception: the first failed request's error, in scene order
        """
        require_credential(credential)
        descriptions = self._describe_scenes(brand, conversation, script)
        settings = config.get_category_settings(AssetCategory.VIDEO)

        shared_parts = []
        if brand.has_logo:
            shared_parts = [image_part(brand.logo), LOGO_REFERENCE_NOTE]

        with ThreadPoolExecutor(max_workers=len(descriptions)) as executor:
            futures = [
                executor.submit(
                    self.gemini.generate_image,
                    shared_parts + [compose_keyframe_prompt(brand, description, script)],
                    settings.draft_size,
                    settings.aspect_ratio,
                )
                for description in descriptions
            ]

        # All stills have settled; a service error surfaces as-is
        keyframes = []
        for index, (description, future) in enumerate(zip(descriptions, futures), start=1):
            image = future.result()
            if image:
                keyframes.append(Keyframe(image=image, description=description))
            else:
                logger.warning(f"Keyframe {index} returned no image")

        if len(keyframes) < self.min_keyframes:
            raise GenerationFailure(
                f"Only {len(keyframes)} keyframe(s) generated, need at least {self.min_keyframes}",
                FailureStage.KEYFRAMES,
            )
        return keyframes

    def create_storyboard(
        self,
        credential: Credential | None,
        brand: BrandSpecification,
        conversation: list[ChatMessage],
        on_status: StatusCallback | None = None,
    ) -> Storyboard:
        """Script, then keyframes. Nothing is rendered until render_video is confirmed."""
        require_credential(credential)
        status = on_status or (lambda _msg: None)

        status("Generating the voiceover script...")
        script = self.write_script(brand, conversation)

        status("Creating keyframes...")
        keyframes = self.create_keyframes(credential, brand, conversation, script)

        concept = conversation[-1].content if conversation else ""
        return Storyboard(concept=concept, script=script, keyframes=keyframes)

    def render_video(
        self,
        credential: Credential | None,
        brand: BrandSpecification,
        storyboard: Storyboard,
        subtype: str = "Commercial",
        confirmed: bool = False,
        cancel: threading.Event | None = None,
        on_status: StatusCallback | None = None,
    ) -> GeneratedAsset:
        """
        Render the full ad from the primary keyframe and the current script.

        The storyboard's script at call time (including user edits) is the one
        sent. Requires explicit confirmation.
        """
        if not confirmed:
            raise ValueError("Video generation requires explicit confirmation")
        if not storyboard.keyframes:
            raise ValueError("Storyboard has no keyframes")
        status = on_status or (lambda _msg: None)

        direction = scene_direction(subtype, brand)
        direction["keyframes"] = [k.description for k in storyboard.keyframes]
        prompt = build_video_prompt(direction, brand, script=storyboard.script)

        status("Rendering video...")
        url = self.renderer.render(credential, prompt, storyboard.keyframes[0].image, cancel)
        status("Video ready.")

        return GeneratedAsset(
            category=AssetCategory.VIDEO,
            subtype=subtype,
            url=url,
            prompt_used=prompt,
            base_image=storyboard.keyframes[0].image,
        )

    def _describe_scenes(
        self,
        brand: BrandSpecification,
        conversation: list[ChatMessage],
        script: str,
    ) -> list[str]:
        prompt = (
            f"Plan {self.keyframe_count} keyframes for a video ad.\n\n"
            f"{brand_summary(brand)}\n\n"
            f"Ad concept conversation:\n{format_transcript(conversation)}\n\n"
            f"Voiceover script:\n{script}\n\n"
            f"Return exactly {self.keyframe_count} scene descriptions in story order. "
            "Each description is one or two sentences describing a single advertising still."
        )
        raw = self.gemini.generate_json([prompt], SCENES_SCHEMA)
        data = parse_json_response(raw or "[]")
        if not isinstance(data, list):
            raise ParseFailure("Keyframe plan is not a JSON array", raw_output=raw)

        descriptions = []
        for item in data:
            text = item.get("description") if isinstance(item, dict) else item
            if isinstance(text, str) and text.strip():
                descriptions.append(text.strip())

        if not descriptions:
            raise GenerationFailure("No keyframe scenes were planned", FailureStage.KEYFRAMES)
        return descriptions[: self.keyframe_count]
