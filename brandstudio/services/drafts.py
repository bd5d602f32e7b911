"""Draft fan-out - four creative variants of one asset, generated in parallel."""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass

from .. import config
from ..clients.gemini import GeminiClient, image_part
from ..errors import FailureStage, GenerationFailure
from ..models.asset import AssetCategory, DraftSet
from ..models.brand import BrandSpecification, InspirationCue
from ..models.credential import Credential, require_credential
from .prompt import compose_prompt

logger = logging.getLogger(__name__)

LOGO_REFERENCE_NOTE = "Use the image above as the Brand Logo. Incorporate it into the design."


@dataclass(frozen=True)
class DraftVariant:
    """A creative angle layered onto the shared prompt."""

    name: str
    instruction: str


def build_variants(brand: BrandSpecification, inspirations: list[InspirationCue]) -> list[DraftVariant]:
    """The four creative angles: minimal, bold, artistic, vibrant."""
    if inspirations and inspirations[0].cues:
        artistic = (
            f"Apply these visual styles heavily: {', '.join(inspirations[0].cues[:3])}. "
            "Be creative and experimental."
        )
    else:
        artistic = (
            f"Creative interpretation of {brand.visual_essence}. "
            "Add artistic flair and unique styling."
        )

    return [
        DraftVariant(
            "Minimal",
            "Create a minimal, clean design with simple elements. Focus on typography and negative space. "
            "Keep it understated and elegant.",
        ),
        DraftVariant(
            "Bold",
            f"Use the primary keywords: {', '.join(brand.keywords[:2])}. "
            "Make it bold and striking with strong visual elements.",
        ),
        DraftVariant("Artistic", artistic),
        DraftVariant(
            "Vibrant",
            f"Emphasize the brand colors {', '.join(brand.palette)}. "
            "Create a vibrant, energetic design with maximum visual impact.",
        ),
    ]


class DraftFanoutGenerator:
    """Generate low-resolution drafts, one request per variant, all in parallel."""

    def __init__(self, gemini: GeminiClient, max_workers: int = config.DRAFT_COUNT):
        self.gemini = gemini
        self.max_workers = max_workers

    def generate(
        self,
        credential: Credential | None,
        brand: BrandSpecification,
        inspirations: list[InspirationCue],
        category: AssetCategory,
        subtype: str,
    ) -> DraftSet:
        """
        Generate up to four drafts.

        Waits for every variant to settle. Variants that return no image are
        left out, so fewer than four drafts is normal.

        Raises:
            ConfigurationError: no usable credential
            GenerationFailure: not a single variant produced an image
            Exception: the first failed request's error, in variant order
        """
        require_credential(credential)
        settings = config.get_category_settings(category)
        variants = build_variants(brand, inspirations)[: config.DRAFT_COUNT]

        # Logo reference is shared across all variants
        shared_parts = []
        if brand.has_logo:
            shared_parts = [image_part(brand.logo), LOGO_REFERENCE_NOTE]

        logger.info(f"Generating {len(variants)} drafts for {category.value}/{subtype} (logo={brand.has_logo})")

        variant_parts = [
            shared_parts + [compose_prompt(brand, inspirations, category, subtype, variant.instruction)]
            for variant in variants
        ]

        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            futures = [
                executor.submit(self.gemini.generate_image, parts, settings.draft_size, settings.aspect_ratio)
                for parts in variant_parts
            ]

        # All variants have settled; a service error surfaces as-is
        images = []
        for variant, future in zip(variants, futures):
            image = future.result()
            if image:
                images.append(image)
                logger.info(f"Draft variant {variant.name} generated")
            else:
                logger.warning(f"Draft variant {variant.name} returned no image")

        if not images:
            raise GenerationFailure("No drafts were generated", FailureStage.DRAFTS)

        logger.info(f"Generated {len(images)}/{len(variants)} drafts")
        return DraftSet(images=images)
