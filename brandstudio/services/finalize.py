"""Finalizer - re-generate a chosen draft at production resolution."""

import logging

from .. import config
from ..clients.gemini import GeminiClient, image_part
from ..errors import FinalizationFailure
from ..models.asset import AssetCategory, GeneratedAsset
from ..models.brand import BrandSpecification
from ..models.credential import Credential, require_credential
from ..utils import to_data_url

logger = logging.getLogger(__name__)

LOGO_FIDELITY_DIRECTIVE = (
    "Ensure the logo (provided as the second image) is rendered with perfect clarity and fidelity."
)


def build_finalize_prompt(brand: BrandSpecification, subtype: str, image_size: str) -> str:
    return (
        "Re-create this concept in extremely high resolution and production quality.\n"
        f"Item: {subtype} for brand {brand.name}.\n"
        "Maintain the composition and colors of the reference image exactly, "
        "but improve texture, lighting, and detail.\n"
        f"Resolution: {image_size}."
    )


class Finalizer:
    """Upscale a draft into a gallery asset, re-asserting the logo."""

    def __init__(self, gemini: GeminiClient):
        self.gemini = gemini

    def finalize(
        self,
        credential: Credential | None,
        brand: BrandSpecification,
        draft: bytes,
        category: AssetCategory,
        subtype: str,
    ) -> GeneratedAsset:
        """
        Produce the final asset from a draft.

        The draft is the compositional reference. When the brand has a logo it
        is sent again as a second reference.

        Raises:
            ConfigurationError: no usable credential
            FinalizationFailure: the service returned no image
        """
        require_credential(credential)
        settings = config.get_category_settings(category)

        parts = [image_part(draft), build_finalize_prompt(brand, subtype, settings.final_size)]
        if brand.has_logo:
            parts.extend([image_part(brand.logo), LOGO_FIDELITY_DIRECTIVE])

        logger.info(f"Finalizing {subtype} at {settings.final_size} (logo={brand.has_logo})")
        image = self.gemini.generate_image(parts, settings.final_size, settings.aspect_ratio)
        if not image:
            logger.error("No image data in finalization response")
            raise FinalizationFailure()

        return GeneratedAsset(
            category=category,
            subtype=subtype,
            url=to_data_url(image),
            prompt_used="Finalized from draft",
            base_image=draft,
        )
