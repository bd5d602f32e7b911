"""Brand service - synthesize brand DNA and analyze inspiration images."""

import logging
import uuid
from typing import Callable

from ..clients.gemini import GeminiClient, image_part
from ..clients.media import MediaFetchResolver
from ..errors import LogoMissingError, ParseFailure
from ..models.brand import BrandSpecification, InspirationCue
from ..utils import parse_json_response
from .logo import LogoResolver

logger = logging.getLogger(__name__)

StatusCallback = Callable[[str], None]

BRAND_DNA_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "colors": {"type": "ARRAY", "items": {"type": "STRING"}, "description": "Hex codes"},
        "typography": {"type": "STRING"},
        "visualEssence": {"type": "STRING", "description": "Visual prompt description"},
        "designSystem": {"type": "STRING", "description": "Bullet points on rules"},
        "keywords": {"type": "ARRAY", "items": {"type": "STRING"}},
        "logoUrl": {
            "type": "STRING",
            "description": "Direct URL to the logo image found on the web, or empty string if not found.",
        },
    },
    "required": ["colors", "typography", "visualEssence", "designSystem", "keywords"],
}

CUES_SCHEMA = {"type": "ARRAY", "items": {"type": "STRING"}}


def choose_logo(
    manual: bytes | None,
    extracted: bytes | None,
    website_url: str | None = None,
) -> bytes | None:
    """
    Pick the logo to save with a brand.

    A manual upload always wins over an extracted logo. When a website was
    given but neither exists, saving is blocked.
    """
    logo = manual or extracted
    if website_url and not logo:
        raise LogoMissingError(
            "Auto-extraction failed. Please upload logo manually to prevent random generation."
        )
    return logo


class BrandService:
    """Create brand DNA from a name, description and optional website."""

    def __init__(
        self,
        gemini: GeminiClient,
        fetcher: MediaFetchResolver,
        logo_resolver: LogoResolver | None = None,
    ):
        self.gemini = gemini
        self.fetcher = fetcher
        self.logo_resolver = logo_resolver or LogoResolver(fetcher)

    def synthesize(
        self,
        name: str,
        description: str,
        website_url: str | None = None,
        on_status: StatusCallback | None = None,
    ) -> BrandSpecification:
        """
        Synthesize brand DNA.

        1. Research the website with search grounding (skipped on failure)
        2. Extract colors, typography, essence, rules and keywords as JSON
        3. Fetch the logo URL the model found, if any

        Raises:
            ParseFailure: the extraction response is not valid JSON
        """
        status = on_status or (lambda _msg: None)
        status("Initializing AI Agent...")

        search_context = ""
        if website_url:
            status(f"Scanning {website_url} for visual cues...")
            search_context = self._research_website(name, website_url)
            status("Website context acquired..." if search_context else "Web scan skipped, proceeding with description...")
        else:
            status("Analyzing brand description...")

        prompt = self._build_dna_prompt(name, description, search_context)

        status("Synthesizing Color Palette & Typography...")
        raw = self.gemini.generate_json([prompt], BRAND_DNA_SCHEMA)
        data = parse_json_response(raw or "{}")
        if not isinstance(data, dict):
            raise ParseFailure("Brand DNA response is not a JSON object", raw_output=raw)

        status("Finalizing Design System...")
        logo = None
        logo_url = (data.get("logoUrl") or "").strip()
        if logo_url:
            status("Extracting Logo Asset...")
            payload = self.fetcher.resolve(logo_url)
            logo = payload.data if payload else None

        status("Brand DNA Forged.")
        return BrandSpecification(
            name=name,
            description=description,
            website_url=website_url,
            colors=tuple(data.get("colors") or ()),
            typography=data.get("typography") or "",
            visual_essence=data.get("visualEssence") or "",
            design_system=data.get("designSystem") or "",
            keywords=tuple(data.get("keywords") or ()),
            logo=logo,
        )

    def auto_logo(self, website_url: str) -> bytes | None:
        """Logo from public icon services, used before a manual upload exists."""
        payload = self.logo_resolver.resolve(website_url)
        return payload.data if payload else None

    def save(
        self,
        brand: BrandSpecification,
        manual_logo: bytes | None = None,
    ) -> BrandSpecification:
        """Attach the final logo to synthesized DNA (manual upload preferred)."""
        logo = choose_logo(manual_logo, brand.logo, brand.website_url)
        return brand.with_logo(logo)

    def analyze_inspiration(self, image: bytes, note: str) -> InspirationCue:
        """Extract 3-5 short visual style cues from an inspiration image."""
        prompt = (
            f'Analyze this image. User note: "{note}". Extract 3-5 short, specific visual style cues '
            "(e.g., 'Chromatic aberration', 'Halftone patterns') that can be used in a prompt."
        )
        raw = self.gemini.generate_json([image_part(image), prompt], CUES_SCHEMA)
        cues = parse_json_response(raw or "[]")
        if not isinstance(cues, list):
            raise ParseFailure("Inspiration cues response is not a JSON array", raw_output=raw)

        logger.info(f"Extracted {len(cues)} inspiration cues")
        return InspirationCue(
            id=uuid.uuid4().hex,
            image=image,
            note=note,
            cues=tuple(str(c).strip() for c in cues if str(c).strip()),
        )

    def _research_website(self, name: str, website_url: str) -> str:
        """Search-grounded summary of the site's visual identity. Empty on failure."""
        prompt = (
            f"Research the visual identity and brand values of {name} at {website_url}. "
            "Summarize the color palette, font styles, and overall vibe. "
            "Find a direct URL to their logo if possible."
        )
        try:
            return self.gemini.generate_text([prompt], search=True)
        except Exception as e:
            logger.warning(f"Search grounding failed for {website_url}: {e}")
            return ""

    def _build_dna_prompt(self, name: str, description: str, search_context: str) -> str:
        lines = [
            "Act as a Creative Director. Analyze this brand request.",
            f"Brand: {name}",
            f"User Description: {description}",
        ]
        if search_context:
            lines.append(f"Web Context: {search_context}")
        lines.extend([
            "",
            "Extract the Brand DNA.",
            "IMPORTANT: If you found a logo URL in the web context, include it in the 'logoUrl' field.",
        ])
        return "\n".join(lines)
